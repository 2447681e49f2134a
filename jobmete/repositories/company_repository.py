"""
Company repository - database operations for Company.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from jobmete.models.company import Company
from jobmete.models.event import Event


class CompanyRepository:
    """Repository for Company database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: UUID, company_id: UUID) -> Optional[Company]:
        """Get a company by ID for a specific user."""
        result = await self.db.execute(
            select(Company).where(
                Company.id == company_id,
                Company.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_by_normalized_name(self, user_id: UUID, normalized_name: str) -> Optional[Company]:
        """Duplicate lookup on the (user_id, normalized_name) key."""
        result = await self.db.execute(
            select(Company).where(
                Company.user_id == user_id,
                Company.normalized_name == normalized_name,
            )
        )
        return result.scalar_one_or_none()

    async def list(self, user_id: UUID) -> List[Company]:
        """All companies of a user, newest first."""
        result = await self.db.execute(
            select(Company)
            .where(Company.user_id == user_id)
            .order_by(Company.first_registered_at.desc(), Company.company_name.asc())
        )
        return list(result.scalars().all())

    async def count(self, user_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Company).where(Company.user_id == user_id)
        )
        return result.scalar_one()

    async def create(
        self,
        user_id: UUID,
        company_name: str,
        normalized_name: str,
        analysis: Dict[str, Any],
        analysis_metadata: Dict[str, Any],
    ) -> Company:
        """
        Insert a company with zeroed stats.

        Raises:
            IntegrityError: If the user already has a company with this
                normalized name
        """
        company = Company(
            user_id=user_id,
            company_name=company_name,
            normalized_name=normalized_name,
            analysis=analysis,
            analysis_metadata=analysis_metadata,
            user_notes="",
            event_count=0,
            last_event_date=None,
        )
        self.db.add(company)
        await self.db.flush()
        await self.db.refresh(company)
        return company

    async def update_analysis(
        self,
        company: Company,
        analysis: Dict[str, Any],
        analysis_metadata: Dict[str, Any],
    ) -> Company:
        """Overwrite analysis and metadata; stats are left alone."""
        company.analysis = analysis
        company.analysis_metadata = analysis_metadata
        await self.db.flush()
        await self.db.refresh(company)
        return company

    async def update_notes(self, company: Company, user_notes: str) -> Company:
        company.user_notes = user_notes
        await self.db.flush()
        await self.db.refresh(company)
        return company

    async def record_event(self, user_id: UUID, company_id: UUID, event_date: datetime) -> None:
        """Bump event_count and set last_event_date in one UPDATE."""
        await self.db.execute(
            update(Company)
            .where(Company.id == company_id, Company.user_id == user_id)
            .values(
                event_count=Company.event_count + 1,
                last_event_date=event_date,
                updated_at=func.now(),
            )
        )

    async def forget_event(self, user_id: UUID, company_id: UUID) -> None:
        """Decrement event_count, never below zero."""
        await self.db.execute(
            update(Company)
            .where(Company.id == company_id, Company.user_id == user_id)
            .values(
                event_count=case(
                    (Company.event_count > 0, Company.event_count - 1),
                    else_=0,
                ),
                updated_at=func.now(),
            )
        )

    async def delete(self, company: Company) -> None:
        """Delete a company and its events."""
        await self.db.execute(
            delete(Event).where(
                Event.company_id == company.id,
                Event.user_id == company.user_id,
            )
        )
        await self.db.delete(company)
        await self.db.flush()
