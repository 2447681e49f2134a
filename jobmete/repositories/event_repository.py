"""
Event repository - database operations for Event.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobmete.models.event import Event


class EventRepository:
    """Repository for Event database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: UUID, event_id: UUID) -> Optional[Event]:
        """Get an event by ID for a specific user."""
        result = await self.db.execute(
            select(Event).where(
                Event.id == event_id,
                Event.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def list(self, user_id: UUID, company_id: Optional[UUID] = None) -> List[Event]:
        """List events ordered by start time, optionally for one company."""
        query = select(Event).where(Event.user_id == user_id)

        if company_id is not None:
            query = query.where(Event.company_id == company_id)

        query = query.order_by(Event.starts_at.asc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_reviewed(self, user_id: UUID) -> List[Event]:
        """Events that carry a review, oldest first."""
        result = await self.db.execute(
            select(Event)
            .where(Event.user_id == user_id, Event.review.is_not(None))
            .order_by(Event.starts_at.asc())
        )
        # JSON null and SQL NULL are both "no review"
        return [event for event in result.scalars().all() if event.review]

    async def create(
        self,
        user_id: UUID,
        company_id: UUID,
        company_name: str,
        event_type: str,
        starts_at: datetime,
        ends_at: datetime,
        location: str = "",
        memo: str = "",
        job_position: Optional[str] = None,
    ) -> Event:
        """Create a scheduled event."""
        event = Event(
            user_id=user_id,
            company_id=company_id,
            company_name=company_name,
            event_type=event_type,
            starts_at=starts_at,
            ends_at=ends_at,
            location=location,
            memo=memo,
            status="scheduled",
            result=None,
            result_memo="",
            job_position=job_position,
        )
        self.db.add(event)
        await self.db.flush()
        await self.db.refresh(event)
        return event

    async def update(self, event: Event, update_data: Dict[str, Any]) -> Event:
        for field, value in update_data.items():
            setattr(event, field, value)
        await self.db.flush()
        await self.db.refresh(event)
        return event

    async def set_review(self, event: Event, review: Dict[str, Any]) -> Event:
        event.review = review
        await self.db.flush()
        await self.db.refresh(event)
        return event

    async def delete(self, event: Event) -> None:
        await self.db.delete(event)
        await self.db.flush()
