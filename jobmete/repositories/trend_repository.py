"""
Trend repository - database operations for TrendSummary.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobmete.models.trend import TrendSummary


class TrendRepository:
    """Repository for the per-user trend summary."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_latest(self, user_id: UUID) -> Optional[TrendSummary]:
        result = await self.db.execute(
            select(TrendSummary).where(TrendSummary.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def replace(
        self,
        user_id: UUID,
        summary: Dict[str, Any],
        source_companies: List[Dict[str, Any]],
        review_stats: Optional[Dict[str, Any]],
        analyzed_at: datetime,
        company_count: int,
        model_used: str,
    ) -> TrendSummary:
        """Drop the previous summary (if any) and store a new one."""
        await self.db.execute(
            delete(TrendSummary).where(TrendSummary.user_id == user_id)
        )
        trend = TrendSummary(
            user_id=user_id,
            summary=summary,
            source_companies=source_companies,
            review_stats=review_stats,
            analyzed_at=analyzed_at,
            company_count=company_count,
            model_used=model_used,
        )
        self.db.add(trend)
        await self.db.flush()
        await self.db.refresh(trend)
        return trend
