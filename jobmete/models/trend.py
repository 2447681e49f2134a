"""
TrendSummary model.

The latest AI-generated trend report for a user. Exactly one row per user;
each analysis run replaces it.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from jobmete.models.base_model import JSONType, UserScopedModel


class TrendSummary(UserScopedModel):
    """Per-user singleton trend report."""

    __tablename__ = "trend_summary"

    summary: Mapped[dict] = mapped_column(JSONType, nullable=False)

    # [{"company_id": ..., "company_name": ...}]
    source_companies: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    review_stats: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    analyzed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    company_count: Mapped[int] = mapped_column(Integer, nullable=False)

    model_used: Mapped[str] = mapped_column(String(100), nullable=False)

    __table_args__ = (
        Index("uq_trend_summary_user", "user_id", unique=True),
    )
