"""
Event model.

Interviews, info sessions and other dated events attached to a company.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from jobmete.models.base_model import JSONType, UserScopedModel


class Event(UserScopedModel):
    """
    Event table - one scheduled event with an optional post-event review.
    """

    __tablename__ = "event"

    company_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("company.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Name as entered when the event was created
    company_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    event_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    starts_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    ends_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    location: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    memo: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # scheduled, completed, cancelled
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="scheduled",
    )

    # passed, failed, waiting, or NULL
    result: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    result_memo: Mapped[str] = mapped_column(Text, nullable=False, default="")

    job_position: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # feedback, company_match_rate, job_match_rate, reviewed_at
    review: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    __table_args__ = (
        Index("ix_event_user_starts_at", "user_id", "starts_at"),
    )
