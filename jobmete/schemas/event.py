"""
Event Pydantic schemas.
"""

from typing import Literal, Optional
from uuid import UUID
from datetime import datetime

from pydantic import Field

from jobmete.schemas.base import CamelModel, UserScopedRead


EVENT_TYPES = (
    "一次面接",
    "二次面接",
    "最終面接",
    "説明会",
    "インターン",
    "カジュアル面談",
    "その他",
)

EventStatus = Literal["scheduled", "completed", "cancelled"]
EventResult = Literal["passed", "failed", "waiting"]


class EventReview(CamelModel):
    """Post-event self review."""

    feedback: str = ""
    company_match_rate: int = Field(..., ge=1, le=5)
    job_match_rate: int = Field(..., ge=1, le=5)
    reviewed_at: datetime


class EventCreate(CamelModel):
    """Schema for creating an event. The company is resolved by name."""

    company_name: Optional[str] = None
    event_type: Optional[str] = None
    starts_at: datetime
    ends_at: datetime
    location: Optional[str] = None
    memo: Optional[str] = None
    job_position: Optional[str] = None


class EventUpdate(CamelModel):
    """Schema for updating an event. Only fields sent are changed."""

    status: Optional[EventStatus] = None
    result: Optional[EventResult] = None
    result_memo: Optional[str] = None
    job_position: Optional[str] = None
    location: Optional[str] = None
    memo: Optional[str] = None
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None


class EventReviewRequest(CamelModel):
    """Schema for submitting a review; ratings are 1-5."""

    company_match_rate: Optional[int] = None
    job_match_rate: Optional[int] = None
    feedback: Optional[str] = None


class EventRead(UserScopedRead):
    """Schema for reading an event (API response)."""

    company_id: UUID
    company_name: str
    event_type: str
    starts_at: datetime
    ends_at: datetime
    location: str = ""
    memo: str = ""
    status: str
    result: Optional[str] = None
    result_memo: str = ""
    job_position: Optional[str] = None
    review: Optional[EventReview] = None


class CreateEventResponse(CamelModel):
    success: bool = True
    event_id: UUID
    company_id: UUID
