"""
Event business logic service.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from jobmete.errors import InvalidArgumentError, NotFoundError
from jobmete.models.event import Event
from jobmete.repositories.company_repository import CompanyRepository
from jobmete.repositories.event_repository import EventRepository
from jobmete.schemas.event import EVENT_TYPES, EventCreate, EventReview, EventReviewRequest, EventUpdate
from jobmete.services.ai_analysis_service import GeminiAnalysisClient
from jobmete.services.company_service import CompanyService
from jobmete.utils.time import ensure_aware, utc_now
from jobmete.utils.validators import (
    InputLimits,
    validate_company_name,
    validate_memo,
    validate_short_text,
)

logger = logging.getLogger(__name__)


def _validate_rating(value: Optional[int], field: str) -> int:
    if value is None:
        raise InvalidArgumentError(f"{field} is required")
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
        raise InvalidArgumentError(f"{field} must be an integer between 1 and 5")
    return value


class EventService:
    """Service for event business logic."""

    def __init__(self, db: AsyncSession, analysis_client: Optional[GeminiAnalysisClient] = None):
        self.db = db
        self.repository = EventRepository(db)
        self.company_repository = CompanyRepository(db)
        self.company_service = CompanyService(db, analysis_client)

    async def create_event(self, user_id: UUID, data: EventCreate) -> Event:
        """
        Create an event, registering its company first if needed.

        The company's event_count and last_event_date are updated in the
        same transaction as the event insert.
        """
        company_name = validate_company_name(data.company_name)

        if not data.event_type:
            raise InvalidArgumentError("eventType is required")
        if data.event_type not in EVENT_TYPES:
            raise InvalidArgumentError(f"eventType must be one of: {', '.join(EVENT_TYPES)}")

        starts_at = ensure_aware(data.starts_at)
        ends_at = ensure_aware(data.ends_at)
        if ends_at < starts_at:
            raise InvalidArgumentError("endsAt must not be before startsAt")

        location = validate_short_text(data.location, "location", InputLimits.LOCATION)
        memo = validate_memo(data.memo)
        job_position = validate_short_text(data.job_position, "jobPosition", InputLimits.JOB_POSITION) or None

        registration = await self.company_service.register_company(user_id, company_name)
        company_id = registration.company.id

        event = await self.repository.create(
            user_id=user_id,
            company_id=company_id,
            company_name=company_name,
            event_type=data.event_type,
            starts_at=starts_at,
            ends_at=ends_at,
            location=location,
            memo=memo,
            job_position=job_position,
        )
        await self.company_repository.record_event(user_id, company_id, starts_at)
        await self.db.commit()

        logger.info("Created event %s (%s) for company %s", event.id, event.event_type, company_id)
        return event

    async def list_events(self, user_id: UUID, company_id: Optional[UUID] = None) -> List[Event]:
        return await self.repository.list(user_id, company_id=company_id)

    async def get_event(self, user_id: UUID, event_id: UUID) -> Event:
        event = await self.repository.get_by_id(user_id, event_id)
        if not event:
            raise NotFoundError(f"Event {event_id} not found")
        return event

    async def update_event(self, user_id: UUID, event_id: UUID, data: EventUpdate) -> Event:
        """Apply the fields present in the request."""
        event = await self.get_event(user_id, event_id)
        update_data = data.model_dump(exclude_unset=True)

        if "status" in update_data and update_data["status"] is None:
            raise InvalidArgumentError("status cannot be null")
        if "result_memo" in update_data:
            update_data["result_memo"] = validate_memo(update_data["result_memo"], field="resultMemo")
        if "memo" in update_data:
            update_data["memo"] = validate_memo(update_data["memo"])
        if "location" in update_data:
            update_data["location"] = validate_short_text(
                update_data["location"], "location", InputLimits.LOCATION
            )
        if "job_position" in update_data:
            update_data["job_position"] = validate_short_text(
                update_data["job_position"], "jobPosition", InputLimits.JOB_POSITION
            ) or None

        for field in ("starts_at", "ends_at"):
            if field in update_data:
                if update_data[field] is None:
                    raise InvalidArgumentError(f"{field} cannot be null")
                update_data[field] = ensure_aware(update_data[field])

        starts_at = update_data.get("starts_at", ensure_aware(event.starts_at))
        ends_at = update_data.get("ends_at", ensure_aware(event.ends_at))
        if ends_at < starts_at:
            raise InvalidArgumentError("endsAt must not be before startsAt")

        event = await self.repository.update(event, update_data)
        await self.db.commit()
        return event

    async def review_event(self, user_id: UUID, event_id: UUID, data: EventReviewRequest) -> Event:
        """Attach (or replace) the review of an event."""
        company_match_rate = _validate_rating(data.company_match_rate, "companyMatchRate")
        job_match_rate = _validate_rating(data.job_match_rate, "jobMatchRate")
        feedback = validate_memo(data.feedback, field="feedback", max_length=InputLimits.FEEDBACK)

        event = await self.get_event(user_id, event_id)
        review = EventReview(
            feedback=feedback,
            company_match_rate=company_match_rate,
            job_match_rate=job_match_rate,
            reviewed_at=utc_now(),
        )
        event = await self.repository.set_review(event, review.model_dump(mode="json"))
        await self.db.commit()
        return event

    async def delete_event(self, user_id: UUID, event_id: UUID) -> None:
        event = await self.get_event(user_id, event_id)
        company_id = event.company_id
        await self.repository.delete(event)
        await self.company_repository.forget_event(user_id, company_id)
        await self.db.commit()
        logger.info("Deleted event %s", event_id)
