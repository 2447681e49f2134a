"""
Event router - API endpoints for events and their reviews.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from jobmete.core.dependencies import GeminiAnalysisClient, get_analysis_client, get_current_user, get_db
from jobmete.models.user import User
from jobmete.schemas.base import SuccessResponse
from jobmete.schemas.event import (
    CreateEventResponse,
    EventCreate,
    EventRead,
    EventReviewRequest,
    EventUpdate,
)
from jobmete.services.event_service import EventService

router = APIRouter(prefix="/events", tags=["events"])


@router.post("", response_model=CreateEventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    analysis_client: GeminiAnalysisClient = Depends(get_analysis_client),
):
    """
    Create an event.

    The company is looked up by normalized name and registered (with AI
    analysis) when it does not exist yet.
    """
    service = EventService(db, analysis_client)
    event = await service.create_event(current_user.id, data)
    return CreateEventResponse(event_id=event.id, company_id=event.company_id)


@router.get("", response_model=List[EventRead])
async def list_events(
    company_id: Optional[UUID] = Query(None, alias="companyId"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List events ordered by start time. Filter: companyId."""
    service = EventService(db)
    return await service.list_events(current_user.id, company_id=company_id)


@router.get("/{event_id}", response_model=EventRead)
async def get_event(
    event_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get an event by ID."""
    service = EventService(db)
    return await service.get_event(current_user.id, event_id)


@router.patch("/{event_id}", response_model=EventRead)
async def update_event(
    event_id: UUID,
    data: EventUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update status, result, memos, position, location or times."""
    service = EventService(db)
    return await service.update_event(current_user.id, event_id, data)


@router.put("/{event_id}/review", response_model=EventRead)
async def review_event(
    event_id: UUID,
    data: EventReviewRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Attach a review (two 1-5 match ratings and feedback) to an event."""
    service = EventService(db)
    return await service.review_event(current_user.id, event_id, data)


@router.delete("/{event_id}", response_model=SuccessResponse)
async def delete_event(
    event_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete an event and decrement its company's event count."""
    service = EventService(db)
    await service.delete_event(current_user.id, event_id)
    return SuccessResponse()
