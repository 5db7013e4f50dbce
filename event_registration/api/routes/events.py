"""
Event endpoints: listing, CRUD and the capacity-gated register operation.
"""

import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from event_registration.db.session import get_db
from event_registration.models.user import User
from event_registration.schemas.event import EventCreate, EventUpdate, EventResponse, EventListResponse
from event_registration.schemas.registration import RegistrationResponse
from event_registration.services.event_service import (
    create_event,
    get_event,
    list_events,
    total_pages,
    update_event,
    delete_event,
)
from event_registration.services.registration_service import register_for_event
from event_registration.core.security import get_current_user, require_admin

router = APIRouter(prefix="/events", tags=["Events"])


@router.get("", response_model=EventListResponse)
async def list_events_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort: str = Query("date", description='Field to sort by; prefix with "-" for descending'),
    db: AsyncSession = Depends(get_db),
):
    """List events with pagination, sorted by date unless told otherwise."""
    events, total = await list_events(db, page, limit, sort)
    return EventListResponse(
        events=[EventResponse.model_validate(e) for e in events],
        total=total,
        total_pages=total_pages(total, limit),
        page=page,
        limit=limit,
    )


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    event_data: EventCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a new event. Requires authentication."""
    return await create_event(db, event_data)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event_endpoint(event_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await get_event(db, event_id)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event_endpoint(
    event_id: uuid.UUID,
    event_data: EventUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Update an event's details. Requires authentication.

    Any authenticated user may update, unlike delete which is admin-only.
    """
    return await update_event(db, event_id, event_data)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event_endpoint(
    event_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete an event and its registrations. Admin only."""
    await delete_event(db, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{event_id}/register",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_endpoint(
    event_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Register the caller for an event.

    Returns 400 when the event is full, 404 when it does not exist and 409
    when the caller is already registered or the event stayed contended
    through every retry.
    """
    return await register_for_event(db, current_user.id, event_id)
