"""
Event service handling CRUD operations.
"""

import math
import uuid

from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from event_registration.models.event import Event
from event_registration.schemas.event import EventCreate, EventUpdate
from event_registration.core.exceptions import (
    EventNotFoundError,
    InvalidSortFieldError,
    CapacityBelowRegistrationsError,
    EventConflictError,
)
from event_registration.core.config import get_settings
from event_registration.core.metrics import record_event_operation
from event_registration.services.registration_service import count_active_registrations
from event_registration.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

SORTABLE_FIELDS = {
    "name": Event.name,
    "date": Event.date,
    "location": Event.location,
    "capacity": Event.capacity,
    "created_at": Event.created_at,
}


async def create_event(db: AsyncSession, event_data: EventCreate) -> Event:
    event = Event(**event_data.model_dump())
    db.add(event)
    await db.flush()
    await db.refresh(event)

    record_event_operation("create")
    logger.info("event_created", event_id=str(event.id), name=event.name, capacity=event.capacity)
    return event


async def get_event(db: AsyncSession, event_id: uuid.UUID) -> Event:
    """Get a single event by ID, always re-read from the database."""
    result = await db.execute(
        select(Event)
        .where(Event.id == event_id)
        .execution_options(populate_existing=True)
    )
    event = result.scalar_one_or_none()

    if not event:
        raise EventNotFoundError(event_id)
    return event


def _order_clause(sort: str):
    descending = sort.startswith("-")
    field = sort[1:] if descending else sort
    column = SORTABLE_FIELDS.get(field)
    if column is None:
        raise InvalidSortFieldError(field, SORTABLE_FIELDS)
    return column.desc() if descending else column.asc()


async def list_events(
    db: AsyncSession,
    page: int = 1,
    limit: int = 10,
    sort: str = "date",
) -> tuple[list[Event], int]:
    """
    List events with pagination, ordered by a single field.
    `sort` takes a field name, prefixed with "-" for descending order.
    """
    order = _order_clause(sort)

    total = (await db.execute(select(func.count()).select_from(Event))).scalar()

    offset = (page - 1) * limit
    # Pages past the end are empty; their offset may not even fit the driver
    if offset >= total:
        return [], total

    # id breaks ties so pages never overlap
    events_query = (
        select(Event)
        .order_by(order, Event.id.asc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(events_query)
    events = list(result.scalars().all())

    return events, total


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if total else 0


async def _apply_changes(db: AsyncSession, event: Event, changes: dict) -> bool:
    result = await db.execute(
        update(Event)
        .where(Event.id == event.id, Event.version == event.version)
        .values(**changes, version=Event.version + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def update_event(db: AsyncSession, event_id: uuid.UUID, event_data: EventUpdate) -> Event:
    """
    Apply a partial update.

    The write is conditional on the version read here, the same claim an
    admission makes, so a capacity change and a registration cannot both act
    on a stale count. A lost claim re-reads and retries, like an admission.
    """
    changes = event_data.model_dump(exclude_unset=True)
    max_attempts = settings.MAX_REGISTRATION_ATTEMPTS

    for attempt in range(1, max_attempts + 1):
        event = await get_event(db, event_id)
        if not changes:
            return event

        if "capacity" in changes and changes["capacity"] < event.capacity:
            active = await count_active_registrations(db, event_id)
            if changes["capacity"] < active:
                logger.warning(
                    "event_update_rejected",
                    event_id=str(event_id),
                    capacity=changes["capacity"],
                    active=active,
                )
                raise CapacityBelowRegistrationsError(changes["capacity"], active)

        if not await _apply_changes(db, event, changes):
            logger.info("event_update_retry", event_id=str(event_id), attempt=attempt)
            await db.rollback()
            continue

        await db.refresh(event)
        record_event_operation("update")
        logger.info("event_updated", event_id=str(event_id), fields=sorted(changes), attempt=attempt)
        return event

    logger.warning("event_update_gave_up", event_id=str(event_id), attempts=max_attempts)
    raise EventConflictError()


async def delete_event(db: AsyncSession, event_id: uuid.UUID) -> None:
    """Delete an event; its registrations go with it via ON DELETE CASCADE."""
    event = await get_event(db, event_id)
    await db.delete(event)
    await db.flush()

    record_event_operation("delete")
    logger.info("event_deleted", event_id=str(event_id))
