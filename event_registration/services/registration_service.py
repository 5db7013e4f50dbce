"""
Registration service with capacity-bounded admission.

CONCURRENCY STRATEGY: Version Claim on the Event Row
====================================================

Problem:
  Two users ask for the last seat of an event at the same time.
  Both count 0 active registrations against capacity 1, both insert.
  Result: capacity overrun.

Solution:
  Every admission claims the event row before inserting:

  1. Read the event and its current `version`
  2. Count active (PENDING + CONFIRMED) registrations; reject if count >= capacity
  3. UPDATE events SET version = version + 1
     WHERE id = :event_id AND version = :read_version
  4. rows_affected == 0 means another admission (or an event update) got
     there first -> roll back and start over from step 1
  5. INSERT the registration as PENDING

  The UPDATE in step 3 takes the event's row lock until commit. A competing
  transaction's UPDATE waits on that lock, then finds the version moved and
  matches nothing, so its retry counts the winner's registration. Because the
  serialization point is the database row, this holds with any number of
  service instances.

  Capacity counts PENDING and CONFIRMED together. Confirming a registration
  therefore never changes the count and needs no capacity re-check; cancelling
  frees a seat.
"""

import time
import uuid

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from event_registration.models.event import Event
from event_registration.models.registration import Registration, RegistrationStatus, ACTIVE_STATUSES
from event_registration.core.config import get_settings
from event_registration.core.exceptions import (
    EventNotFoundError,
    CapacityExceededError,
    AlreadyRegisteredError,
    RegistrationConflictError,
    RegistrationNotFoundError,
    InvalidRegistrationStateError,
)
from event_registration.core.metrics import (
    record_registration_attempt,
    record_registration_retry,
    registration_latency,
)
from event_registration.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()


async def count_active_registrations(db: AsyncSession, event_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count(Registration.id)).where(
            Registration.event_id == event_id,
            Registration.status.in_(ACTIVE_STATUSES),
        )
    )
    return result.scalar_one()


async def _has_active_registration(db: AsyncSession, user_id: uuid.UUID, event_id: uuid.UUID) -> bool:
    result = await db.execute(
        select(Registration.id).where(
            Registration.user_id == user_id,
            Registration.event_id == event_id,
            Registration.status.in_(ACTIVE_STATUSES),
        )
    )
    return result.first() is not None


async def _claim_event(db: AsyncSession, event: Event) -> bool:
    result = await db.execute(
        update(Event)
        .where(Event.id == event.id, Event.version == event.version)
        .values(version=Event.version + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def register_for_event(
    db: AsyncSession,
    user_id: uuid.UUID,
    event_id: uuid.UUID,
) -> Registration:
    """
    Admit `user_id` to `event_id` if a seat is free.
    Retries up to MAX_REGISTRATION_ATTEMPTS when the event row changes under us.
    """
    started = time.perf_counter()
    try:
        return await _admit(db, user_id, event_id)
    finally:
        registration_latency.observe(time.perf_counter() - started)


async def _admit(db: AsyncSession, user_id: uuid.UUID, event_id: uuid.UUID) -> Registration:
    max_attempts = settings.MAX_REGISTRATION_ATTEMPTS

    for attempt in range(1, max_attempts + 1):
        result = await db.execute(
            select(Event)
            .where(Event.id == event_id)
            .execution_options(populate_existing=True)
        )
        event = result.scalar_one_or_none()
        if not event:
            raise EventNotFoundError(event_id)

        if await _has_active_registration(db, user_id, event_id):
            record_registration_attempt("duplicate")
            raise AlreadyRegisteredError()

        active = await count_active_registrations(db, event_id)
        if active >= event.capacity:
            record_registration_attempt("full")
            logger.warning(
                "registration_rejected_full",
                event_id=str(event_id),
                capacity=event.capacity,
                active=active,
            )
            raise CapacityExceededError(event.capacity)

        if not await _claim_event(db, event):
            record_registration_retry()
            logger.info(
                "registration_retry",
                event_id=str(event_id),
                attempt=attempt,
                reason="version_conflict",
            )
            # Next attempt starts a fresh transaction and sees the winner's row
            await db.rollback()
            continue

        registration = Registration(
            user_id=user_id,
            event_id=event_id,
            status=RegistrationStatus.PENDING.value,
        )
        db.add(registration)
        await db.flush()
        await db.refresh(registration)

        record_registration_attempt("success")
        logger.info(
            "registration_created",
            registration_id=str(registration.id),
            user_id=str(user_id),
            event_id=str(event_id),
            seats_taken=active + 1,
            capacity=event.capacity,
            attempt=attempt,
        )
        return registration

    record_registration_attempt("conflict")
    logger.warning("registration_gave_up", event_id=str(event_id), attempts=max_attempts)
    raise RegistrationConflictError()


async def _get_registration(db: AsyncSession, registration_id: uuid.UUID) -> Registration:
    registration = await db.get(Registration, registration_id, populate_existing=True)
    if not registration:
        raise RegistrationNotFoundError()
    return registration


async def cancel_registration(
    db: AsyncSession,
    registration_id: uuid.UUID,
    user_id: uuid.UUID,
) -> Registration:
    """Cancel the caller's own registration, releasing its seat."""
    registration = await _get_registration(db, registration_id)
    # Someone else's registration is reported as missing
    if registration.user_id != user_id:
        raise RegistrationNotFoundError()

    if registration.status == RegistrationStatus.CANCELLED.value:
        raise InvalidRegistrationStateError("Registration is already cancelled")

    registration.status = RegistrationStatus.CANCELLED.value
    await db.flush()
    await db.refresh(registration)

    logger.info(
        "registration_cancelled",
        registration_id=str(registration.id),
        user_id=str(user_id),
        event_id=str(registration.event_id),
    )
    return registration


async def confirm_registration(db: AsyncSession, registration_id: uuid.UUID) -> Registration:
    """Move a PENDING registration to CONFIRMED."""
    registration = await _get_registration(db, registration_id)

    if registration.status != RegistrationStatus.PENDING.value:
        raise InvalidRegistrationStateError(
            f"Only pending registrations can be confirmed (status is {registration.status})"
        )

    registration.status = RegistrationStatus.CONFIRMED.value
    await db.flush()
    await db.refresh(registration)

    logger.info(
        "registration_confirmed",
        registration_id=str(registration.id),
        event_id=str(registration.event_id),
    )
    return registration


async def get_user_registrations(db: AsyncSession, user_id: uuid.UUID) -> list[Registration]:
    result = await db.execute(
        select(Registration)
        .where(Registration.user_id == user_id)
        .order_by(Registration.created_at.desc(), Registration.id)
    )
    return list(result.scalars().all())
