"""
Registration management: list, cancel and confirm.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from event_registration.db.session import get_db
from event_registration.models.user import User
from event_registration.schemas.registration import RegistrationResponse, RegistrationCancelResponse
from event_registration.services.registration_service import (
    cancel_registration,
    confirm_registration,
    get_user_registrations,
)
from event_registration.core.security import get_current_user, require_admin

router = APIRouter(prefix="/registrations", tags=["Registrations"])


@router.get("", response_model=list[RegistrationResponse])
async def list_my_registrations(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get all registrations of the authenticated user, newest first."""
    return await get_user_registrations(db, current_user.id)


@router.delete("/{registration_id}", response_model=RegistrationCancelResponse)
async def cancel_registration_endpoint(
    registration_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a registration and release its seat."""
    registration = await cancel_registration(db, registration_id, current_user.id)
    return RegistrationCancelResponse(
        message="Registration cancelled successfully",
        registration_id=registration.id,
        status=registration.status,
    )


@router.post("/{registration_id}/confirm", response_model=RegistrationResponse)
async def confirm_registration_endpoint(
    registration_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Confirm a pending registration. Admin only."""
    return await confirm_registration(db, registration_id)
