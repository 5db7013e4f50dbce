"""
Referential integrity: registrations disappear with their user or event.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import delete, select, func
from sqlalchemy.ext.asyncio import AsyncSession

from event_registration.models.user import User
from event_registration.models.registration import Registration


async def _registrations_for(db: AsyncSession, **filters) -> int:
    query = select(func.count(Registration.id))
    for column, value in filters.items():
        query = query.where(getattr(Registration, column) == value)
    return (await db.execute(query)).scalar_one()


@pytest.mark.asyncio
async def test_deleting_user_removes_registrations(
    client: AsyncClient, db_session: AsyncSession, make_user, make_event
):
    event = await make_event(capacity=5)
    leaving, leaving_headers = await make_user("leaving@example.com")
    _, staying_headers = await make_user("staying@example.com")
    await client.post(f"/api/events/{event.id}/register", headers=leaving_headers)
    await client.post(f"/api/events/{event.id}/register", headers=staying_headers)
    await db_session.commit()

    await db_session.execute(delete(User).where(User.id == leaving.id))
    await db_session.commit()

    assert await _registrations_for(db_session, user_id=leaving.id) == 0
    assert await _registrations_for(db_session, event_id=event.id) == 1


@pytest.mark.asyncio
async def test_deleting_event_removes_registrations(
    client: AsyncClient, db_session: AsyncSession, auth_headers, admin_headers, make_event
):
    doomed = await make_event(name="Cancelled Meetup", capacity=5)
    kept = await make_event(name="Still On", capacity=5)
    await client.post(f"/api/events/{doomed.id}/register", headers=auth_headers)
    await client.post(f"/api/events/{kept.id}/register", headers=auth_headers)

    response = await client.delete(f"/api/events/{doomed.id}", headers=admin_headers)
    assert response.status_code == 204
    await db_session.commit()

    assert await _registrations_for(db_session, event_id=doomed.id) == 0
    assert await _registrations_for(db_session, event_id=kept.id) == 1
