"""
Tests for the register operation and the registration lifecycle.
"""

import uuid

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_register_for_event(client: AsyncClient, auth_headers, test_user, test_event):
    """A new registration starts PENDING and references user and event."""
    response = await client.post(f"/api/events/{test_event.id}/register", headers=auth_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "PENDING"
    assert data["event_id"] == str(test_event.id)
    assert data["user_id"] == str(test_user.id)


@pytest.mark.asyncio
async def test_register_unauthenticated(client: AsyncClient, test_event):
    response = await client.post(f"/api/events/{test_event.id}/register")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_register_nonexistent_event(client: AsyncClient, auth_headers):
    response = await client.post(f"/api/events/{uuid.uuid4()}/register", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_register_twice(client: AsyncClient, auth_headers, test_event):
    """A user holds at most one active registration per event."""
    first = await client.post(f"/api/events/{test_event.id}/register", headers=auth_headers)
    assert first.status_code == 201

    second = await client.post(f"/api/events/{test_event.id}/register", headers=auth_headers)
    assert second.status_code == 409


@pytest.mark.asyncio
async def test_capacity_is_enforced(client: AsyncClient, make_user, small_event):
    """With capacity N, the (N+1)th registration fails with 400."""
    statuses = []
    for i in range(3):
        _, headers = await make_user(f"guest{i}@example.com")
        response = await client.post(f"/api/events/{small_event.id}/register", headers=headers)
        statuses.append(response.status_code)

    assert statuses == [201, 201, 400]
    assert "full" in response.json()["detail"]


@pytest.mark.asyncio
async def test_confirmed_registrations_count_against_capacity(
    client: AsyncClient, make_user, admin_headers, make_event
):
    event = await make_event(name="One Seat", capacity=1)
    _, first = await make_user("first@example.com")
    registration = (await client.post(f"/api/events/{event.id}/register", headers=first)).json()

    confirm = await client.post(
        f"/api/registrations/{registration['id']}/confirm", headers=admin_headers
    )
    assert confirm.status_code == 200

    _, second = await make_user("second@example.com")
    response = await client.post(f"/api/events/{event.id}/register", headers=second)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_cancel_frees_a_seat(client: AsyncClient, make_user, make_event):
    event = await make_event(name="One Seat", capacity=1)
    _, first = await make_user("first@example.com")
    _, second = await make_user("second@example.com")

    registration = (await client.post(f"/api/events/{event.id}/register", headers=first)).json()
    assert (await client.post(f"/api/events/{event.id}/register", headers=second)).status_code == 400

    cancel = await client.delete(f"/api/registrations/{registration['id']}", headers=first)
    assert cancel.status_code == 200
    assert cancel.json()["status"] == "CANCELLED"

    response = await client.post(f"/api/events/{event.id}/register", headers=second)
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_register_again_after_cancelling(client: AsyncClient, auth_headers, test_event):
    registration = (
        await client.post(f"/api/events/{test_event.id}/register", headers=auth_headers)
    ).json()
    await client.delete(f"/api/registrations/{registration['id']}", headers=auth_headers)

    response = await client.post(f"/api/events/{test_event.id}/register", headers=auth_headers)
    assert response.status_code == 201
    assert response.json()["id"] != registration["id"]


@pytest.mark.asyncio
async def test_cancel_already_cancelled(client: AsyncClient, auth_headers, test_event):
    """Double-cancelling returns 400."""
    registration = (
        await client.post(f"/api/events/{test_event.id}/register", headers=auth_headers)
    ).json()

    await client.delete(f"/api/registrations/{registration['id']}", headers=auth_headers)
    response = await client.delete(f"/api/registrations/{registration['id']}", headers=auth_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_cannot_cancel_someone_elses_registration(
    client: AsyncClient, auth_headers, make_user, test_event
):
    registration = (
        await client.post(f"/api/events/{test_event.id}/register", headers=auth_headers)
    ).json()
    _, intruder = await make_user("intruder@example.com")

    response = await client.delete(f"/api/registrations/{registration['id']}", headers=intruder)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_confirm_requires_admin(client: AsyncClient, auth_headers, test_event):
    registration = (
        await client.post(f"/api/events/{test_event.id}/register", headers=auth_headers)
    ).json()

    response = await client.post(
        f"/api/registrations/{registration['id']}/confirm", headers=auth_headers
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_confirm_cancelled_registration(
    client: AsyncClient, auth_headers, admin_headers, test_event
):
    registration = (
        await client.post(f"/api/events/{test_event.id}/register", headers=auth_headers)
    ).json()
    await client.delete(f"/api/registrations/{registration['id']}", headers=auth_headers)

    response = await client.post(
        f"/api/registrations/{registration['id']}/confirm", headers=admin_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_confirm_unknown_registration(client: AsyncClient, admin_headers):
    response = await client.post(f"/api/registrations/{uuid.uuid4()}/confirm", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_user_registrations(client: AsyncClient, auth_headers, make_user, test_event):
    """Users only see their own registrations."""
    await client.post(f"/api/events/{test_event.id}/register", headers=auth_headers)
    _, other = await make_user("other@example.com")
    await client.post(f"/api/events/{test_event.id}/register", headers=other)

    response = await client.get("/api/registrations", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["event_id"] == str(test_event.id)
