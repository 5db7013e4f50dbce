"""
Pytest fixtures for test database, client, and authentication.

Each test gets its own SQLite database file. Connections enable foreign keys
(so ON DELETE CASCADE fires) and open every transaction with BEGIN IMMEDIATE,
which makes concurrent writers queue on the database lock the way they queue
on a row lock in PostgreSQL. Set TEST_DATABASE_URL to run against PostgreSQL
instead; tables are then created and dropped around every test.
"""

import os
from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from event_registration.main import app
from event_registration.db.base import Base
from event_registration.db.session import get_db
from event_registration.core.security import create_access_token, hash_password
from event_registration.models.user import User, UserRole
from event_registration.models.event import Event

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL")

# One real hash shared by every fixture user; bcrypt is slow on purpose
TEST_PASSWORD = "testpassword123"
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


def _configure_sqlite(engine) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Let the "begin" hook below own transaction start
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path):
    url = TEST_DATABASE_URL or f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    engine = create_async_engine(url, echo=False)
    if engine.dialect.name == "sqlite":
        _configure_sqlite(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    if engine.dialect.name != "sqlite":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker:
    """Independent sessions, each on its own connection."""
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory creating a stored user; returns (user, auth headers)."""

    async def _make(email: str, name: str = "Test User", role: str = UserRole.USER.value):
        user = User(name=name, email=email, hashed_password=TEST_PASSWORD_HASH, role=role)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        token = create_access_token(data={"sub": str(user.id), "role": user.role})
        return user, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def make_event(db_session: AsyncSession):
    async def _make(name: str = "Presentació API-REST", capacity: int = 14, days_ahead: int = 30):
        event = Event(
            name=name,
            description=None,
            date=datetime.now(timezone.utc) + timedelta(days=days_ahead),
            location="CIFP Pau Casesnoves",
            capacity=capacity,
        )
        db_session.add(event)
        await db_session.commit()
        await db_session.refresh(event)
        return event

    return _make


@pytest_asyncio.fixture
async def test_user(make_user) -> User:
    user, _ = await make_user("test@example.com")
    return user


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    token = create_access_token(data={"sub": str(test_user.id), "role": test_user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def admin_headers(make_user) -> dict:
    _, headers = await make_user("admin@example.com", name="Admin", role=UserRole.ADMIN.value)
    return headers


@pytest_asyncio.fixture
async def test_event(make_event) -> Event:
    return await make_event(capacity=100)


@pytest_asyncio.fixture
async def small_event(make_event) -> Event:
    """Event with room for exactly two registrations."""
    return await make_event(name="Small Workshop", capacity=2)
