"""
Shared test fixtures for DevConnector API tests.

Provides a per-test in-memory database, the HTTP test client, token headers
and user fixtures.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.auth.jwt import create_access_token
from app.config import settings
from app.database import create_schema, drop_schema, get_db
from app.main import app
from app.middleware.rate_limit import reset_limiter

# Import models so they're registered with Base.metadata before table creation
from app.models.user import User
from app.services.profiles import ProfileManager

# In-memory SQLite by default; StaticPool keeps one connection so every
# session in a test sees the same database. A PostgreSQL URL works too.
TEST_DATABASE_URL = settings.test_database_url


# --- Rate Limiter Reset Fixture ---


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Reset rate limiter before each test to ensure test isolation."""
    reset_limiter()
    yield


# --- Database Fixtures ---


def _create_test_engine(enforce_foreign_keys: bool = False) -> AsyncEngine:
    """Build the per-test engine; SQLite-only options apply to SQLite URLs only."""
    is_sqlite = TEST_DATABASE_URL.startswith("sqlite")
    if not is_sqlite:
        return create_async_engine(TEST_DATABASE_URL)

    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    if enforce_foreign_keys:
        @event.listens_for(engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


async def _session_for(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    await create_schema(engine)

    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()

    await drop_schema(engine)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create tables before each test function, drop after.
    Provides isolated database state per test.
    """
    async for session in _session_for(_create_test_engine()):
        yield session


@pytest_asyncio.fixture(scope="function")
async def fk_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Like ``db_session`` but with foreign keys enforced on SQLite."""
    async for session in _session_for(_create_test_engine(enforce_foreign_keys=True)):
        yield session


@pytest_asyncio.fixture(scope="function")
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client configured for testing.
    Overrides database dependency with test session.
    """

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True,
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def profile_manager(db_session: AsyncSession) -> ProfileManager:
    return ProfileManager(db_session)


# --- Authentication Helper Fixtures ---


@pytest.fixture
def auth_headers():
    """Factory fixture for creating x-auth-token headers for a user id."""

    def _auth_headers(user_id: str) -> dict[str, str]:
        return {"x-auth-token": create_access_token(user_id)}

    return _auth_headers


# --- User Fixtures ---


async def _create_user(
    db_session: AsyncSession,
    name: str,
    email: str,
) -> dict[str, Any]:
    """Helper to create an identity record in the database."""
    user = User(
        name=name,
        email=email.lower(),
        avatar=f"//www.gravatar.com/avatar/{name.lower().replace(' ', '')}?s=200&r=pg&d=mm",
    )
    db_session.add(user)
    await db_session.commit()

    return {
        "user_id": str(user.id),
        "name": user.name,
        "email": user.email,
        "avatar": user.avatar,
    }


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> dict[str, Any]:
    """Create a standard test user."""
    return await _create_user(db_session, name="Test User", email="test@example.com")


@pytest_asyncio.fixture
async def second_user(db_session: AsyncSession) -> dict[str, Any]:
    """Create a second user for listing and ownership scenarios."""
    return await _create_user(db_session, name="Second User", email="second@example.com")
