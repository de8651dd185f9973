"""
StoryShare Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment is pointed at a throwaway SQLite file (aiosqlite) BEFORE
       any app module is imported; each DB-backed test gets a freshly
       created schema.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock AsyncSession (pure service logic, no DB)
    ├── reset_database:  Drops and recreates every table
    ├── db_session:      Real AsyncSession on the fresh schema
    ├── test_client:     HTTPX AsyncClient bound to the FastAPI app
    └── make_user:       Factory that signs up a user and returns its SessionUser
"""

import os
import tempfile
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup (must run before any `app` import)
# ══════════════════════════════════════════════════════════════════════════

_TEST_DIR = tempfile.mkdtemp(prefix="storyshare_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"  # bcrypt minimum; keeps the suite fast
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

import app.models  # noqa: E402,F401
from app.database import Base, async_session_factory, engine  # noqa: E402
from app.schemas.auth import SessionUser, SignupRequest  # noqa: E402
from app.services.auth_service import auth_service  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_x(mock_db_session):
            mock_db_session.execute.return_value.first.return_value = None
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def reset_database() -> AsyncGenerator[None, None]:
    """Fresh schema for each test that touches the database."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield


@pytest_asyncio.fixture
async def db_session(reset_database) -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def make_user(db_session):
    """
    Factory: signs up a user through AuthService and returns the matching
    SessionUser, as the session dependency would build it from a token.
    """
    async def _make(username: str = "al", email: str = None, name: str = None) -> SessionUser:
        email = email or f"{username}@example.com"
        result = await auth_service.signup(
            db_session,
            SignupRequest(
                name=name or username.title(),
                email=email,
                password="pw-" + username,
                username=username,
            ),
        )
        return SessionUser(id=result.user_id, email=email, name=name or username.title())

    return _make


@pytest_asyncio.fixture
async def test_client(reset_database) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client talking to the app in-process.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from app.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
