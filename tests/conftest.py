"""
Shared test fixtures for the KGF backend test suite.

Async throughout (aiosqlite + AsyncSession).  Each test gets a fresh
in-memory database and a clean rate-limit window.
"""

import os
import sys
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
# Lowest bcrypt cost keeps the suite fast
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["CORS_ORIGINS"] = "http://localhost:3000"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.v1.deps import get_db
from app.core.limiter import limiter
from app.db.base import Base
from app.main import app

TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture(autouse=True)
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Create a fresh in-memory database and point ``get_db`` at it."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    yield factory

    app.dependency_overrides.pop(get_db, None)
    await test_engine.dispose()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def registered_user(async_client: AsyncClient) -> dict:
    """Register a user through the API and return the response body."""
    resp = await async_client.post(
        "/api/auth/register",
        json={"email": "alice@example.com", "password": TEST_PASSWORD, "name": "Alice"},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()
