"""
GardenGrid Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Services and routes run against a fresh in-memory SQLite database per
       test (aiosqlite), created from the ORM metadata.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── db_engine:        in-memory SQLite engine with all tables created
    ├── session_factory:  async_sessionmaker bound to db_engine
    ├── db:               one session for direct service calls
    ├── make_catalog:     inserts catalog plants and returns them
    ├── mock_db_session:  AsyncMock session for failure-path tests
    └── test_client:      HTTPX AsyncClient with get_db_session overridden
"""

import os

# Must run before any gardengrid import: settings are read at import time.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CATALOG_SEED_PATH"] = ""

from typing import AsyncGenerator, List  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from gardengrid.database import Base, get_db_session, session_scope  # noqa: E402
from gardengrid.models import CatalogPlant  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite engine shared by every session of one test.

    StaticPool keeps a single connection, so all sessions see the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    A plain session for direct service calls.

    Services only flush; tests that need committed state call
    `await db.commit()` themselves.
    """
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def make_catalog(session_factory):
    """
    Insert catalog plants. Each spec is (common_name, spacing).

    Usage:
        tomato, basil = await make_catalog(("Tomato", 4), ("Basil", 1))
    """

    async def _make(*specs) -> List[CatalogPlant]:
        async with session_scope(session_factory) as session:
            plants = [CatalogPlant(common_name=name, spacing=spacing) for name, spacing in specs]
            session.add_all(plants)
            await session.flush()
        return plants

    return _make


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    For tests that only need to observe how a service drives the session
    (e.g. that a failure rolls back), not real persistence.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    Provides an async HTTP test client for endpoint testing.

    Each request gets its own transactional session on the test database,
    exactly like production's get_db_session.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from gardengrid.main import app

    async def _override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_scope(session_factory) as session:
            yield session

    app.dependency_overrides[get_db_session] = _override_db_session
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
