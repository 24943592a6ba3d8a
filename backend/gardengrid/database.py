"""
GardenGrid Backend — Database Session Management
==================================================

What:  Async SQLAlchemy engine, session factory, transactional scope and
       the FastAPI session dependency.
Why:   Every multi-step write (garden activation, cascading deletes, plant
       overwrites) must commit as one unit or not at all. All of that rides
       on one pattern: acquire a session, roll back on any exception,
       commit otherwise, always release.
Who:   Route handlers via `Depends(get_db_session)`; tests via `session_scope`.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling:
    pool_size / max_overflow / pool_pre_ping come from settings for
    PostgreSQL. SQLite (tests, local runs) uses SQLAlchemy's default pool
    for the driver, which does not accept sizing arguments.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from gardengrid.config import settings


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: response models are built from ORM objects after
# the commit in session_scope, outside any lazy-load context.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object, which Alembic reads for --autogenerate and
    the test suite uses for `create_all` against in-memory SQLite.
    """
    pass


# ── Transactional Scope ───────────────────────────────────────────────────
@asynccontextmanager
async def session_scope(
    factory: Optional[async_sessionmaker] = None,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a session whose work commits as a single transaction.

    How it works:
        1. Opens a session from `factory` (the application factory by default)
        2. Yields it; services run their reads and writes and flush
        3. On success: commits
        4. On any exception: rolls back and re-raises
        5. Always: closes the session (returns connection to pool)

    Services never commit on their own. That keeps "deactivate others →
    insert active" and "delete garden → activate fallback" indivisible: a
    failure between the steps leaves the pre-operation state in the database.
    """
    factory = factory or async_session_factory
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides one transactional session per request.

    Example usage in a route:
        @router.get("/gardens")
        async def list_gardens(db: AsyncSession = Depends(get_db_session)):
            ...

    Raises:
        Exceptions raised by the handler are re-raised after rollback so the
        global error handlers can respond.
    """
    async with session_scope() as session:
        yield session


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Close all pooled connections. Called during application shutdown."""
    await engine.dispose()
