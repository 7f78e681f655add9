"""
Notes API: Database Session Management
========================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates an async engine with a bounded connection pool and a server-side
       statement timeout, provides a session dependency that rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling:
    pool_size=10:      Persistent connections shared by all requests
    max_overflow=0:    Hard cap; requests past the bound wait in the pool queue
    pool_timeout=30:   Seconds to wait for a free connection (then 503)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour

    The engine is handed to handlers as-is. The pool does its own locking,
    so there is no extra application-level wrapper around it.
"""

from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notes_api.config import settings


# ── Engine Configuration ──────────────────────────────────────────────────
def engine_connect_args(database_url: str, statement_timeout: float) -> dict:
    """
    Driver arguments for the engine.

    On asyncpg each connection is opened with a server-side statement_timeout
    (milliseconds). PostgreSQL cancels a slow statement itself and the
    connection stays usable; the service maps the cancellation to 503.
    """
    if database_url.startswith("postgresql+asyncpg://"):
        return {"server_settings": {"statement_timeout": str(int(statement_timeout * 1000))}}
    return {}


engine = create_async_engine(
    settings.database_url,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_timeout=settings.db_pool_timeout,
    pool_pre_ping=settings.db_pool_pre_ping,
    pool_recycle=3600,
    connect_args=engine_connect_args(settings.database_url, settings.db_statement_timeout),

    # Echo SQL queries in DEBUG mode for development visibility
    echo=settings.log_level == "DEBUG",
)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: returned ORM rows stay readable after the
# service commits, while the response is being serialized.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic and the test suite use
    to create the schema.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler (the handler performs queries)
        3. On error: rolls back the transaction
        4. Always: closes the session (returns connection to pool)

    Writes are committed by NoteService before the handler returns. Code
    after the yield runs once the response has been sent, so a commit here
    could fail after the client was already told the write succeeded.

    Example usage in a route:
        @router.get("/notes")
        async def list_notes(db: AsyncSession = Depends(get_db_session)):
            ...

    Raises:
        Any database exceptions are propagated to the global error handler,
        which returns appropriate HTTP status codes.
    """
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def ping_database() -> None:
    """
    What:  Runs `SELECT 1` on a pooled connection.
    When:  Startup (fail fast) and the readiness probe.
    Raises whatever the driver raises when the store is unreachable.
    """
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
