"""
Todo Labels Backend — Database Session Management
==================================================

What:  Async SQLAlchemy engine, session factory, transaction helper,
       migration runner, and the FastAPI session dependency.
Why:   Centralizes all database connection logic in one place.
How:   Creates an async engine with connection pooling, provides a session
       dependency that commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system and
       by the services for their write transactions.
When:  Engine is created at module import; sessions are created per-request.

Deferred Foreign Keys:
    `todo_labels` references `todos` and `labels` with DEFERRABLE INITIALLY
    DEFERRED constraints. PostgreSQL checks them at COMMIT. SQLite does the
    same, but only once `PRAGMA foreign_keys=ON` has been issued on the
    connection, so every SQLite engine created here installs a connect hook.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator, AsyncIterator, Dict

from sqlalchemy import event
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import settings

logger = logging.getLogger(__name__)

ALEMBIC_DIR = Path(__file__).resolve().parent.parent / "alembic"


# ── Engine Configuration ──────────────────────────────────────────────────

def _engine_options(url: str) -> Dict[str, Any]:
    """
    Pool options for the given URL.

    SQLite engines use a static or null pool that rejects pool sizing
    arguments, so those are only passed for server databases.
    """
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if make_url(url).get_backend_name() == "sqlite":
        return options
    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
    )
    return options


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on FK enforcement for every new SQLite connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(url: str, **overrides: Any) -> AsyncEngine:
    """
    Create an async engine for `url`.

    Extra keyword arguments override the computed pool options; the test
    suite uses this to build an in-memory SQLite engine on a StaticPool.
    """
    options = _engine_options(url)
    options.update(overrides)
    new_engine = create_async_engine(url, **options)
    if new_engine.dialect.name == "sqlite":
        enable_sqlite_foreign_keys(new_engine)
    return new_engine


engine = build_engine(settings.database_url)

# expire_on_commit=False: services read attributes after committing
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object, which Alembic reads for autogenerate and
    the test suite uses for `create_all`.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits anything the handler left pending
        4. On error: rolls back
        5. Always: closes the session (returns connection to pool)

    Services commit their own writes through `transaction()`, so the commit
    here is normally a no-op. It stays as a safety net for handlers that
    touch the session directly.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Run a block of statements as one unit of work.

    Commits when the block exits normally; deferred foreign keys are checked
    at that point. Any exception (including a failed commit) rolls the whole
    block back and propagates.

    Example:
        async with transaction(db):
            await db.execute(delete(TodoLabel).where(...))
            await db.execute(insert(TodoLabel).values(...))
    """
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise


# ── Migrations ────────────────────────────────────────────────────────────
def _alembic_config():
    from alembic.config import Config

    config = Config()
    config.set_main_option("script_location", str(ALEMBIC_DIR))
    # ConfigParser interpolates "%", which URL-encoded passwords contain
    config.set_main_option("sqlalchemy.url", settings.database_url.replace("%", "%%"))
    return config


async def run_migrations() -> None:
    """
    Upgrade the database to the latest Alembic revision.

    Revisions are applied in order and each exactly once (Alembic tracks the
    current head in `alembic_version`). Errors propagate so that the caller
    (the application lifespan) aborts startup.

    env.py drives the async engine with asyncio.run(), which cannot nest in
    the running loop, so the upgrade runs in a worker thread.
    """
    from alembic import command

    logger.info("Applying database migrations from %s", ALEMBIC_DIR)
    await asyncio.to_thread(command.upgrade, _alembic_config(), "head")
    logger.info("Database schema is up to date")


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Close all pooled connections. Called from the lifespan on shutdown."""
    await engine.dispose()
