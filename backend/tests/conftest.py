"""
Todo Labels Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Data-access and API tests run against a real in-memory SQLite
       database (aiosqlite) with foreign keys enabled, so the deferred
       constraints on todo_labels behave as they do in production.

Fixture Hierarchy (all function-scoped):
    ├── db_engine: fresh in-memory database with the full schema
    ├── session_factory / db_session: sessions bound to db_engine
    ├── mock_db_session: AsyncMock session for error-path tests
    ├── test_client: HTTPX AsyncClient talking to a fresh app on db_engine
    └── api_client: TodoApiClient wrapping test_client
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import func, select  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app import database  # noqa: E402
from app.client.api import TodoApiClient  # noqa: E402
from app.database import Base, build_engine, get_db_session  # noqa: E402
from app.models.label import Label  # noqa: E402,F401
from app.models.todo import Todo  # noqa: E402,F401
from app.models.todo_label import TodoLabel  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite engine with the schema created.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = build_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.side_effect = OperationalError(...)
        await label_service.list_labels(mock_db_session)
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


async def association_count(session: AsyncSession, **filters) -> int:
    """Number of todo_labels rows matching column=value filters."""
    query = select(func.count(TodoLabel.id))
    for column, value in filters.items():
        query = query.where(getattr(TodoLabel, column) == value)
    result = await session.execute(query)
    return result.scalar_one()


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(db_engine, session_factory, monkeypatch):
    """
    HTTPX AsyncClient routed straight into a fresh FastAPI app.

    The session dependency and the health check's engine both point at the
    per-test database.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from app.main import create_app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    monkeypatch.setattr(database, "engine", db_engine)

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def api_client(test_client):
    api = TodoApiClient(client=test_client)
    yield api
    await api.aclose()
