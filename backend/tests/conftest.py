"""
Notes API: Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Overview:
    ├── mock_db_session: Mock AsyncSession for service unit tests (no DB)
    ├── make_note:       Factory for detached Note rows
    ├── test_client:     HTTPX AsyncClient wired to the real app, backed by a
    │                    temporary SQLite database (schema rebuilt per test)
    └── note_factory:    POSTs notes through the API and returns their JSON
"""

import os
import tempfile
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before notes_api is imported: the engine is built at import time.
_test_dir = tempfile.mkdtemp(prefix="notes_api_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_test_dir}/test.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CORS_ORIGIN"] = "http://localhost:3000"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from notes_api.database import Base, engine  # noqa: E402
from notes_api.models.note import Note  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_note(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
            result = await note_service.get_note(mock_db_session, str(note.id))
    """
    session = AsyncMock()
    # Result objects are synchronous: scalar_one(), scalars(), rowcount
    session.execute = AsyncMock(return_value=MagicMock())
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def make_note():
    """Builds a transient Note with every column populated."""

    def _make(**overrides) -> Note:
        now = datetime.now(timezone.utc)
        fields = {
            "id": uuid4(),
            "title": "Shopping list",
            "content": "Milk, eggs, bread",
            "category": "",
            "published": False,
            "created_at": now,
            "updated_at": now,
        }
        fields.update(overrides)
        return Note(**fields)

    return _make


@pytest_asyncio.fixture
async def test_client():
    """
    Provides an async HTTP test client for endpoint testing.

    The schema is created from the ORM metadata before the test and dropped
    afterwards; disposing the engine closes pooled connections so the next
    test's event loop starts clean.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/healthchecker")
            assert response.status_code == 200
    """
    from notes_api.main import app

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def note_factory(test_client):
    """POSTs a note and returns the `note` object from the response."""

    async def _create(title: str, content: str = "body", **extra) -> dict:
        response = await test_client.post(
            "/api/notes", json={"title": title, "content": content, **extra}
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]["note"]

    return _create
