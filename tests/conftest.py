"""
Notebook API - Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    ├── mock_db_session: AsyncMock session for service unit tests (no store)
    ├── database:        real Database bound to a per-test SQLite file
    ├── test_client:     HTTPX AsyncClient talking to an app built around `database`
    └── notebook_factory: creates a notebook through the API and returns its JSON
"""

import os

# Must run before notebook_api.config is imported anywhere.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from notebook_api.database import Database


@pytest.fixture
def mock_db_session():
    """
    Mock async session.

    Usage:
        result = MagicMock()
        result.scalar_one_or_none.return_value = notebook
        mock_db_session.execute.return_value = result
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
async def database(tmp_path):
    """A real store handle on a throwaway SQLite file, with tables created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'notebooks.db'}")
    await db.init(create_tables=True)
    yield db
    await db.teardown()


@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    ASGITransport does not run the lifespan, so the injected `database`
    is the handle every request uses.
    """
    from notebook_api.main import create_app

    app = create_app(database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def notebook_factory(test_client):
    async def create(title: str = "Physics", notes=None) -> dict:
        response = await test_client.post(
            "/notebooks", json={"title": title, "notes": notes or []}
        )
        assert response.status_code == 200, response.text
        return response.json()

    return create
