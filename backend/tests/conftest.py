"""
AdoptMe Backend — Test Configuration (conftest.py)
====================================================

Shared pytest fixtures.

Fixture Hierarchy (all function-scoped):
    ├── db_url:        SQLite file URL inside pytest's tmp_path
    ├── database:      Database connection manager for db_url (tables auto-created)
    ├── pet_service:   PetService bound to `database`
    ├── sample_pet:    A valid creation payload
    └── test_client:   HTTPX AsyncClient talking to create_app(database=...)
"""

import os

# Must be set before adoptme.config is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./adoptme-test.db"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from adoptme.database import Database
from adoptme.services.pet_service import PetService


@pytest.fixture
def db_url(tmp_path):
    """A fresh SQLite database file per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'adoptme.db'}"


@pytest_asyncio.fixture
async def database(db_url):
    """
    Connection manager pointing at the per-test database.

    Tables are created on the first connection; the engine is disposed
    after the test.
    """
    db = Database(db_url, create_schema=True)
    yield db
    await db.dispose()


@pytest.fixture
def pet_service(database):
    return PetService(database)


@pytest.fixture
def sample_pet():
    return {"name": "Bella", "type": "Dog", "age": 3, "breed": "Lab"}


@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    raise_app_exceptions=False lets the catch-all 500 handler's response
    reach the test instead of re-raising the original exception.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/pets")
            assert response.status_code == 200
    """
    from adoptme.main import create_app

    app = create_app(database=database)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
