"""
Global test fixtures for the zoo management backend.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor)
- Mock Redis (fakeredis)
- Staff account factories with ready-made bearer headers
- An async HTTP client wired to the mocked connections
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from zoo_api.core.security import create_access_token, hash_password  # noqa: E402
from zoo_api.database.databases import auth_db, zoo_db  # noqa: E402

TEST_PASSWORD = "SecurePassword123!"

# Hashing is slow; hash the shared test password once per session
_HASHED_TEST_PASSWORD = hash_password(TEST_PASSWORD)


@pytest.fixture(autouse=True)
def no_reconcile_settle(monkeypatch):
    """Reconciliation snapshots back to back instead of a second apart."""
    from zoo_api.config import get_settings
    monkeypatch.setattr(get_settings(), "occupancy_reconcile_settle_seconds", 0)


# =============================================================================
# MongoDB Fixtures (mongomock-motor)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.

    This provides an in-memory MongoDB that behaves like the real thing
    for testing purposes.
    """
    from mongomock_motor import AsyncMongoMockClient
    client = AsyncMongoMockClient()
    yield client
    client.close()


@pytest_asyncio.fixture
async def mock_auth_db(mock_async_mongo_client):
    """Provide mock auth_db database."""
    db = mock_async_mongo_client[auth_db.DB_NAME]
    # Create indexes like the real app
    await db.users.create_index("email", unique=True)
    await db.users.create_index("username", unique=True)
    yield db


@pytest_asyncio.fixture
async def mock_zoo_db(mock_async_mongo_client):
    """Provide mock zoo_db database."""
    db = mock_async_mongo_client[zoo_db.DB_NAME]
    await db.animals.create_index("habitat")
    yield db


# =============================================================================
# Redis Fixtures (fakeredis)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_redis():
    """
    Create an async mock Redis client using fakeredis.
    """
    import fakeredis.aioredis
    redis_client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield redis_client
    await redis_client.flushall()
    await redis_client.aclose()


@pytest.fixture
def mock_connections(mock_async_mongo_client, mock_async_redis, monkeypatch):
    """
    Point the shared connection getters at the in-memory backends.

    Everything that goes through ``get_mongo_client``/``get_redis_client``
    (routers, auth dependencies, rate limiting, token revocation) then
    talks to mongomock and fakeredis.
    """
    from zoo_api.database import connections

    monkeypatch.setattr(connections, "_mongo_client", mock_async_mongo_client)
    monkeypatch.setattr(connections, "_redis_client", mock_async_redis)
    return mock_async_mongo_client, mock_async_redis


# =============================================================================
# Staff Fixtures
# =============================================================================

@pytest.fixture
def test_user_data() -> dict:
    """Registration body for a keeper account."""
    return {
        "username": "testkeeper",
        "email": "testkeeper@example.com",
        "password": TEST_PASSWORD,
        "password_confirm": TEST_PASSWORD,
        "role": "keeper",
    }


@pytest.fixture
def make_staff(mock_auth_db):
    """
    Factory inserting a staff account and returning it with auth headers.

    Usage:
        admin = await make_staff("admin")
        response = await async_client.get("/staff", headers=admin["headers"])
    """
    counter = {"n": 0}

    async def _make(role: str = "keeper", **overrides: Any) -> dict:
        counter["n"] += 1
        now = datetime.now(timezone.utc)
        doc = {
            "username": f"{role}{counter['n']}",
            "email": f"{role}{counter['n']}@zoo.com",
            "hashed_password": _HASHED_TEST_PASSWORD,
            "role": role,
            "status": "active",
            "auth_provider": "local",
            "google_id": None,
            "avatar": None,
            "created_at": now,
            "updated_at": now,
        }
        doc.update(overrides)
        result = await mock_auth_db.users.insert_one(doc)
        user_id = str(result.inserted_id)
        token = create_access_token(user_id=user_id, role=doc["role"])
        return {
            "id": user_id,
            "doc": doc,
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _make


@pytest_asyncio.fixture
async def admin(make_staff) -> dict:
    return await make_staff("admin")


@pytest_asyncio.fixture
async def keeper(make_staff) -> dict:
    return await make_staff("keeper")


# =============================================================================
# Zoo Record Fixtures
# =============================================================================

@pytest.fixture
def make_habitat(mock_zoo_db):
    """Factory inserting a habitat document directly (bypassing the API)."""

    async def _make(capacity: int = 5, current_occupancy: int = 0, **overrides: Any) -> str:
        now = datetime.now(timezone.utc)
        doc = {
            "name": overrides.pop("name", f"Habitat cap {capacity}"),
            "type": "outdoor",
            "capacity": capacity,
            "current_occupancy": current_occupancy,
            "description": None,
            "assigned_staff": [],
            "created_at": now,
            "updated_at": now,
        }
        doc.update(overrides)
        result = await mock_zoo_db.habitats.insert_one(doc)
        return str(result.inserted_id)

    return _make


@pytest.fixture
def animal_data() -> dict:
    """Minimal valid animal body."""
    return {
        "name": "Simba",
        "species": "African Lion",
        "category": "mammals",
        "age": 5,
        "gender": "male",
    }


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================

@pytest.fixture
def app():
    """
    Create FastAPI app for testing.

    Note: This imports the actual app and should be used with mocked
    database connections.
    """
    from zoo_api.main import app
    return app


@pytest_asyncio.fixture
async def async_client(app, mock_connections):
    """
    Create an async test client backed by the mocked connections.
    """
    from httpx import AsyncClient, ASGITransport

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac


# =============================================================================
# Response Assertion Helpers
# =============================================================================

@pytest.fixture
def assert_error_response():
    """Helper to assert error response structure."""
    def _assert(response, status_code: int, detail_contains: str = None, code: str = None):
        assert response.status_code == status_code, response.text
        data = response.json()
        assert "detail" in data
        assert "code" in data
        if detail_contains:
            assert detail_contains.lower() in data["detail"].lower()
        if code:
            assert data["code"] == code
    return _assert
