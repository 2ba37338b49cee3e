"""
Integration test fixtures.

These tests require a running backend with MongoDB and Redis behind it.
Mark with @pytest.mark.integration to skip in normal test runs.
"""
import os
import time

import httpx
import pytest


@pytest.fixture
def live_backend_url():
    """Get base URL for live backend tests (if running)."""
    return os.getenv("BACKEND_URL", "http://localhost:8000")


@pytest.fixture
def test_timeout():
    """Timeout for network requests in integration tests."""
    return 30


@pytest.fixture
def skip_if_no_backend(live_backend_url):
    """Skip test if the backend is not reachable."""
    try:
        httpx.get(f"{live_backend_url}/health", timeout=5)
    except httpx.TransportError:
        pytest.skip("Backend not running")


@pytest.fixture
def live_credentials():
    """
    Credentials for an account on the live backend.

    Defaults to the seeded admin (scripts/seed_db.py).
    """
    return {
        "email": os.getenv("ZOO_TEST_EMAIL", "admin@zoo.com"),
        "password": os.getenv("ZOO_TEST_PASSWORD", "password123"),
    }


@pytest.fixture
def unique_suffix():
    """Suffix keeping names from different runs apart."""
    return str(int(time.time() * 1000))
