"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with service instances bound to
the in-memory databases.
"""

import pytest


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def coordinator(mock_zoo_db):
    """OccupancyCoordinator bound to the mock zoo database."""
    from zoo_api.services.occupancy_service import OccupancyCoordinator
    return OccupancyCoordinator(mock_zoo_db)


@pytest.fixture
def animal_service(mock_zoo_db, mock_auth_db):
    from zoo_api.services.animal_service import AnimalService
    return AnimalService(mock_zoo_db, mock_auth_db)


@pytest.fixture
def habitat_service(mock_zoo_db, mock_auth_db):
    from zoo_api.services.habitat_service import HabitatService
    return HabitatService(mock_zoo_db, mock_auth_db)


@pytest.fixture
def staff_service(mock_auth_db, mock_zoo_db):
    from zoo_api.services.staff_service import StaffService
    return StaffService(mock_auth_db, mock_zoo_db)


@pytest.fixture
def visitor_service(mock_zoo_db):
    from zoo_api.services.visitor_service import VisitorService
    return VisitorService(mock_zoo_db)


@pytest.fixture
def auth_service(mock_auth_db, mock_connections):
    """AuthService with Redis-backed lockout pointed at fakeredis."""
    from zoo_api.services.auth_service import AuthService
    return AuthService(mock_auth_db)


@pytest.fixture
def occupancy_of(mock_zoo_db):
    """Read a habitat's stored occupancy counter."""
    from bson import ObjectId

    async def _read(habitat_id: str) -> int:
        doc = await mock_zoo_db.habitats.find_one({"_id": ObjectId(habitat_id)})
        return doc["current_occupancy"]

    return _read
