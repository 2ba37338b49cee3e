"""
Service layer for business logic.
"""
from zoo_api.services.animal_service import AnimalService
from zoo_api.services.auth_service import AuthService
from zoo_api.services.google_oauth import GoogleOAuthClient, get_google_oauth_client
from zoo_api.services.habitat_service import HabitatService
from zoo_api.services.occupancy_service import OccupancyCoordinator
from zoo_api.services.staff_service import StaffService
from zoo_api.services.visitor_service import VisitorService

__all__ = [
    "AnimalService",
    "AuthService",
    "GoogleOAuthClient",
    "get_google_oauth_client",
    "HabitatService",
    "OccupancyCoordinator",
    "StaffService",
    "VisitorService",
]
