"""
Request and response schemas for API endpoints.
"""
from zoo_api.schemas.common import CountResponse, MessageResponse
from zoo_api.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    AuthUser,
    AuthResponse,
    TokenRefreshResponse,
)
from zoo_api.schemas.staff import StaffCreate, StaffUpdate, StaffResponse
from zoo_api.schemas.habitat import (
    HabitatCreate,
    HabitatUpdate,
    HabitatResponse,
    StaffRef,
    HabitatOccupancyReport,
    ReconcileResponse,
)
from zoo_api.schemas.animal import (
    AnimalCreate,
    AnimalUpdate,
    AnimalResponse,
    HabitatRef,
    KeeperRef,
)
from zoo_api.schemas.visitor import (
    VisitorRecordCreate,
    VisitorRecordUpdate,
    VisitorRecordResponse,
)

__all__ = [
    # Common
    "CountResponse",
    "MessageResponse",
    # Auth
    "LoginRequest",
    "RegisterRequest",
    "AuthUser",
    "AuthResponse",
    "TokenRefreshResponse",
    # Staff
    "StaffCreate",
    "StaffUpdate",
    "StaffResponse",
    # Habitat
    "HabitatCreate",
    "HabitatUpdate",
    "HabitatResponse",
    "StaffRef",
    "HabitatOccupancyReport",
    "ReconcileResponse",
    # Animal
    "AnimalCreate",
    "AnimalUpdate",
    "AnimalResponse",
    "HabitatRef",
    "KeeperRef",
    # Visitor
    "VisitorRecordCreate",
    "VisitorRecordUpdate",
    "VisitorRecordResponse",
]
