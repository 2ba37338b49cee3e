"""
Pydantic models for database documents and enumerations.
"""
from zoo_api.models.user import User, StaffRole, UserStatus, AuthProvider
from zoo_api.models.animal import AnimalCategory, Gender, HealthStatus

__all__ = [
    "User",
    "StaffRole",
    "UserStatus",
    "AuthProvider",
    "AnimalCategory",
    "Gender",
    "HealthStatus",
]
