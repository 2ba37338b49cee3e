"""
Staff account model for authentication database.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class StaffRole(str, Enum):
    """Staff role levels."""
    ADMIN = "admin"
    KEEPER = "keeper"
    VETERINARIAN = "veterinarian"


class UserStatus(str, Enum):
    """User account status."""
    ACTIVE = "active"
    DISABLED = "disabled"


class AuthProvider(str, Enum):
    """How the account signs in."""
    LOCAL = "local"
    GOOGLE = "google"


class User(BaseModel):
    """
    User document model for MongoDB auth_db.users collection.

    Staff members and login accounts are the same records.
    """
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: Optional[str] = Field(None, alias="_id", description="MongoDB ObjectId as string")
    username: str = Field(..., description="Unique display name")
    email: EmailStr = Field(..., description="Unique email address")
    hashed_password: Optional[str] = Field(
        None,
        description="Bcrypt hashed password (absent for Google-only accounts)"
    )
    role: StaffRole = Field(default=StaffRole.KEEPER, description="Staff role")
    status: UserStatus = Field(default=UserStatus.ACTIVE, description="Account status")
    auth_provider: AuthProvider = Field(default=AuthProvider.LOCAL)
    google_id: Optional[str] = None
    avatar: Optional[str] = Field(None, description="Profile picture URL")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == StaffRole.ADMIN.value
