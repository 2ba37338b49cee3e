"""
Staff request/response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from zoo_api.models.user import AuthProvider, StaffRole, UserStatus


class StaffCreate(BaseModel):
    """Create staff member request (admin only)."""
    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: StaffRole = StaffRole.KEEPER
    avatar: Optional[str] = None


class StaffUpdate(BaseModel):
    """Partial staff update. Role and status changes require admin."""
    model_config = ConfigDict(str_strip_whitespace=True)

    username: Optional[str] = Field(None, min_length=3, max_length=50)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8)
    role: Optional[StaffRole] = None
    status: Optional[UserStatus] = None
    avatar: Optional[str] = None


class StaffResponse(BaseModel):
    """Staff member (never includes the password hash)."""
    id: str
    username: str
    email: str
    role: StaffRole
    status: UserStatus
    auth_provider: AuthProvider
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
