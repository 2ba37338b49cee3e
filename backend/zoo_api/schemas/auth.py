"""
Authentication request/response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from zoo_api.models.user import AuthProvider, StaffRole, UserStatus


class LoginRequest(BaseModel):
    """Login request body."""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class RegisterRequest(BaseModel):
    """Registration request body."""
    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(..., min_length=3, max_length=50, description="Unique username")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(
        ...,
        min_length=8,
        description="User password (min 8 characters)"
    )
    password_confirm: str = Field(..., description="Password confirmation")
    role: StaffRole = Field(
        default=StaffRole.KEEPER,
        description="Requested role; admin is only granted to the first account"
    )

    def passwords_match(self) -> bool:
        """Check if password and confirmation match."""
        return self.password == self.password_confirm


class AuthUser(BaseModel):
    """Public view of the signed-in user."""
    id: str
    username: str
    email: str
    role: StaffRole
    status: UserStatus = UserStatus.ACTIVE
    avatar: Optional[str] = None
    auth_provider: AuthProvider = AuthProvider.LOCAL
    created_at: Optional[datetime] = None


class AuthResponse(BaseModel):
    """Login/registration response with JWT token."""
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token expiration time in seconds")
    user: AuthUser


class TokenRefreshResponse(BaseModel):
    """Token refresh response."""
    access_token: str = Field(..., description="New JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token expiration time in seconds")
