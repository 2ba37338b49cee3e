"""
Authentication dependencies for route protection.
"""
from typing import Annotated, Any, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from zoo_api.core.errors import Forbidden, Unauthorized
from zoo_api.core.revocation import is_token_revoked
from zoo_api.core.security import decode_token
from zoo_api.database.connections import get_auth_db
from zoo_api.models.user import User, UserStatus
from zoo_api.services.auth_service import AuthService

bearer_scheme = HTTPBearer(auto_error=False)


async def get_token_payload(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> dict[str, Any]:
    """
    Decode the bearer token from the ``Authorization`` header.

    Raises:
        Unauthorized: If the token is missing, invalid, expired or revoked
    """
    if credentials is None:
        raise Unauthorized("Not authorized, no token")

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise Unauthorized("Not authorized, token failed")

    if not payload.get("sub"):
        raise Unauthorized("Not authorized, token failed")

    jti = payload.get("jti")
    if jti and await is_token_revoked(jti):
        raise Unauthorized("Token has been revoked")

    return payload


async def get_current_user(
    payload: Annotated[dict[str, Any], Depends(get_token_payload)],
) -> User:
    """
    Dependency to get the current authenticated user from the bearer token.

    Raises:
        Unauthorized: If the user no longer exists
    """
    auth_service = AuthService(await get_auth_db())

    user = await auth_service.get_user_by_id(payload["sub"])
    if user is None:
        raise Unauthorized("Not authorized, user not found")

    return user


async def get_current_active_user(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """
    Dependency to ensure the current user is active (not disabled).

    Raises:
        Forbidden: If user account is disabled
    """
    if current_user.status == UserStatus.DISABLED.value:
        raise Forbidden("Account is disabled")
    return current_user


# Type alias for cleaner route signatures
CurrentUser = Annotated[User, Depends(get_current_active_user)]
