"""
Authentication router for registration, login, Google sign-in and tokens.
"""
import logging
from typing import Annotated, Any, Optional
from urllib.parse import urlencode

import httpx
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from pymongo.errors import PyMongoError

from zoo_api.config import get_settings
from zoo_api.core.errors import RateLimited, ServiceUnavailable, ZooError
from zoo_api.core.rate_limit import check_rate_limit
from zoo_api.core.security import create_oauth_state, verify_oauth_state
from zoo_api.database.connections import get_auth_db
from zoo_api.dependencies.auth import CurrentUser, get_token_payload
from zoo_api.schemas.auth import (
    AuthResponse,
    AuthUser,
    LoginRequest,
    RegisterRequest,
    TokenRefreshResponse,
)
from zoo_api.schemas.common import MessageResponse
from zoo_api.services.auth_service import AuthService
from zoo_api.services.google_oauth import (
    GoogleOAuthClient,
    GoogleOAuthError,
    get_google_oauth_client,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


async def get_auth_service() -> AuthService:
    """Dependency to get AuthService instance."""
    return AuthService(await get_auth_db())


def get_client_ip(request: Request) -> str:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new staff account",
)
async def register(
    request: Request,
    body: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Register a staff account and receive a token.

    - **username**: Unique, 3 to 50 characters
    - **email**: Valid email address (must be unique)
    - **password**: Password (minimum 8 characters)
    - **password_confirm**: Must match password
    - **role**: keeper or veterinarian; the first account becomes admin
    """
    settings = get_settings()
    client_ip = get_client_ip(request)
    if not await check_rate_limit(
        client_ip,
        "/auth/register",
        limit=settings.register_rate_limit_attempts,
        window_seconds=settings.login_rate_limit_window_seconds,
    ):
        raise RateLimited("Too many registration attempts. Please try again later.")

    return await auth_service.register_user(body)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login and get access token",
)
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate with email and password to receive a JWT token.

    Send the token as `Authorization: Bearer <token>` on protected endpoints.

    **Rate limited** per IP, with account lockout after repeated failures.
    """
    client_ip = get_client_ip(request)
    if not await check_rate_limit(client_ip, "/auth/login"):
        raise RateLimited("Too many login attempts. Please try again later.")

    return await auth_service.login(body)


@router.get(
    "/google",
    summary="Start Google sign-in",
)
async def google_login(
    google: GoogleOAuthClient = Depends(get_google_oauth_client),
):
    """Redirect the browser to Google's consent screen."""
    if not get_settings().google_enabled:
        raise ServiceUnavailable("Google sign-in is not configured")
    return RedirectResponse(google.authorization_url(create_oauth_state()))


@router.get(
    "/google/callback",
    summary="Google sign-in callback",
)
async def google_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    google: GoogleOAuthClient = Depends(get_google_oauth_client),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Finish Google sign-in and hand the token to the browser client.

    Success redirects to `{client_url}/auth/callback?token=...`, any failure
    to `{client_url}/login?error=auth_failed`.
    """
    client_url = get_settings().client_url.rstrip("/")
    failure = RedirectResponse(
        f"{client_url}/login?{urlencode({'error': 'auth_failed'})}"
    )

    if error or not code or not state or not verify_oauth_state(state):
        logger.info(f"Google sign-in rejected (error={error!r})")
        return failure

    try:
        access_token = await google.exchange_code(code)
        profile = await google.fetch_profile(access_token)
        result = await auth_service.login_with_google(profile)
    except (httpx.HTTPError, GoogleOAuthError, ZooError, PyMongoError) as e:
        logger.warning(f"Google sign-in failed: {e}")
        return failure

    return RedirectResponse(
        f"{client_url}/auth/callback?{urlencode({'token': result.access_token})}"
    )


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Revoke the current token",
)
async def logout(
    current_user: CurrentUser,
    payload: Annotated[dict[str, Any], Depends(get_token_payload)],
    auth_service: AuthService = Depends(get_auth_service),
):
    """Revoke the presented token for the rest of its lifetime."""
    return await auth_service.logout(payload)


@router.post(
    "/refresh",
    response_model=TokenRefreshResponse,
    summary="Refresh access token",
)
async def refresh_token(
    current_user: CurrentUser,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Issue a new token for the authenticated user."""
    return await auth_service.refresh_token(current_user.id)


@router.get(
    "/me",
    response_model=AuthUser,
    summary="Get current user info",
)
async def get_current_user_info(current_user: CurrentUser):
    """Get information about the currently authenticated user."""
    return AuthUser(
        id=current_user.id,
        username=current_user.username,
        email=current_user.email,
        role=current_user.role,
        status=current_user.status,
        avatar=current_user.avatar,
        auth_provider=current_user.auth_provider,
        created_at=current_user.created_at,
    )
