"""
Security utilities for password hashing and JWT token management.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from zoo_api.config import get_settings

# Password hashing context using bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

OAUTH_STATE_PURPOSE = "google_oauth_state"
OAUTH_STATE_EXPIRE_MINUTES = 10


def hash_password(plain_password: str) -> str:
    """
    Hash a plain password using bcrypt.

    Args:
        plain_password: The plain text password to hash

    Returns:
        Hashed password string
    """
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    user_id: str,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token.

    Every token carries a unique ``jti`` so it can be revoked on logout.

    Args:
        user_id: Unique user identifier
        role: Staff role (e.g. "admin", "keeper")
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    settings = get_settings()

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_access_token_expire_minutes)

    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "role": role,
        "jti": uuid.uuid4().hex,
        "exp": now + expires_delta,
        "iat": now,
    }

    return jwt.encode(
        payload,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT token.

    Args:
        token: The JWT token string to decode

    Returns:
        Decoded payload dictionary with keys: sub, role, jti, exp, iat

    Raises:
        JWTError: If token is invalid or expired
    """
    settings = get_settings()
    return jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
    )


def token_seconds_remaining(payload: dict[str, Any]) -> int:
    """Seconds until a decoded token expires (0 if already expired)."""
    exp = payload.get("exp")
    if exp is None:
        return 0
    expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
    return max(0, int((expires_at - datetime.now(timezone.utc)).total_seconds()))


def create_oauth_state() -> str:
    """Short-lived signed value used as the OAuth ``state`` parameter."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "purpose": OAUTH_STATE_PURPOSE,
        "nonce": uuid.uuid4().hex,
        "exp": now + timedelta(minutes=OAUTH_STATE_EXPIRE_MINUTES),
        "iat": now,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_oauth_state(state: str) -> bool:
    """Check an OAuth ``state`` value issued by :func:`create_oauth_state`."""
    try:
        payload = decode_token(state)
    except JWTError:
        return False
    return payload.get("purpose") == OAUTH_STATE_PURPOSE
