"""
Rate limiting and login lockout backed by Redis.

Key patterns:
- ``ratelimit:{endpoint}:{ip}``  request counter per fixed window
- ``failed_login:{user_id}``     consecutive failed logins
- ``lockout:{user_id}``          present while the account is locked
"""
from typing import Optional

from zoo_api.config import get_settings
from zoo_api.database.connections import get_redis_client


async def check_rate_limit(
    ip: str,
    endpoint: str,
    limit: Optional[int] = None,
    window_seconds: Optional[int] = None,
) -> bool:
    """
    Check if a request should be rate limited.

    Args:
        ip: Client IP address
        endpoint: Endpoint identifier (e.g., "/auth/login")
        limit: Max requests allowed (defaults to config value)
        window_seconds: Time window in seconds (defaults to config value)

    Returns:
        True if request is allowed, False if rate limited
    """
    settings = get_settings()
    limit = limit or settings.login_rate_limit_attempts
    window_seconds = window_seconds or settings.login_rate_limit_window_seconds

    redis = await get_redis_client()
    key = f"ratelimit:{endpoint}:{ip}"
    current = await redis.incr(key)
    if current == 1:
        await redis.expire(key, window_seconds)
    return current <= limit


async def increment_failed_login(user_id: str) -> int:
    """
    Increment failed login attempts counter for a user.

    Returns:
        Current number of failed attempts
    """
    settings = get_settings()
    redis = await get_redis_client()
    key = f"failed_login:{user_id}"
    count = await redis.incr(key)
    await redis.expire(key, settings.user_lockout_duration_minutes * 60)
    return count


async def check_user_lockout(user_id: str) -> bool:
    """Return True if the user is currently locked out."""
    redis = await get_redis_client()
    return bool(await redis.exists(f"lockout:{user_id}"))


async def set_user_lockout(user_id: str, duration_minutes: int) -> None:
    """Lock out a user for ``duration_minutes``."""
    redis = await get_redis_client()
    await redis.setex(f"lockout:{user_id}", duration_minutes * 60, "1")


async def reset_failed_attempts(user_id: str) -> None:
    """Reset failed login attempts counter after successful login."""
    redis = await get_redis_client()
    await redis.delete(f"failed_login:{user_id}")
