"""
Revoked bearer tokens, kept in Redis until they would have expired anyway.
"""
from zoo_api.database.connections import get_redis_client


async def revoke_token(jti: str, ttl_seconds: int) -> None:
    """Mark a token id as revoked for the rest of its lifetime."""
    if ttl_seconds <= 0:
        return
    redis = await get_redis_client()
    await redis.setex(f"revoked_token:{jti}", ttl_seconds, "1")


async def is_token_revoked(jti: str) -> bool:
    redis = await get_redis_client()
    return bool(await redis.exists(f"revoked_token:{jti}"))
