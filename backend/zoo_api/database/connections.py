"""
Shared MongoDB and Redis clients.

One client of each kind lives for the whole process. Routers and services
reach the two logical databases through ``get_auth_db`` and ``get_zoo_db``.
"""
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from redis.asyncio import Redis

from zoo_api.config import get_settings
from zoo_api.database.databases import auth_db, zoo_db

_mongo_client: Optional[AsyncIOMotorClient] = None
_redis_client: Optional[Redis] = None


async def get_mongo_client() -> AsyncIOMotorClient:
    """Return the process-wide MongoDB client, creating it on first use."""
    global _mongo_client
    if _mongo_client is None:
        _mongo_client = AsyncIOMotorClient(get_settings().mongo_uri)
    return _mongo_client


async def get_redis_client() -> Redis:
    """Return the process-wide Redis client (rate limits, lockouts, revoked tokens)."""
    global _redis_client
    if _redis_client is None:
        settings = get_settings()
        _redis_client = Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            decode_responses=True,
        )
    return _redis_client


async def get_auth_db() -> AsyncIOMotorDatabase:
    """Staff accounts."""
    return (await get_mongo_client())[auth_db.DB_NAME]


async def get_zoo_db() -> AsyncIOMotorDatabase:
    """Animals, habitats and visitor records."""
    return (await get_mongo_client())[zoo_db.DB_NAME]


async def close_connections():
    """Close both clients; the next getter call reconnects."""
    global _mongo_client, _redis_client

    if _mongo_client is not None:
        _mongo_client.close()
        _mongo_client = None

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
