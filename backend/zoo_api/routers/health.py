"""
Health check router for liveness and readiness probes.
"""
import logging

from fastapi import APIRouter, status
from pymongo.errors import PyMongoError
from redis.exceptions import RedisError

from zoo_api.database.connections import get_mongo_client, get_redis_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if the API is running.
    """
    return {"status": "healthy"}


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness check with dependencies",
)
async def readiness_check():
    """
    Readiness check that verifies database connections.
    Reports "degraded" when MongoDB or Redis cannot be reached.
    """
    checks = {
        "api": "healthy",
        "mongodb": "unknown",
        "redis": "unknown",
    }

    try:
        client = await get_mongo_client()
        await client.admin.command("ping")
        checks["mongodb"] = "healthy"
    except PyMongoError as e:
        logger.warning(f"MongoDB readiness check failed: {e}")
        checks["mongodb"] = f"unhealthy: {e}"

    try:
        redis = await get_redis_client()
        await redis.ping()
        checks["redis"] = "healthy"
    except RedisError as e:
        logger.warning(f"Redis readiness check failed: {e}")
        checks["redis"] = f"unhealthy: {e}"

    all_healthy = all(v == "healthy" for v in checks.values())

    return {
        "status": "healthy" if all_healthy else "degraded",
        "checks": checks,
    }
