"""
Health Check Endpoints
"""

import logging
from typing import Any

from fastapi import APIRouter, Request
from redis import asyncio as aioredis
from redis.exceptions import RedisError

from src.core import check_database_connection
from src.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


async def check_redis_connection(redis_url: str) -> bool:
    """Ping the rate limit store."""
    client = aioredis.from_url(redis_url)
    try:
        return bool(await client.ping())
    except (RedisError, OSError) as e:
        logger.error(f"Redis health check failed: {e}")
        return False
    finally:
        await client.aclose()


@router.get("")
async def health_check() -> dict[str, str]:
    """
    Basic health check endpoint.

    Returns:
        Basic application information and status
    """
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
    }


@router.get("/ready")
async def readiness_check(request: Request) -> dict[str, Any]:
    """
    Readiness check endpoint.

    Verifies database connectivity and, when rate limits are stored in
    Redis, Redis connectivity.

    Returns:
        Detailed readiness status
    """
    checks = {}

    db_healthy = await check_database_connection(request.app.state.sessionmaker)
    checks["database"] = "ok" if db_healthy else "ko"

    healthy = db_healthy
    if settings.redis_url_str:
        redis_healthy = await check_redis_connection(settings.redis_url_str)
        checks["redis"] = "ok" if redis_healthy else "ko"
        healthy = healthy and redis_healthy

    return {
        "status": "ready" if healthy else "degraded",
        "app": settings.app_name,
        "version": settings.version,
        "checks": checks,
    }
