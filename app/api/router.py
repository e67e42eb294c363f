"""
Top-level routers. ``api_router`` is mounted under ``API_V1_STR``;
``health_router`` is served at the application root.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError

from app.config.settings import get_settings
from app.core.config.redis import get_redis_client
from app.database.async_db import check_database_health
from app.domains.ecommerce.api.routes import router as ecommerce_router

logger = logging.getLogger(__name__)

api_router = APIRouter()

api_router.include_router(ecommerce_router)

health_router = APIRouter(tags=["health"])


@health_router.get("/health")
async def health_check() -> JSONResponse:
    """Report database and Redis reachability; 503 when either is down."""
    database_ok = await check_database_health()
    try:
        redis_ok = bool(await get_redis_client().ping())
    except RedisError as e:
        logger.error(f"Redis health check failed: {e}")
        redis_ok = False

    healthy = database_ok and redis_ok
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "ok" if healthy else "degraded",
            "environment": get_settings().ENVIRONMENT,
            "database": "ok" if database_ok else "unavailable",
            "redis": "ok" if redis_ok else "unavailable",
        },
    )
