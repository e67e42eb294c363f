"""
Application lifecycle management using modern FastAPI lifespan pattern.

Startup verifies that the database and Redis answer; shutdown releases
the Redis client and the database pool.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from redis.exceptions import RedisError

from app.config.settings import get_settings
from app.core.config.redis import close_redis_client, get_redis_client
from app.database.async_db import async_engine, check_database_health

logger = logging.getLogger(__name__)


class LifecycleManager:
    """
    Manages application lifecycle events.

    Connectivity failures at startup are logged, not fatal: the health
    endpoint reports them and requests fail with clear errors.
    """

    def __init__(self) -> None:
        self._initialized = False

    async def startup(self) -> None:
        if self._initialized:
            logger.warning("Lifecycle already initialized, skipping startup")
            return

        settings = get_settings()
        logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENVIRONMENT})")
        self._verify_configurations()
        await self._verify_external_services()

        self._initialized = True
        logger.info("Application lifecycle startup completed")

    async def shutdown(self) -> None:
        if not self._initialized:
            logger.warning("Lifecycle not initialized, skipping shutdown")
            return

        logger.info("Stopping application lifecycle...")
        await close_redis_client()
        await async_engine.dispose()

        self._initialized = False
        logger.info("Application lifecycle shutdown completed")

    def _verify_configurations(self) -> None:
        settings = get_settings()
        if not settings.NOTIFICATION_WEBHOOK_URL:
            logger.info("NOTIFICATION_WEBHOOK_URL not configured - notifications are only logged")
        if not settings.ADMIN_NOTIFICATION_RECIPIENT:
            logger.warning("ADMIN_NOTIFICATION_RECIPIENT not configured - admin notifications have no recipient")
        if not settings.SENTRY_DSN:
            logger.info("SENTRY_DSN not configured - error reporting is disabled")

    async def _verify_external_services(self) -> None:
        if await check_database_health():
            logger.info("Database connectivity verified")
        else:
            logger.warning("Database connectivity failed")

        try:
            await get_redis_client().ping()
            logger.info("Redis connectivity verified")
        except RedisError as e:
            logger.warning(f"Redis connectivity failed: {e}")


_lifecycle_manager: LifecycleManager | None = None


def get_lifecycle_manager() -> LifecycleManager:
    """Get or create the global lifecycle manager instance."""
    global _lifecycle_manager
    if _lifecycle_manager is None:
        _lifecycle_manager = LifecycleManager()
    return _lifecycle_manager


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """FastAPI lifespan: startup before the yield, shutdown after."""
    lifecycle = get_lifecycle_manager()
    await lifecycle.startup()
    yield
    await lifecycle.shutdown()
