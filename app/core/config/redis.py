"""
Redis Configuration

Provides Redis configuration and the shared async client used by the cart store.
"""

from dataclasses import dataclass

import redis.asyncio as aioredis

from app.config.settings import get_settings


@dataclass
class RedisConfig:
    """Redis configuration settings."""

    host: str
    port: int
    db: int
    password: str | None
    socket_timeout: float = 5.0

    @property
    def url(self) -> str:
        """Build Redis URL."""
        if self.password:
            return f"redis://:{self.password}@{self.host}:{self.port}/{self.db}"
        return f"redis://{self.host}:{self.port}/{self.db}"

    @property
    def connection_params(self) -> dict:
        """Get connection parameters for redis-py."""
        params = {
            "host": self.host,
            "port": self.port,
            "db": self.db,
            "decode_responses": True,
            "socket_timeout": self.socket_timeout,
            "socket_connect_timeout": self.socket_timeout,
        }
        if self.password:
            params["password"] = self.password
        return params


def get_redis_config() -> RedisConfig:
    """Get Redis configuration from settings."""
    settings = get_settings()
    return RedisConfig(
        host=settings.REDIS_HOST,
        port=settings.REDIS_PORT,
        db=settings.REDIS_DB,
        password=settings.REDIS_PASSWORD,
    )


_redis_client: aioredis.Redis | None = None


def get_redis_client() -> aioredis.Redis:
    """
    Return the process-wide async Redis client.

    The client connects lazily on first command, so creating it never blocks.
    """
    global _redis_client
    if _redis_client is None:
        _redis_client = aioredis.Redis(**get_redis_config().connection_params)
    return _redis_client


async def close_redis_client() -> None:
    """Close the shared client, if one was created."""
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


__all__ = [
    "RedisConfig",
    "get_redis_config",
    "get_redis_client",
    "close_redis_client",
]
