"""
Core Configuration Module

Provides configuration management for the application.
"""

from app.config.settings import Settings, get_settings
from app.core.config.redis import RedisConfig, close_redis_client, get_redis_client, get_redis_config

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Redis
    "RedisConfig",
    "get_redis_config",
    "get_redis_client",
    "close_redis_client",
]
