from decimal import Decimal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and ``.env``.
    """

    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Vibe Bites API"
    PROJECT_DESCRIPTION: str = "Catalog, cart, checkout and order management for the Vibe Bites store"
    VERSION: str = "0.1.0"
    CORS_ORIGINS: list[str] = Field(default=["*"], description="Allowed CORS origins")

    # PostgreSQL Database Settings
    DB_HOST: str = Field("localhost", description="PostgreSQL host")
    DB_PORT: int = Field(5432, description="PostgreSQL port")
    DB_NAME: str = Field("vibe_bites", description="Database name")
    DB_USER: str = Field("vibe_bites", description="Database user")
    DB_PASSWORD: str | None = Field(None, description="Database password")
    DB_ECHO: bool = Field(False, description="Log SQL queries (debug only)")
    DATABASE_URL_OVERRIDE: str | None = Field(
        None, description="Full async SQLAlchemy URL; takes precedence over the DB_* fields"
    )

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(20, description="Connection pool size")
    DB_MAX_OVERFLOW: int = Field(30, description="Maximum pool overflow")
    DB_POOL_RECYCLE: int = Field(3600, description="Recycle connections every N seconds")
    DB_POOL_TIMEOUT: int = Field(30, description="Seconds to wait for a pooled connection")

    # Redis Settings (cart store)
    REDIS_HOST: str = Field("localhost", description="Redis host")
    REDIS_PORT: int = Field(6379, description="Redis port")
    REDIS_DB: int = Field(0, description="Redis database")
    REDIS_PASSWORD: str | None = Field(None, description="Redis password")
    CART_TTL_SECONDS: int = Field(60 * 60 * 24 * 30, description="Idle carts expire after this many seconds")

    # Store defaults (seed values for the persisted store settings)
    DEFAULT_SHIPPING_FEE: Decimal = Field(Decimal("49"), description="Flat shipping fee")
    DEFAULT_FREE_SHIPPING_THRESHOLD: Decimal = Field(
        Decimal("500"), description="Subtotal at or above which shipping is free"
    )

    # Order numbering
    ORDER_NUMBER_PREFIX: str = Field("VB", description="Prefix of human-readable order numbers")
    ORDER_NUMBER_MAX_RETRIES: int = Field(
        3, description="Checkout attempts when a concurrent order takes the same number"
    )

    # Notifications
    NOTIFICATION_WEBHOOK_URL: str | None = Field(
        None, description="Endpoint receiving templated notification requests; log only when unset"
    )
    NOTIFICATION_TIMEOUT: float = Field(10.0, description="Notification webhook timeout in seconds")
    ADMIN_NOTIFICATION_RECIPIENT: str | None = Field(
        None, description="Address receiving admin notifications (cancel/return requests, reviews)"
    )

    # Environment
    DEBUG: bool = Field(False, description="Debug mode")
    ENVIRONMENT: str = Field("production", description="Runtime environment")

    # Logging
    LOG_LEVEL: str = Field("INFO", description="Root log level")
    LOG_FORMAT: str = Field("colored", description="Log format: colored, json or plain")
    LOG_FILE: str | None = Field(None, description="Optional log file path")

    # Monitoring
    SENTRY_DSN: str | None = Field(None, description="Sentry DSN; Sentry is disabled when unset")

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def validate_pool_size(cls, v):
        if v < 1:
            raise ValueError("DB_POOL_SIZE must be at least 1")
        if v > 100:
            raise ValueError("DB_POOL_SIZE should not exceed 100")
        return v

    @field_validator("DB_MAX_OVERFLOW")
    @classmethod
    def validate_max_overflow(cls, v):
        if v < 0:
            raise ValueError("DB_MAX_OVERFLOW must be 0 or greater")
        if v > 200:
            raise ValueError("DB_MAX_OVERFLOW should not exceed 200")
        return v

    @field_validator("DEFAULT_SHIPPING_FEE", "DEFAULT_FREE_SHIPPING_THRESHOLD")
    @classmethod
    def validate_non_negative_amount(cls, v):
        if v < 0:
            raise ValueError("Shipping amounts cannot be negative")
        return v

    @field_validator("ORDER_NUMBER_MAX_RETRIES")
    @classmethod
    def validate_retries(cls, v):
        if v < 1:
            raise ValueError("ORDER_NUMBER_MAX_RETRIES must be at least 1")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in ("colored", "json", "plain"):
            raise ValueError("LOG_FORMAT must be one of: colored, json, plain")
        return v

    @computed_field
    @property
    def redis_url(self) -> str:
        """Redis connection URL"""
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @computed_field
    @property
    def is_development(self) -> bool:
        """True for debug or local environments"""
        return self.DEBUG or self.ENVIRONMENT.lower() in ["development", "dev", "local"]


# Settings singleton
_settings_instance = None


def get_settings() -> Settings:
    """
    Return the cached settings instance.
    Environment variables are only read once.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
