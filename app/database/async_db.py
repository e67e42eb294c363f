import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from urllib.parse import quote_plus

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def get_async_database_url(config: Settings | None = None) -> str:
    """Build the asyncpg database URL from settings"""
    config = config or settings
    if config.DATABASE_URL_OVERRIDE:
        return config.DATABASE_URL_OVERRIDE

    host = config.DB_HOST or "localhost"
    port = config.DB_PORT or 5432
    user = config.DB_USER or "postgres"
    database = config.DB_NAME
    password = config.DB_PASSWORD

    if not database:
        raise ValueError("Database name is required (DB_NAME)")

    encoded_user = quote_plus(user)
    if password:
        encoded_password = quote_plus(password)
        return f"postgresql+asyncpg://{encoded_user}:{encoded_password}@{host}:{port}/{database}"
    return f"postgresql+asyncpg://{encoded_user}@{host}:{port}/{database}"


def create_async_database_engine(config: Settings | None = None) -> AsyncEngine:
    """Create the async engine for the configured environment"""
    config = config or settings
    try:
        database_url = get_async_database_url(config)

        base_config = {
            "echo": config.DB_ECHO,
            "pool_pre_ping": True,
        }

        if config.is_development:
            logger.info("Creating async database engine for DEVELOPMENT (NullPool)")
            engine_config = {
                **base_config,
                "poolclass": NullPool,
            }
        else:
            logger.info("Creating async database engine for PRODUCTION (pooled)")
            engine_config = {
                **base_config,
                "pool_size": config.DB_POOL_SIZE,
                "max_overflow": config.DB_MAX_OVERFLOW,
                "pool_recycle": config.DB_POOL_RECYCLE,
                "pool_timeout": config.DB_POOL_TIMEOUT,
            }

        return create_async_engine(database_url, **engine_config)

    except Exception as e:
        logger.error(f"Failed to create async database engine: {e}")
        raise


async_engine = create_async_database_engine()

AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a request-scoped session.

    Use cases commit their own unit of work; anything left pending when
    the request ends is committed here, and errors roll back.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.error(f"Async database error: {e}")
            await session.rollback()
            raise


@asynccontextmanager
async def get_async_db_context():
    """Context manager variant of ``get_async_db`` for scripts and startup tasks"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.error(f"Async database error: {e}")
            await session.rollback()
            raise


async def check_database_health() -> bool:
    """Run a trivial query to confirm the database answers"""
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
