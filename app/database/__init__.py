"""
Database Module

Async SQLAlchemy engine, session factory and FastAPI session dependency.
"""

from app.database.async_db import (
    AsyncSessionLocal,
    async_engine,
    check_database_health,
    get_async_db,
    get_async_db_context,
)

__all__ = [
    "AsyncSessionLocal",
    "async_engine",
    "check_database_health",
    "get_async_db",
    "get_async_db_context",
]
