"""
Fixtures for tests that run the SQLAlchemy repositories against a real
SQLite database file.

Every transaction starts with ``BEGIN IMMEDIATE`` so concurrent sessions
serialize on the write lock the way row locks serialize them on
PostgreSQL.
"""

from decimal import Decimal

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from app.domains.ecommerce.domain.entities import ProductSize
from app.domains.ecommerce.domain.value_objects import ShippingConfig
from app.domains.ecommerce.infrastructure.repositories import SQLAlchemyProductRepository
from app.models.db import Base
from tests.conftest import make_product


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'vibe_bites.db'}")

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
def default_shipping() -> ShippingConfig:
    return ShippingConfig(flat_fee=Decimal("49"), free_shipping_threshold=Decimal("500"))


@pytest.fixture
async def seeded_product(session_factory):
    """Masala Makhana with a single 100g unit and plenty of 250g."""
    product = make_product(
        sizes=[
            ProductSize(label="100g", price=Decimal("120.00"), stock=1),
            ProductSize(label="250g", price=Decimal("280.00"), stock=20),
        ]
    )
    async with session_factory() as session:
        await SQLAlchemyProductRepository(session).add(product)
        await session.commit()
    return product
