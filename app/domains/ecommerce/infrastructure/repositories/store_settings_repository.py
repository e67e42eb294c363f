"""
Store Settings Repository Implementation

Persists the admin-adjustable shipping configuration in a single row,
seeded from application settings on first read.
"""

import logging
from decimal import Decimal

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.ecommerce.application.ports import IStoreSettingsRepository
from app.domains.ecommerce.domain.value_objects import ShippingConfig
from app.models.db import STORE_SETTINGS_ID, StoreSettingsModel

logger = logging.getLogger(__name__)


class SQLAlchemyStoreSettingsRepository(IStoreSettingsRepository):
    """SQLAlchemy implementation of the store settings store."""

    def __init__(self, session: AsyncSession, defaults: ShippingConfig):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
            defaults: Shipping configuration used when no row exists yet
        """
        self.session = session
        self.defaults = defaults

    async def get_shipping_config(self) -> ShippingConfig:
        model = await self._get_or_seed()
        return ShippingConfig(
            flat_fee=Decimal(model.shipping_fee),
            free_shipping_threshold=Decimal(model.free_shipping_threshold),
        )

    async def update_shipping_config(self, config: ShippingConfig, updated_by: str | None = None) -> ShippingConfig:
        model = await self._get_or_seed()
        model.shipping_fee = config.flat_fee
        model.free_shipping_threshold = config.free_shipping_threshold
        model.updated_by = updated_by
        await self.session.flush()
        logger.info(
            f"Shipping settings updated by {updated_by}: fee={config.flat_fee} "
            f"threshold={config.free_shipping_threshold}"
        )
        return config

    async def _get_or_seed(self) -> StoreSettingsModel:
        model = await self._select()
        if model is not None:
            return model
        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    insert(StoreSettingsModel).values(
                        id=STORE_SETTINGS_ID,
                        shipping_fee=self.defaults.flat_fee,
                        free_shipping_threshold=self.defaults.free_shipping_threshold,
                    )
                )
            logger.info("Store settings seeded from defaults")
        except IntegrityError:
            logger.info("Store settings seeded concurrently")
        model = await self._select()
        if model is None:
            raise RuntimeError("Store settings row missing after seeding")
        return model

    async def _select(self) -> StoreSettingsModel | None:
        result = await self.session.execute(
            select(StoreSettingsModel)
            .where(StoreSettingsModel.id == STORE_SETTINGS_ID)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()
