"""
Shipping Settings Use Cases

Read and change the persisted flat fee and free-shipping threshold.
"""

import logging
from decimal import Decimal

from app.domains.ecommerce.application.ports import IStoreSettingsRepository, ITransaction
from app.domains.ecommerce.domain.value_objects import ShippingConfig

logger = logging.getLogger(__name__)


class GetShippingSettingsUseCase:
    """Use Case: Get Shipping Settings"""

    def __init__(self, settings_repository: IStoreSettingsRepository, transaction: ITransaction):
        self.settings_repository = settings_repository
        self.transaction = transaction

    async def execute(self) -> ShippingConfig:
        config = await self.settings_repository.get_shipping_config()
        # First read may have seeded the row
        await self.transaction.commit()
        return config


class UpdateShippingSettingsUseCase:
    """Use Case: Update Shipping Settings"""

    def __init__(self, settings_repository: IStoreSettingsRepository, transaction: ITransaction):
        self.settings_repository = settings_repository
        self.transaction = transaction

    async def execute(
        self, shipping_fee: Decimal, free_shipping_threshold: Decimal, updated_by: str | None = None
    ) -> ShippingConfig:
        config = ShippingConfig(flat_fee=shipping_fee, free_shipping_threshold=free_shipping_threshold)
        try:
            await self.settings_repository.update_shipping_config(config, updated_by)
            await self.transaction.commit()
        except Exception:
            await self.transaction.rollback()
            raise
        return config


__all__ = ["GetShippingSettingsUseCase", "UpdateShippingSettingsUseCase"]
