"""
Base Container - Shared Singletons.

Single Responsibility: Manage process-wide resources (event publisher,
notification service, Redis client).
"""

import logging

import redis.asyncio as aioredis

from app.config.settings import Settings, get_settings
from app.core.config.redis import get_redis_client
from app.core.domain import DomainEventPublisher
from app.domains.ecommerce.application.ports import INotificationService
from app.domains.ecommerce.infrastructure.services import (
    create_notification_service,
    register_notification_handlers,
)
from app.domains.ecommerce.domain.value_objects import ShippingConfig

logger = logging.getLogger(__name__)


class BaseContainer:
    """
    Base container for shared singletons.

    Single Responsibility: Create and cache resources shared by all requests.
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize base container.

        Args:
            settings: Optional settings (defaults to the cached application settings)
        """
        self.settings = settings or get_settings()

        # Singletons
        self._publisher: DomainEventPublisher | None = None
        self._notification_service: INotificationService | None = None

        logger.info("BaseContainer initialized")

    def get_notification_service(self) -> INotificationService:
        """Get notification service (singleton)."""
        if self._notification_service is None:
            self._notification_service = create_notification_service(self.settings)
            logger.info(f"Notification service: {type(self._notification_service).__name__}")
        return self._notification_service

    def get_event_publisher(self) -> DomainEventPublisher:
        """Get event publisher (singleton) with notification delivery subscribed."""
        if self._publisher is None:
            self._publisher = DomainEventPublisher()
            register_notification_handlers(self._publisher, self.get_notification_service())
        return self._publisher

    def get_redis(self) -> aioredis.Redis:
        """Get the shared async Redis client."""
        return get_redis_client()

    def get_default_shipping_config(self) -> ShippingConfig:
        """Shipping rule used to seed the persisted store settings."""
        return ShippingConfig(
            flat_fee=self.settings.DEFAULT_SHIPPING_FEE,
            free_shipping_threshold=self.settings.DEFAULT_FREE_SHIPPING_THRESHOLD,
        )
