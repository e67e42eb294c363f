"""
Dependency Injection Container.

Centralized container for creating and managing all application dependencies.
Implements Dependency Inversion Principle by wiring concrete implementations to interfaces.

This module is the facade that composes the domain-specific containers.
"""

from __future__ import annotations

import logging

from app.config.settings import Settings
from app.core.domain import DomainEventPublisher

from .base import BaseContainer
from .ecommerce import EcommerceContainer

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency Injection Container (Facade).

    Single Responsibility: Compose and delegate to domain-specific containers.
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize container with all domain sub-containers.

        Args:
            settings: Optional settings (overrides the cached application settings)
        """
        self._base = BaseContainer(settings)
        self._ecommerce = EcommerceContainer(self._base)

        logger.info("DependencyContainer initialized")

    @property
    def settings(self) -> Settings:
        return self._base.settings

    @property
    def base(self) -> BaseContainer:
        return self._base

    @property
    def ecommerce(self) -> EcommerceContainer:
        return self._ecommerce

    def get_event_publisher(self) -> DomainEventPublisher:
        return self._base.get_event_publisher()


_container: DependencyContainer | None = None


def get_container() -> DependencyContainer:
    """Get the application container (singleton)."""
    global _container
    if _container is None:
        _container = DependencyContainer()
    return _container


def reset_container() -> None:
    """Drop the cached container (used by tests)."""
    global _container
    _container = None


__all__ = [
    "BaseContainer",
    "DependencyContainer",
    "EcommerceContainer",
    "get_container",
    "reset_container",
]
