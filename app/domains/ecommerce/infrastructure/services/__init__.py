"""
E-commerce Infrastructure Services

Outbound integrations of the e-commerce domain.
"""

from app.domains.ecommerce.infrastructure.services.notification_service import (
    HttpNotificationService,
    LoggingNotificationService,
    build_payload,
    create_notification_service,
    register_notification_handlers,
)

__all__ = [
    "HttpNotificationService",
    "LoggingNotificationService",
    "build_payload",
    "create_notification_service",
    "register_notification_handlers",
]
