"""
Notification Services

Delivery of templated notification requests raised by order transitions
and reviews. Delivery happens after the triggering change is committed,
so a failure here is logged by the publisher and never rolls anything back.
"""

import logging
from typing import Any

import httpx

from app.config.settings import Settings
from app.core.domain import DomainEventPublisher, IntegrationException
from app.domains.ecommerce.application.ports import INotificationService
from app.domains.ecommerce.domain.events import Audience, NotificationRequested

logger = logging.getLogger(__name__)


def build_payload(notification: NotificationRequested, admin_recipient: str | None = None) -> dict[str, Any]:
    """Wire representation of a notification request."""
    recipient = notification.recipient
    if notification.audience == Audience.ADMIN:
        recipient = admin_recipient or recipient
    return {
        "event_id": str(notification.event_id),
        "template": notification.template.value,
        "audience": notification.audience.value,
        "recipient": recipient,
        "data": notification.data,
        "occurred_at": notification.occurred_at.isoformat(),
    }


class LoggingNotificationService(INotificationService):
    """Writes notifications to the log. Used when no webhook is configured."""

    def __init__(self, admin_recipient: str | None = None):
        self.admin_recipient = admin_recipient

    async def send(self, notification: NotificationRequested) -> None:
        payload = build_payload(notification, self.admin_recipient)
        logger.info(
            f"Notification {payload['template']} for {payload['audience']} "
            f"<{payload['recipient'] or 'unknown'}>: {payload['data']}"
        )


class HttpNotificationService(INotificationService):
    """Posts notifications as JSON to a webhook that renders and delivers them."""

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10.0,
        admin_recipient: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize service.

        Args:
            webhook_url: Endpoint receiving notification payloads
            timeout: Request timeout in seconds
            admin_recipient: Address used for admin-audience notifications
            client: Optional shared client (a short-lived one is created per call otherwise)
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.admin_recipient = admin_recipient
        self._client = client

    async def send(self, notification: NotificationRequested) -> None:
        payload = build_payload(notification, self.admin_recipient)
        try:
            if self._client is not None:
                response = await self._client.post(self.webhook_url, json=payload, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.webhook_url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise IntegrationException("notifications", f"Failed to send {payload['template']}", e) from e

        logger.info(f"Notification {payload['template']} delivered to webhook")


def create_notification_service(settings: Settings) -> INotificationService:
    """Webhook delivery when configured, log-only otherwise."""
    if settings.NOTIFICATION_WEBHOOK_URL:
        return HttpNotificationService(
            webhook_url=settings.NOTIFICATION_WEBHOOK_URL,
            timeout=settings.NOTIFICATION_TIMEOUT,
            admin_recipient=settings.ADMIN_NOTIFICATION_RECIPIENT,
        )
    return LoggingNotificationService(admin_recipient=settings.ADMIN_NOTIFICATION_RECIPIENT)


def register_notification_handlers(publisher: DomainEventPublisher, service: INotificationService) -> None:
    """Route published NotificationRequested events to the notification service."""

    async def handle(event) -> None:
        await service.send(event)

    publisher.subscribe(NotificationRequested, handle)
