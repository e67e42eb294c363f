"""
Unit tests for notification delivery.
"""

import json

import httpx
import pytest

from app.config.settings import Settings
from app.core.domain import DomainEventPublisher, IntegrationException
from app.domains.ecommerce.domain.events import Audience, NotificationRequested, NotificationTemplate
from app.domains.ecommerce.infrastructure.services.notification_service import (
    HttpNotificationService,
    LoggingNotificationService,
    build_payload,
    create_notification_service,
    register_notification_handlers,
)

WEBHOOK_URL = "https://hooks.example.com/notify"


def shipped_notification() -> NotificationRequested:
    return NotificationRequested(
        template=NotificationTemplate.ORDER_SHIPPED,
        recipient="asha@example.com",
        data={"order_number": "VB202504170001", "tracking_number": "TRK1"},
    )


class TestBuildPayload:
    def test_customer_payload(self):
        payload = build_payload(shipped_notification(), admin_recipient="ops@example.com")

        assert payload["template"] == "order_shipped"
        assert payload["audience"] == "customer"
        assert payload["recipient"] == "asha@example.com"
        assert json.dumps(payload)

    def test_admin_payload_uses_admin_recipient(self):
        notification = NotificationRequested(template=NotificationTemplate.CANCEL_REQUEST, audience=Audience.ADMIN)

        payload = build_payload(notification, admin_recipient="ops@example.com")

        assert payload["recipient"] == "ops@example.com"


class TestHttpNotificationService:
    @pytest.mark.asyncio
    async def test_posts_payload(self):
        received = []

        def handler(request: httpx.Request) -> httpx.Response:
            received.append(json.loads(request.content))
            return httpx.Response(202)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            service = HttpNotificationService(WEBHOOK_URL, client=client)
            await service.send(shipped_notification())

        assert received[0]["template"] == "order_shipped"
        assert received[0]["data"]["tracking_number"] == "TRK1"

    @pytest.mark.asyncio
    async def test_http_error_raises_integration_exception(self):
        async with httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(500))) as client:
            service = HttpNotificationService(WEBHOOK_URL, client=client)

            with pytest.raises(IntegrationException):
                await service.send(shipped_notification())

    @pytest.mark.asyncio
    async def test_failed_delivery_does_not_escape_publisher(self):
        """Test a broken webhook is logged by the publisher, not raised to the caller."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        publisher = DomainEventPublisher()
        async with httpx.AsyncClient(transport=httpx.MockTransport(refuse)) as client:
            register_notification_handlers(publisher, HttpNotificationService(WEBHOOK_URL, client=client))
            await publisher.publish(shipped_notification())


class TestCreateNotificationService:
    def test_webhook_when_configured(self):
        settings = Settings(NOTIFICATION_WEBHOOK_URL=WEBHOOK_URL)

        assert isinstance(create_notification_service(settings), HttpNotificationService)

    def test_logging_by_default(self):
        settings = Settings(NOTIFICATION_WEBHOOK_URL=None)

        assert isinstance(create_notification_service(settings), LoggingNotificationService)
