"""
E-commerce Domain Events

Side effects returned by order transitions. The application layer applies
restock effects inside the order's transaction and publishes notification
effects after the commit.
"""

from dataclasses import dataclass, field
from typing import Any

from app.core.domain import DomainEvent, StatusEnum


class NotificationTemplate(StatusEnum):
    """Templated messages the notification collaborator knows how to send."""

    ORDER_CONFIRMATION = "order_confirmation"
    ORDER_SHIPPED = "order_shipped"
    ORDER_CANCELLED = "order_cancelled"
    RETURN_PROCESSED = "return_processed"
    CANCEL_REQUEST = "cancel_request"
    RETURN_REQUEST = "return_request"
    NEW_REVIEW = "new_review"


class Audience(StatusEnum):
    """Who a notification is addressed to."""

    CUSTOMER = "customer"
    ADMIN = "admin"


@dataclass(frozen=True, kw_only=True)
class NotificationRequested(DomainEvent):
    """Fire-and-forget request to send a templated message."""

    template: NotificationTemplate
    audience: Audience = Audience.CUSTOMER
    recipient: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RestockLine:
    """Units of one product size to put back on the shelf."""

    product_id: str
    size: str
    quantity: int


@dataclass(frozen=True, kw_only=True)
class StockRestockRequested(DomainEvent):
    """Compensating stock increment for a cancelled order."""

    order_id: str | None
    lines: tuple[RestockLine, ...]
