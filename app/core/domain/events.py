"""
Base Domain Event Classes for Domain-Driven Design

Domain Events represent significant business occurrences that domain experts
care about. Domain services return them as side effects of a state change;
the application layer decides when they are executed or published.
"""

import logging
from abc import ABC
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Coroutine
from uuid import UUID, uuid4

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Base class for all domain events.

    Domain events are immutable records of something that happened
    in the domain. They capture the fact that something occurred.

    Example:
        ```python
        @dataclass(frozen=True, kw_only=True)
        class OrderPlaced(DomainEvent):
            order_id: str
            total: Decimal
        ```
    """

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    version: int = field(default=1)

    @property
    def event_type(self) -> str:
        """Get the event type name (class name)."""
        return self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for serialization."""
        result: dict[str, Any] = {
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
        }
        for key, value in self.__dict__.items():
            if key not in result:
                result[key] = _serialize(value)
        return result


def _serialize(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    if hasattr(value, "__dataclass_fields__"):
        return {k: _serialize(v) for k, v in value.__dict__.items()}
    return value


# Type aliases for event handlers
EventHandler = Callable[[DomainEvent], Coroutine[Any, Any, None]]


class DomainEventPublisher:
    """
    In-memory domain event publisher.

    Handlers are registered per event class. A failing handler is logged
    and never prevents the remaining handlers from running, so publishing
    after a commit cannot undo the committed change.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}

    def subscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: Type of event to subscribe to
            handler: Async handler function
        """
        self._handlers.setdefault(event_type.__name__, []).append(handler)

    async def publish(self, event: DomainEvent) -> None:
        """
        Publish a domain event to all subscribers.

        Args:
            event: Event to publish
        """
        event_name = event.event_type
        for handler in self._handlers.get(event_name, []):
            try:
                await handler(event)
            except Exception as e:
                logger.exception(f"Error in event handler for {event_name}: {e}")

    async def publish_all(self, events: list[DomainEvent]) -> None:
        """
        Publish multiple events in order.

        Args:
            events: List of events to publish
        """
        for event in events:
            await self.publish(event)

    def clear_handlers(self) -> None:
        """Clear all event handlers (useful for testing)."""
        self._handlers.clear()
