"""
Track Order Use Case

Business logic for tracking order status and shipping.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from app.core.domain import EntityNotFoundException, ValidationException
from app.domains.ecommerce.application.ports import IOrderRepository
from app.domains.ecommerce.domain.entities import Order
from app.domains.ecommerce.domain.value_objects import OrderStatus

logger = logging.getLogger(__name__)

_STEP_TITLES = {
    OrderStatus.PENDING: ("Order Placed", "Your order has been placed and is being reviewed"),
    OrderStatus.CONFIRMED: ("Order Confirmed", "Your order has been confirmed and is being prepared"),
    OrderStatus.PROCESSING: ("Processing", "Your order is being prepared for shipment"),
    OrderStatus.SHIPPED: ("Shipped", "Your order has been shipped"),
    OrderStatus.DELIVERED: ("Delivered", "Your order has been delivered"),
}


@dataclass
class TrackOrderRequest:
    """Request for tracking an order."""

    order_number: str


@dataclass
class TimelineStep:
    """One step of the main order flow."""

    status: OrderStatus
    title: str
    description: str
    timestamp: datetime | None
    completed: bool


@dataclass
class TrackOrderResponse:
    """Response from order tracking."""

    order: Order
    timeline: list[TimelineStep] = field(default_factory=list)


def build_timeline(order: Order) -> list[TimelineStep]:
    """
    Five-step view of the main flow.

    Steps up to the order's furthest main-flow status are completed. A
    returned order had been delivered; a cancelled one only shows placement.
    """
    flow = OrderStatus.main_flow()
    if order.status == OrderStatus.RETURNED:
        reached = flow.index(OrderStatus.DELIVERED)
    elif order.status in flow:
        reached = flow.index(order.status)
    else:
        reached = 0

    shipping = order.shipping_details
    steps = []
    for index, status in enumerate(flow):
        title, description = _STEP_TITLES[status]
        completed = index <= reached
        timestamp = None
        if status == OrderStatus.PENDING:
            timestamp = order.created_at
        elif status == OrderStatus.SHIPPED:
            if shipping.tracking_number:
                description = f"Your order has been shipped (Tracking: {shipping.tracking_number})"
            timestamp = shipping.shipped_at or (order.updated_at if completed else None)
        elif status == OrderStatus.DELIVERED:
            timestamp = shipping.delivered_at or (order.updated_at if completed else None)
        elif completed:
            timestamp = order.updated_at
        steps.append(
            TimelineStep(
                status=status,
                title=title,
                description=description,
                timestamp=timestamp,
                completed=completed,
            )
        )
    return steps


class TrackOrderUseCase:
    """
    Use Case: Track Order

    Public lookup by order number.

    Responsibilities:
    - Find order by order number
    - Build the tracking timeline
    """

    def __init__(self, order_repository: IOrderRepository):
        """
        Initialize use case with dependencies.

        Args:
            order_repository: Repository for order data access
        """
        self.order_repository = order_repository

    async def execute(self, request: TrackOrderRequest) -> TrackOrderResponse:
        """
        Get tracking information for an order.

        Args:
            request: Track order request

        Returns:
            TrackOrderResponse with the order and its timeline
        """
        if not request.order_number:
            raise ValidationException("Order number is required", field="order_number")

        order = await self.order_repository.get_by_order_number(request.order_number.strip().upper())
        if order is None:
            raise EntityNotFoundException("Order", request.order_number)

        logger.info(f"Order tracked: {order.order_number}")

        return TrackOrderResponse(order=order, timeline=build_timeline(order))


__all__ = ["TrackOrderUseCase", "TrackOrderRequest", "TrackOrderResponse", "TimelineStep", "build_timeline"]
