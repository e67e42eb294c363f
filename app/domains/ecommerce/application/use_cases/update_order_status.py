"""
Update Order Status Use Cases

Administrative status overwrite and payment status recording.
"""

import logging
from dataclasses import dataclass

from app.domains.ecommerce.domain.entities import Order, PaymentDetails
from app.domains.ecommerce.domain.value_objects import OrderStatus, PaymentStatus

from .order_transition import OrderTransitionUseCase

logger = logging.getLogger(__name__)


@dataclass
class UpdateOrderStatusRequest:
    """Request for changing an order's status."""

    order_id: str
    status: OrderStatus
    notes: str | None = None
    tracking_number: str | None = None
    carrier: str | None = None


@dataclass
class UpdatePaymentStatusRequest:
    """Payment outcome reported for an order."""

    order_id: str
    payment_status: PaymentStatus
    transaction_id: str | None = None
    payment_intent_id: str | None = None
    payment_method: str | None = None


class UpdateOrderStatusUseCase(OrderTransitionUseCase):
    """
    Use Case: Update Order Status

    Overwrites the status without a transition table. Stock is not
    touched; cancellations that must restock go through the request flow.
    """

    async def execute(self, request: UpdateOrderStatusRequest) -> Order:
        order = await self._load(request.order_id)
        previous = order.status
        result = self.lifecycle.update_status(
            order,
            request.status,
            notes=request.notes,
            tracking_number=request.tracking_number,
            carrier=request.carrier,
        )
        saved = await self._apply(result)
        logger.info(f"Order {saved.order_number} status {previous.value} -> {saved.status.value}")
        return saved


class UpdatePaymentStatusUseCase(OrderTransitionUseCase):
    """Use Case: Update Payment Status"""

    async def execute(self, request: UpdatePaymentStatusRequest) -> Order:
        order = await self._load(request.order_id)
        details = PaymentDetails(
            transaction_id=request.transaction_id,
            payment_intent_id=request.payment_intent_id,
            payment_method=request.payment_method,
        )
        result = self.lifecycle.update_payment_status(order, request.payment_status, details)
        saved = await self._apply(result)
        logger.info(f"Order {saved.order_number} payment status -> {saved.payment_status.value}")
        return saved


__all__ = [
    "UpdateOrderStatusUseCase",
    "UpdateOrderStatusRequest",
    "UpdatePaymentStatusUseCase",
    "UpdatePaymentStatusRequest",
]
