"""
Process Order Requests Use Cases

Administrator decisions on pending cancellation and return requests.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from app.domains.ecommerce.domain.entities import Order
from app.domains.ecommerce.domain.value_objects import RefundMethod

from .order_transition import OrderTransitionUseCase

logger = logging.getLogger(__name__)


@dataclass
class ProcessCancelRequestRequest:
    """Decision on a cancellation request."""

    order_id: str
    approved: bool
    processed_by: str
    notes: str | None = None


@dataclass
class ProcessReturnRequestRequest:
    """Decision on a return request."""

    order_id: str
    approved: bool
    processed_by: str
    refund_amount: Decimal | None = None
    refund_method: RefundMethod | None = None
    return_tracking_number: str | None = None
    notes: str | None = None


class ProcessCancelRequestUseCase(OrderTransitionUseCase):
    """
    Use Case: Process Cancel Request

    Approval cancels the order, marks it refunded and returns every line's
    units to stock within the same transaction.
    """

    async def execute(self, request: ProcessCancelRequestRequest) -> Order:
        order = await self._load(request.order_id)
        result = self.lifecycle.process_cancel_request(
            order,
            approved=request.approved,
            processed_by=request.processed_by,
            notes=request.notes,
        )
        saved = await self._apply(result)
        logger.info(
            f"Cancellation {'approved' if request.approved else 'rejected'} for order "
            f"{saved.order_number} by {request.processed_by}"
        )
        return saved


class ProcessReturnRequestUseCase(OrderTransitionUseCase):
    """
    Use Case: Process Return Request

    Approval marks the order returned and records refund details.
    Returned goods are inspected before they go back on sale, so stock is
    not restored here.
    """

    async def execute(self, request: ProcessReturnRequestRequest) -> Order:
        order = await self._load(request.order_id)
        result = self.lifecycle.process_return_request(
            order,
            approved=request.approved,
            processed_by=request.processed_by,
            refund_amount=request.refund_amount,
            refund_method=request.refund_method,
            tracking_number=request.return_tracking_number,
            notes=request.notes,
        )
        saved = await self._apply(result)
        logger.info(
            f"Return {'approved' if request.approved else 'rejected'} for order "
            f"{saved.order_number} by {request.processed_by}"
        )
        return saved


__all__ = [
    "ProcessCancelRequestUseCase",
    "ProcessCancelRequestRequest",
    "ProcessReturnRequestUseCase",
    "ProcessReturnRequestRequest",
]
