"""
Request Order Changes Use Cases

Customer-filed cancellation and return requests.
"""

import logging
from dataclasses import dataclass

from app.domains.ecommerce.domain.entities import Order
from app.domains.ecommerce.domain.value_objects import CancelReason, ReturnReason

from .order_transition import OrderTransitionUseCase

logger = logging.getLogger(__name__)


@dataclass
class RequestCancellationRequest:
    """Request for cancelling an order."""

    order_id: str
    user_id: str
    reason: CancelReason
    description: str = ""


@dataclass
class RequestReturnRequest:
    """Request for returning an order."""

    order_id: str
    user_id: str
    reason: ReturnReason
    description: str = ""


class RequestCancellationUseCase(OrderTransitionUseCase):
    """
    Use Case: Request Cancellation

    The owner files a cancellation request for an order that has not shipped.
    Administrators are notified and decide it later.
    """

    async def execute(self, request: RequestCancellationRequest) -> Order:
        order = await self._load(request.order_id, request.user_id)
        result = self.lifecycle.request_cancellation(order, request.reason, request.description)
        saved = await self._apply(result)
        logger.info(f"Cancellation requested for order {saved.order_number} ({request.reason.value})")
        return saved


class RequestReturnUseCase(OrderTransitionUseCase):
    """
    Use Case: Request Return

    The owner files a return request for a delivered order.
    """

    async def execute(self, request: RequestReturnRequest) -> Order:
        order = await self._load(request.order_id, request.user_id)
        result = self.lifecycle.request_return(order, request.reason, request.description)
        saved = await self._apply(result)
        logger.info(f"Return requested for order {saved.order_number} ({request.reason.value})")
        return saved


__all__ = [
    "RequestCancellationUseCase",
    "RequestCancellationRequest",
    "RequestReturnUseCase",
    "RequestReturnRequest",
]
