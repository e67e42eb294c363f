"""
Get Order Use Case

Single order lookup, restricted to its owner unless the caller is an admin.
"""

from dataclasses import dataclass

from app.core.domain import AuthorizationException, EntityNotFoundException
from app.domains.ecommerce.application.ports import IOrderRepository
from app.domains.ecommerce.domain.entities import Order


@dataclass
class GetOrderRequest:
    """Request for one order."""

    order_id: str
    user_id: str | None = None
    is_admin: bool = False


class GetOrderUseCase:
    """Use Case: Get Order"""

    def __init__(self, order_repository: IOrderRepository):
        self.order_repository = order_repository

    async def execute(self, request: GetOrderRequest) -> Order:
        order = await self.order_repository.get_by_id(request.order_id)
        if order is None:
            raise EntityNotFoundException("Order", request.order_id)
        if not request.is_admin and (request.user_id is None or not order.belongs_to(request.user_id)):
            raise AuthorizationException("view", f"order:{request.order_id}", request.user_id)
        return order


__all__ = ["GetOrderUseCase", "GetOrderRequest"]
