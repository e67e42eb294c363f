"""
List Orders Use Case

Administrative order listing with status filters.
"""

import logging
from dataclasses import dataclass

from app.domains.ecommerce.application.ports import IOrderRepository
from app.domains.ecommerce.domain.value_objects import OrderStatus, PaymentStatus

from .get_customer_orders import OrderPage, page_offset

logger = logging.getLogger(__name__)


@dataclass
class ListOrdersRequest:
    """Filters and paging for the admin order list."""

    status: OrderStatus | None = None
    payment_status: PaymentStatus | None = None
    page: int = 1
    limit: int = 20


class ListOrdersUseCase:
    """Use Case: List Orders"""

    def __init__(self, order_repository: IOrderRepository):
        self.order_repository = order_repository

    async def execute(self, request: ListOrdersRequest) -> OrderPage:
        offset = page_offset(request.page, request.limit)
        orders, total = await self.order_repository.list_all(
            status=request.status,
            payment_status=request.payment_status,
            limit=request.limit,
            offset=offset,
        )
        logger.debug(f"Listed {len(orders)} of {total} orders")
        return OrderPage(orders=orders, total=total, page=request.page, limit=request.limit)


__all__ = ["ListOrdersUseCase", "ListOrdersRequest"]
