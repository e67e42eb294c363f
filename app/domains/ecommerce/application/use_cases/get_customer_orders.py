"""
Get Customer Orders Use Case

Business logic for retrieving customer order history.
"""

import logging
from dataclasses import dataclass, field

from app.core.domain import ValidationException
from app.domains.ecommerce.application.ports import IOrderRepository
from app.domains.ecommerce.domain.entities import Order
from app.domains.ecommerce.domain.value_objects import OrderStatus

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


@dataclass
class GetCustomerOrdersRequest:
    """Request for getting customer orders."""

    user_id: str
    status: OrderStatus | None = None
    page: int = 1
    limit: int = 10


@dataclass
class OrderPage:
    """One page of orders, newest first."""

    orders: list[Order] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0


def page_offset(page: int, limit: int) -> int:
    """Validate paging arguments and return the row offset."""
    if page < 1:
        raise ValidationException("Page must be at least 1", field="page")
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationException(f"Limit must be between 1 and {MAX_PAGE_SIZE}", field="limit")
    return (page - 1) * limit


class GetCustomerOrdersUseCase:
    """
    Use Case: Get Customer Orders

    Retrieves order history for a customer.

    Responsibilities:
    - Find orders by user ID, optionally filtered by status
    - Support pagination
    """

    def __init__(self, order_repository: IOrderRepository):
        """
        Initialize use case with dependencies.

        Args:
            order_repository: Repository for order data access
        """
        self.order_repository = order_repository

    async def execute(self, request: GetCustomerOrdersRequest) -> OrderPage:
        """
        Get orders for a customer.

        Args:
            request: Get customer orders request

        Returns:
            OrderPage with the requested page
        """
        if not request.user_id:
            raise ValidationException("User ID is required", field="user_id")

        offset = page_offset(request.page, request.limit)
        orders, total = await self.order_repository.list_for_user(
            request.user_id, status=request.status, limit=request.limit, offset=offset
        )

        logger.info(f"Retrieved {len(orders)} of {total} orders for user {request.user_id}")

        return OrderPage(orders=orders, total=total, page=request.page, limit=request.limit)


__all__ = [
    "GetCustomerOrdersUseCase",
    "GetCustomerOrdersRequest",
    "OrderPage",
    "page_offset",
]
