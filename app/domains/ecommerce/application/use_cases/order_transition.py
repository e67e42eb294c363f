"""
Order Transition Base

Shared plumbing for use cases that move an order through its lifecycle:
load the order, apply the pure transition, persist it together with its
restock effects, commit, then publish notifications.
"""

import logging

from app.core.domain import AuthorizationException, DomainEventPublisher, EntityNotFoundException
from app.domains.ecommerce.application.ports import IOrderRepository, IProductRepository, ITransaction
from app.domains.ecommerce.domain.entities import Order
from app.domains.ecommerce.domain.services import OrderLifecycle, TransitionResult

logger = logging.getLogger(__name__)


class OrderTransitionUseCase:
    """Base class for order lifecycle use cases."""

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        transaction: ITransaction,
        publisher: DomainEventPublisher,
        lifecycle: OrderLifecycle | None = None,
    ):
        self.order_repository = order_repository
        self.product_repository = product_repository
        self.transaction = transaction
        self.publisher = publisher
        self.lifecycle = lifecycle or OrderLifecycle()

    async def _load(self, order_id: str, user_id: str | None = None) -> Order:
        """Fetch an order, restricted to its owner when ``user_id`` is given."""
        order = await self.order_repository.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundException("Order", order_id)
        if user_id is not None and not order.belongs_to(user_id):
            raise AuthorizationException("access", f"order:{order_id}", user_id)
        return order

    async def _apply(self, result: TransitionResult) -> Order:
        """
        Persist a transition.

        The order update and its restocks commit together; notifications
        go out only once the commit succeeded.
        """
        try:
            saved = await self.order_repository.update(result.order)
            for restock in result.restocks:
                for line in restock.lines:
                    restored = await self.product_repository.restock(line.product_id, line.size, line.quantity)
                    if not restored:
                        logger.warning(
                            f"Restock skipped for order {restock.order_id}: "
                            f"product {line.product_id} size {line.size} no longer exists"
                        )
            await self.transaction.commit()
        except Exception:
            await self.transaction.rollback()
            raise

        await self.publisher.publish_all(list(result.notifications))
        return saved
