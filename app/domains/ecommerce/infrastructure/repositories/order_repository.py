"""
Order Repository Implementation

SQLAlchemy implementation of IOrderRepository.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import ConcurrencyException, DuplicateEntityException
from app.domains.ecommerce.application.ports import IOrderRepository
from app.domains.ecommerce.domain.entities import (
    AppliedCoupon,
    CancelRequest,
    Order,
    OrderItem,
    PaymentDetails,
    ReturnRequest,
    ShippingDetails,
)
from app.domains.ecommerce.domain.services.order_numbering import day_bounds, next_order_number
from app.domains.ecommerce.domain.value_objects import OrderStatus, PaymentStatus, ShippingAddress
from app.models.db import OrderModel, OrderSequenceModel

from ._helpers import ensure_utc, is_unique_violation

logger = logging.getLogger(__name__)

# Attempts at seeding a day's counter row when concurrent first orders race
_SEED_ATTEMPTS = 3


class SQLAlchemyOrderRepository(IOrderRepository):
    """
    SQLAlchemy implementation of order repository.

    Writes never commit; the calling use case owns the transaction.
    Order updates are guarded by the ``version`` column.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def get_by_id(self, order_id: str) -> Order | None:
        """Get order by ID."""
        result = await self.session.execute(
            select(OrderModel).where(OrderModel.id == order_id).execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_order_number(self, order_number: str) -> Order | None:
        """Get order by order number."""
        result = await self.session.execute(
            select(OrderModel)
            .where(OrderModel.order_number == order_number)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_for_user(
        self, user_id: str, status: OrderStatus | None = None, limit: int = 10, offset: int = 0
    ) -> tuple[list[Order], int]:
        """Customer's orders, newest first."""
        conditions = [OrderModel.user_id == user_id]
        if status is not None:
            conditions.append(OrderModel.status == status)
        return await self._page(conditions, limit, offset)

    async def list_all(
        self,
        status: OrderStatus | None = None,
        payment_status: PaymentStatus | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Order], int]:
        """All orders, newest first."""
        conditions = []
        if status is not None:
            conditions.append(OrderModel.status == status)
        if payment_status is not None:
            conditions.append(OrderModel.payment_status == payment_status)
        return await self._page(conditions, limit, offset)

    async def count_for_user(self, user_id: str) -> int:
        """Count orders for a customer."""
        result = await self.session.execute(
            select(func.count(OrderModel.id)).where(OrderModel.user_id == user_id)
        )
        return result.scalar_one()

    async def allocate_order_number(self, now: datetime, prefix: str) -> str:
        """
        Take the next order number for the calendar day of ``now``.

        The per-day counter row is incremented with a single UPDATE, which
        holds the row lock until the surrounding transaction ends, so
        concurrent checkouts on the same day are serialized. The first
        order of a day seeds the row from the count of that day's orders.
        """
        day_key = f"{now:%Y%m%d}"

        for _ in range(_SEED_ATTEMPTS):
            value = await self._increment_counter(day_key)
            if value is not None:
                return next_order_number(now, value - 1, prefix)

            start, end = day_bounds(now)
            count_today = (
                await self.session.execute(
                    select(func.count(OrderModel.id)).where(
                        OrderModel.created_at >= start, OrderModel.created_at < end
                    )
                )
            ).scalar_one()
            try:
                async with self.session.begin_nested():
                    await self.session.execute(
                        insert(OrderSequenceModel).values(day=day_key, value=count_today + 1)
                    )
                return next_order_number(now, count_today, prefix)
            except IntegrityError:
                logger.info(f"Order counter for {day_key} seeded concurrently, retrying increment")

        raise ConcurrencyException("OrderSequence", day_key, "Could not allocate an order number")

    async def add(self, order: Order) -> Order:
        """Insert a new order."""
        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    insert(OrderModel).values(
                        id=order.id,
                        user_id=order.user_id,
                        order_number=order.order_number,
                        created_at=order.created_at,
                        version=order.version,
                        **self._mutable_values(order),
                    )
                )
        except IntegrityError as e:
            if is_unique_violation(e):
                raise DuplicateEntityException("Order", "order_number", order.order_number) from e
            raise
        logger.info(f"Order created: {order.order_number} for user {order.user_id}")
        return order

    async def update(self, order: Order) -> Order:
        """Persist a transitioned order if nobody changed it since it was read."""
        result = await self.session.execute(
            update(OrderModel)
            .where(OrderModel.id == order.id, OrderModel.version == order.version)
            .values(version=order.version + 1, **self._mutable_values(order))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConcurrencyException("Order", order.id)
        order.version += 1
        return order

    async def _increment_counter(self, day_key: str) -> int | None:
        result = await self.session.execute(
            update(OrderSequenceModel)
            .where(OrderSequenceModel.day == day_key)
            .values(value=OrderSequenceModel.value + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return None
        value = await self.session.execute(
            select(OrderSequenceModel.value).where(OrderSequenceModel.day == day_key)
        )
        return value.scalar_one()

    async def _page(self, conditions: list, limit: int, offset: int) -> tuple[list[Order], int]:
        total = (
            await self.session.execute(select(func.count(OrderModel.id)).where(*conditions))
        ).scalar_one()
        result = await self.session.execute(
            select(OrderModel)
            .where(*conditions)
            .order_by(OrderModel.created_at.desc(), OrderModel.order_number.desc())
            .limit(limit)
            .offset(offset)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(m) for m in result.scalars().all()], total

    # Mapping methods

    def _mutable_values(self, order: Order) -> dict[str, Any]:
        return {
            "customer_email": order.customer_email,
            "items": [item.to_dict() for item in order.items],
            "shipping_address": order.shipping_address.to_dict() if order.shipping_address else None,
            "payment_method": order.payment_method,
            "payment_status": order.payment_status,
            "status": order.status,
            "subtotal": order.subtotal,
            "shipping_cost": order.shipping_cost,
            "discount": order.discount,
            "total": order.total,
            "applied_coupon": order.applied_coupon.to_dict() if order.applied_coupon else None,
            "payment_details": order.payment_details.to_dict(),
            "shipping_details": order.shipping_details.to_dict(),
            "notes": order.notes,
            "cancel_request": order.cancel_request.to_dict() if order.cancel_request else None,
            "return_request": order.return_request.to_dict() if order.return_request else None,
            "updated_at": order.updated_at,
        }

    def _to_entity(self, model: OrderModel) -> Order:
        """Convert model to entity."""
        return Order(
            id=model.id,
            user_id=model.user_id,
            customer_email=model.customer_email,
            order_number=model.order_number,
            items=[OrderItem.from_dict(item) for item in model.items or []],
            shipping_address=ShippingAddress(**model.shipping_address) if model.shipping_address else None,
            payment_method=model.payment_method,
            payment_status=model.payment_status,
            status=model.status,
            subtotal=Decimal(model.subtotal),
            shipping_cost=Decimal(model.shipping_cost),
            discount=Decimal(model.discount),
            total=Decimal(model.total),
            applied_coupon=AppliedCoupon.from_dict(model.applied_coupon) if model.applied_coupon else None,
            payment_details=PaymentDetails.from_dict(model.payment_details or {}),
            shipping_details=ShippingDetails.from_dict(model.shipping_details or {}),
            notes=model.notes,
            cancel_request=CancelRequest.from_dict(model.cancel_request) if model.cancel_request else None,
            return_request=ReturnRequest.from_dict(model.return_request) if model.return_request else None,
            version=model.version,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )
