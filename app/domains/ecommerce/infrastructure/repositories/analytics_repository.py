"""
Analytics Repository Implementation

SQLAlchemy implementation of IAnalyticsRepository. Counts and sums run in
SQL; line items live in each order's JSON document and are returned as
entities for aggregation in the domain layer.
"""

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Select, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import to_money
from app.domains.ecommerce.application.ports import IAnalyticsRepository, PaymentStatusTotals, StockLevel
from app.domains.ecommerce.domain.entities import OrderItem
from app.domains.ecommerce.domain.value_objects import OrderStatus
from app.models.db import OrderModel, ProductModel, ProductSizeModel

from ._helpers import ensure_utc

logger = logging.getLogger(__name__)


class SQLAlchemyAnalyticsRepository(IAnalyticsRepository):
    """SQLAlchemy implementation of the dashboard read model."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def count_products(self) -> int:
        return (await self.session.execute(select(func.count(ProductModel.id)))).scalar_one()

    async def count_customers(self) -> int:
        return (await self.session.execute(select(func.count(distinct(OrderModel.user_id))))).scalar_one()

    async def count_orders(self, since: datetime | None = None) -> int:
        stmt = select(func.count(OrderModel.id))
        if since is not None:
            stmt = stmt.where(OrderModel.created_at >= since)
        return (await self.session.execute(stmt)).scalar_one()

    async def delivered_revenue(self, since: datetime | None = None) -> Decimal:
        stmt = select(func.coalesce(func.sum(OrderModel.total), 0)).where(OrderModel.status == OrderStatus.DELIVERED)
        if since is not None:
            stmt = stmt.where(OrderModel.created_at >= since)
        return to_money((await self.session.execute(stmt)).scalar_one())

    async def delivered_order_totals(self, since: datetime) -> list[tuple[datetime, Decimal]]:
        result = await self.session.execute(
            select(OrderModel.created_at, OrderModel.total)
            .where(OrderModel.status == OrderStatus.DELIVERED, OrderModel.created_at >= since)
            .order_by(OrderModel.created_at)
        )
        return [(ensure_utc(created_at), to_money(total)) for created_at, total in result.all()]

    async def sold_items(self, since: datetime | None = None) -> list[OrderItem]:
        stmt = select(OrderModel.items).where(OrderModel.status != OrderStatus.CANCELLED)
        if since is not None:
            stmt = stmt.where(OrderModel.created_at >= since)
        result = await self.session.execute(stmt)
        return [OrderItem.from_dict(item) for items in result.scalars().all() for item in items or []]

    async def payment_status_totals(self, since: datetime) -> list[PaymentStatusTotals]:
        result = await self.session.execute(
            select(
                OrderModel.payment_status,
                func.count(OrderModel.id),
                func.coalesce(func.sum(OrderModel.total), 0),
            )
            .where(OrderModel.created_at >= since)
            .group_by(OrderModel.payment_status)
            .order_by(OrderModel.payment_status)
        )
        return [
            PaymentStatusTotals(status=status, count=count, total=to_money(total))
            for status, count, total in result.all()
        ]

    async def low_stock(self, threshold: int, limit: int) -> list[StockLevel]:
        total = func.sum(ProductSizeModel.stock)
        return await self._stock_levels(self._stock_query().having(total > 0, total < threshold), limit)

    async def out_of_stock(self, limit: int) -> list[StockLevel]:
        return await self._stock_levels(self._stock_query().having(func.sum(ProductSizeModel.stock) == 0), limit)

    def _stock_query(self) -> Select:
        return (
            select(
                ProductModel.id,
                ProductModel.name,
                ProductModel.category,
                func.sum(ProductSizeModel.stock).label("total_stock"),
            )
            .join(ProductSizeModel, ProductSizeModel.product_id == ProductModel.id)
            .where(ProductModel.is_active.is_(True))
            .group_by(ProductModel.id, ProductModel.name, ProductModel.category)
        )

    async def _stock_levels(self, stmt: Select, limit: int) -> list[StockLevel]:
        result = await self.session.execute(stmt.order_by("total_stock", ProductModel.name).limit(limit))
        return [
            StockLevel(product_id=pid, name=name, category=category, total_stock=int(total))
            for pid, name, category, total in result.all()
        ]
