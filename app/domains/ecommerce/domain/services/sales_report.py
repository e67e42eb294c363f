"""
Sales Report Service

Aggregates order snapshots into best-seller rankings and daily sales
series for the admin dashboard. Works on already loaded data; the
repositories decide which orders are counted.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal

from app.core.domain import to_money

from ..entities.order import OrderItem


@dataclass(frozen=True)
class ProductSales:
    """Units and revenue sold for one product."""

    product_id: str
    name: str
    quantity_sold: int
    revenue: Decimal


@dataclass(frozen=True)
class DailySales:
    """Revenue and order count for one UTC calendar day."""

    day: date
    total_sales: Decimal
    order_count: int


class SalesReportService:
    """
    Domain service for sales aggregations.

    Example:
        ```python
        report = SalesReportService()
        top = report.best_sellers(items, limit=5)
        series = report.daily_sales([(order.created_at, order.total) for order in delivered])
        ```
    """

    def best_sellers(self, items: Iterable[OrderItem], limit: int = 5) -> list[ProductSales]:
        """
        Rank products by units sold, then by revenue.

        The name shown is the one captured by the first line seen for the
        product.
        """
        names: dict[str, str] = {}
        quantities: dict[str, int] = {}
        revenues: dict[str, Decimal] = {}
        for item in items:
            names.setdefault(item.product_id, item.name)
            quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity
            revenues[item.product_id] = revenues.get(item.product_id, Decimal("0")) + item.line_total

        ranked = sorted(quantities, key=lambda pid: (-quantities[pid], -revenues[pid], pid))
        return [
            ProductSales(
                product_id=pid,
                name=names[pid],
                quantity_sold=quantities[pid],
                revenue=to_money(revenues[pid]),
            )
            for pid in ranked[:limit]
        ]

    def daily_sales(self, orders: Iterable[tuple[datetime, Decimal]]) -> list[DailySales]:
        """Group ``(created_at, total)`` pairs by UTC day, oldest day first."""
        totals: dict[date, Decimal] = {}
        counts: dict[date, int] = {}
        for created_at, total in orders:
            day = created_at.astimezone(UTC).date()
            totals[day] = totals.get(day, Decimal("0")) + total
            counts[day] = counts.get(day, 0) + 1
        return [
            DailySales(day=day, total_sales=to_money(totals[day]), order_count=counts[day]) for day in sorted(totals)
        ]
