"""
Admin Analytics Use Cases

Dashboard summary, sales over a reporting window and best sellers.
Revenue counts delivered orders only; units sold count every order that
was not cancelled.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from app.core.domain import utc_now
from app.domains.ecommerce.application.ports import (
    IAnalyticsRepository,
    IOrderRepository,
    PaymentStatusTotals,
    StockLevel,
)
from app.domains.ecommerce.domain.entities import Order
from app.domains.ecommerce.domain.services import DailySales, ProductSales, SalesReportService
from app.domains.ecommerce.domain.value_objects import ReportPeriod, month_start

logger = logging.getLogger(__name__)

LOW_STOCK_THRESHOLD = 10
STOCK_ALERT_LIMIT = 20
RECENT_ORDER_COUNT = 5
DASHBOARD_TOP_PRODUCTS = 5


@dataclass
class DashboardStats:
    """Store-wide counters; ``monthly_*`` cover the current calendar month."""

    total_products: int
    total_orders: int
    total_customers: int
    total_revenue: Decimal
    monthly_orders: int
    monthly_revenue: Decimal


@dataclass
class Dashboard:
    stats: DashboardStats
    recent_orders: list[Order] = field(default_factory=list)
    top_products: list[ProductSales] = field(default_factory=list)
    low_stock: list[StockLevel] = field(default_factory=list)
    out_of_stock: list[StockLevel] = field(default_factory=list)


@dataclass
class SalesAnalytics:
    """Delivered sales per day and the payment status mix for a window."""

    period: ReportPeriod
    start: datetime
    end: datetime
    daily_sales: list[DailySales] = field(default_factory=list)
    payment_status: list[PaymentStatusTotals] = field(default_factory=list)


class GetDashboardUseCase:
    """
    Use Case: Admin Dashboard

    Gathers the counters, the latest orders, the best sellers and the
    stock alerts shown on the admin landing page.
    """

    def __init__(
        self,
        analytics_repository: IAnalyticsRepository,
        order_repository: IOrderRepository,
        report: SalesReportService | None = None,
    ):
        self.analytics_repository = analytics_repository
        self.order_repository = order_repository
        self.report = report or SalesReportService()

    async def execute(self, now: datetime | None = None) -> Dashboard:
        now = now or utc_now()
        since = month_start(now)
        repo = self.analytics_repository

        stats = DashboardStats(
            total_products=await repo.count_products(),
            total_orders=await repo.count_orders(),
            total_customers=await repo.count_customers(),
            total_revenue=await repo.delivered_revenue(),
            monthly_orders=await repo.count_orders(since=since),
            monthly_revenue=await repo.delivered_revenue(since=since),
        )
        recent_orders, _ = await self.order_repository.list_all(limit=RECENT_ORDER_COUNT)
        top_products = self.report.best_sellers(await repo.sold_items(), limit=DASHBOARD_TOP_PRODUCTS)

        return Dashboard(
            stats=stats,
            recent_orders=recent_orders,
            top_products=top_products,
            low_stock=await repo.low_stock(LOW_STOCK_THRESHOLD, STOCK_ALERT_LIMIT),
            out_of_stock=await repo.out_of_stock(STOCK_ALERT_LIMIT),
        )


class GetSalesAnalyticsUseCase:
    """Use Case: Sales Analytics for a reporting window"""

    def __init__(self, analytics_repository: IAnalyticsRepository, report: SalesReportService | None = None):
        self.analytics_repository = analytics_repository
        self.report = report or SalesReportService()

    async def execute(self, period: ReportPeriod = ReportPeriod.MONTH, now: datetime | None = None) -> SalesAnalytics:
        now = now or utc_now()
        start = period.start(now)
        delivered = await self.analytics_repository.delivered_order_totals(since=start)
        result = SalesAnalytics(
            period=period,
            start=start,
            end=now,
            daily_sales=self.report.daily_sales(delivered),
            payment_status=await self.analytics_repository.payment_status_totals(since=start),
        )
        logger.debug(f"Sales analytics for {period.value}: {len(result.daily_sales)} days with sales")
        return result


class GetProductAnalyticsUseCase:
    """Use Case: Best-selling products by units sold"""

    def __init__(self, analytics_repository: IAnalyticsRepository, report: SalesReportService | None = None):
        self.analytics_repository = analytics_repository
        self.report = report or SalesReportService()

    async def execute(
        self, limit: int = 10, period: ReportPeriod | None = None, now: datetime | None = None
    ) -> list[ProductSales]:
        since = period.start(now or utc_now()) if period is not None else None
        return self.report.best_sellers(await self.analytics_repository.sold_items(since=since), limit=limit)


__all__ = [
    "DashboardStats",
    "Dashboard",
    "SalesAnalytics",
    "GetDashboardUseCase",
    "GetSalesAnalyticsUseCase",
    "GetProductAnalyticsUseCase",
]
