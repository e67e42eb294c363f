"""
E-commerce Domain Services

Domain services that encapsulate business logic
that doesn't belong to a single entity.
"""

from app.domains.ecommerce.domain.services.coupon_evaluator import CouponEvaluator
from app.domains.ecommerce.domain.services.order_lifecycle import OrderLifecycle, TransitionResult
from app.domains.ecommerce.domain.services.order_numbering import (
    day_bounds,
    is_valid_order_number,
    next_order_number,
)
from app.domains.ecommerce.domain.services.pricing_service import OrderTotals, PricingService
from app.domains.ecommerce.domain.services.sales_report import DailySales, ProductSales, SalesReportService
from app.domains.ecommerce.domain.services.stock_ledger import StockLedger

__all__ = [
    "CouponEvaluator",
    "PricingService",
    "OrderTotals",
    "StockLedger",
    "OrderLifecycle",
    "TransitionResult",
    "next_order_number",
    "day_bounds",
    "is_valid_order_number",
    "SalesReportService",
    "ProductSales",
    "DailySales",
]
