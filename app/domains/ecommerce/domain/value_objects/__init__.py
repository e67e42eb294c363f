"""
E-commerce Domain Value Objects

Immutable value objects for the e-commerce domain.
"""

from app.domains.ecommerce.domain.value_objects.coupon_terms import (
    CouponEligibility,
    DiscountType,
)
from app.domains.ecommerce.domain.value_objects.order_status import (
    CancelReason,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    RefundMethod,
    RequestStatus,
    ReturnReason,
)
from app.domains.ecommerce.domain.value_objects.report_period import ReportPeriod, month_start
from app.domains.ecommerce.domain.value_objects.shipping import (
    ShippingAddress,
    ShippingConfig,
)

__all__ = [
    "OrderStatus",
    "PaymentStatus",
    "PaymentMethod",
    "RequestStatus",
    "CancelReason",
    "ReturnReason",
    "RefundMethod",
    "DiscountType",
    "CouponEligibility",
    "ShippingConfig",
    "ShippingAddress",
    "ReportPeriod",
    "month_start",
]
