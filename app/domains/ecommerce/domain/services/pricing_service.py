"""
Pricing Service for E-commerce Domain

Derives an order's subtotal, shipping cost, discount and total from its
line item snapshots, the shipping configuration in force and an optional
applied coupon snapshot.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from app.core.domain import to_money

from ..entities.order import AppliedCoupon, OrderItem
from ..value_objects.shipping import ShippingConfig
from .coupon_evaluator import CouponEvaluator


@dataclass(frozen=True)
class OrderTotals:
    """Result of a total calculation."""

    subtotal: Decimal
    shipping_cost: Decimal
    discount: Decimal
    total: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "subtotal": float(self.subtotal),
            "shipping_cost": float(self.shipping_cost),
            "discount": float(self.discount),
            "total": float(self.total),
        }


class PricingService:
    """
    Domain service for order totals.

    The calculation only reads its arguments, so recomputing from the
    same items, shipping configuration and coupon snapshot always gives
    the same totals.

    Example:
        ```python
        service = PricingService()
        totals = service.calculate_totals(
            items,
            ShippingConfig(flat_fee=Decimal("49"), free_shipping_threshold=Decimal("500")),
            applied_coupon,
        )
        ```
    """

    def __init__(self, coupon_evaluator: CouponEvaluator | None = None):
        self.coupon_evaluator = coupon_evaluator or CouponEvaluator()

    def calculate_subtotal(self, items: Sequence[OrderItem]) -> Decimal:
        """Sum of price times quantity over the snapshotted prices."""
        return to_money(sum((item.price * item.quantity for item in items), Decimal("0")))

    def calculate_totals(
        self,
        items: Sequence[OrderItem],
        shipping_config: ShippingConfig,
        applied_coupon: AppliedCoupon | None = None,
    ) -> OrderTotals:
        """
        Calculate order totals.

        Args:
            items: Line item snapshots
            shipping_config: Shipping fee rule loaded for this calculation
            applied_coupon: Coupon terms captured at checkout, if any

        Returns:
            OrderTotals where total = subtotal + shipping_cost - discount
        """
        subtotal = self.calculate_subtotal(items)
        shipping_cost = shipping_config.fee_for(subtotal)

        discount = to_money(0)
        if applied_coupon is not None:
            discount = self.coupon_evaluator.compute_discount(applied_coupon, subtotal, items)
        discount = min(discount, subtotal)

        return OrderTotals(
            subtotal=subtotal,
            shipping_cost=shipping_cost,
            discount=discount,
            total=to_money(subtotal + shipping_cost - discount),
        )
