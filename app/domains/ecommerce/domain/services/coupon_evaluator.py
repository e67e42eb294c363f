"""
Coupon Evaluator

Decides whether a coupon applies to an order context and prices its
discount. Evaluation never changes the coupon; redemption counting is a
separate step performed by the repository after the order is committed.
"""

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from typing import Protocol

from app.core.domain import to_money, utc_now

from ..entities.coupon import UNLIMITED, Coupon
from ..value_objects.coupon_terms import CouponEligibility, DiscountType


class DiscountTerms(Protocol):
    """Anything carrying the fields the discount rule reads."""

    discount: Decimal
    type: DiscountType
    max_discount: Decimal
    categories: Sequence[str]


class DiscountableLine(Protocol):
    """A priced line with a category, such as an order item or cart item."""

    price: Decimal
    quantity: int
    category: str


class CouponEvaluator:
    """
    Domain service for coupon eligibility and discount pricing.

    Example:
        ```python
        evaluator = CouponEvaluator()
        outcome = evaluator.check_eligibility(coupon, Decimal("1000"), user_id="u1")
        if outcome is CouponEligibility.ELIGIBLE:
            amount = evaluator.compute_discount(coupon, Decimal("1000"), items)
        ```
    """

    def is_redeemable(self, coupon: Coupon, now: datetime | None = None) -> bool:
        """Active, inside its validity window and below its usage limit."""
        return self._redeemability(coupon, now or utc_now()) is CouponEligibility.ELIGIBLE

    def check_eligibility(
        self,
        coupon: Coupon | None,
        order_amount: Decimal,
        user_id: str | None = None,
        is_first_time_customer: bool = False,
        now: datetime | None = None,
    ) -> CouponEligibility:
        """
        Check a coupon against an order context.

        Args:
            coupon: Coupon looked up by code, or None when the code is unknown
            order_amount: Order subtotal the coupon would apply to
            user_id: Customer placing the order
            is_first_time_customer: True when the customer has no prior orders
            now: Evaluation time (defaults to current UTC time)

        Returns:
            ``CouponEligibility.ELIGIBLE`` or the first rule that failed
        """
        if coupon is None:
            return CouponEligibility.NOT_FOUND

        outcome = self._redeemability(coupon, now or utc_now())
        if outcome is not CouponEligibility.ELIGIBLE:
            return outcome
        if order_amount < coupon.min_order_amount:
            return CouponEligibility.BELOW_MINIMUM
        if coupon.is_first_time_only and not is_first_time_customer:
            return CouponEligibility.FIRST_TIME_ONLY
        if user_id is not None and user_id in coupon.excluded_users:
            return CouponEligibility.USER_EXCLUDED
        if coupon.applicable_users and user_id not in coupon.applicable_users:
            return CouponEligibility.USER_NOT_ALLOWED
        return CouponEligibility.ELIGIBLE

    def can_apply(
        self,
        coupon: Coupon,
        order_amount: Decimal,
        user_id: str | None = None,
        is_first_time_customer: bool = False,
        now: datetime | None = None,
    ) -> bool:
        """Boolean form of ``check_eligibility``."""
        outcome = self.check_eligibility(coupon, order_amount, user_id, is_first_time_customer, now)
        return outcome is CouponEligibility.ELIGIBLE

    def discountable_base(
        self,
        terms: DiscountTerms,
        order_amount: Decimal,
        items: Sequence[DiscountableLine] | None = None,
    ) -> Decimal:
        """Order value the discount is computed against."""
        if terms.categories and items:
            allowed = set(terms.categories)
            return to_money(
                sum(
                    (item.price * item.quantity for item in items if item.category in allowed),
                    Decimal("0"),
                )
            )
        return to_money(order_amount)

    def compute_discount(
        self,
        terms: DiscountTerms,
        order_amount: Decimal,
        items: Sequence[DiscountableLine] | None = None,
    ) -> Decimal:
        """
        Price the discount for an order.

        The result never exceeds the cap (when capped) nor the
        discountable base, and is never negative.
        """
        base = self.discountable_base(terms, order_amount, items)

        if terms.type == DiscountType.PERCENTAGE:
            raw = base * terms.discount / Decimal("100")
        else:
            raw = Decimal(terms.discount)

        if terms.max_discount != UNLIMITED:
            raw = min(raw, Decimal(terms.max_discount))

        return to_money(max(Decimal("0"), min(raw, base)))

    @staticmethod
    def _redeemability(coupon: Coupon, now: datetime) -> CouponEligibility:
        if not coupon.is_active:
            return CouponEligibility.INACTIVE
        if now < coupon.valid_from:
            return CouponEligibility.NOT_STARTED
        if now > coupon.valid_until:
            return CouponEligibility.EXPIRED
        if coupon.usage_limit != UNLIMITED and coupon.used_count >= coupon.usage_limit:
            return CouponEligibility.USAGE_LIMIT_REACHED
        return CouponEligibility.ELIGIBLE
