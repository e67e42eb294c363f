"""
Coupon Value Objects for E-commerce Domain

Discount kinds and the named outcomes of a coupon eligibility check.
"""

from app.core.domain import StatusEnum


class DiscountType(StatusEnum):
    """How a coupon's discount magnitude is interpreted."""

    PERCENTAGE = "percentage"
    FIXED = "fixed"


class CouponEligibility(StatusEnum):
    """
    Outcome of checking a coupon against an order context.

    Ineligibility is an expected outcome, not an error, so callers
    receive one of these values and phrase their own message.
    """

    ELIGIBLE = "eligible"
    NOT_FOUND = "not_found"
    INACTIVE = "inactive"
    NOT_STARTED = "not_started"
    EXPIRED = "expired"
    USAGE_LIMIT_REACHED = "usage_limit_reached"
    BELOW_MINIMUM = "below_minimum"
    FIRST_TIME_ONLY = "first_time_only"
    USER_EXCLUDED = "user_excluded"
    USER_NOT_ALLOWED = "user_not_allowed"

    @property
    def message(self) -> str:
        """Default customer-facing message for this outcome."""
        return _MESSAGES[self]


_MESSAGES = {
    CouponEligibility.ELIGIBLE: "Coupon applied successfully",
    CouponEligibility.NOT_FOUND: "Invalid coupon code",
    CouponEligibility.INACTIVE: "Coupon is no longer active",
    CouponEligibility.NOT_STARTED: "Coupon is not valid yet",
    CouponEligibility.EXPIRED: "Coupon has expired",
    CouponEligibility.USAGE_LIMIT_REACHED: "Coupon usage limit has been reached",
    CouponEligibility.BELOW_MINIMUM: "Order amount is below the coupon minimum",
    CouponEligibility.FIRST_TIME_ONLY: "Coupon is only valid on a first order",
    CouponEligibility.USER_EXCLUDED: "Coupon is not available for this account",
    CouponEligibility.USER_NOT_ALLOWED: "Coupon is not available for this account",
}
