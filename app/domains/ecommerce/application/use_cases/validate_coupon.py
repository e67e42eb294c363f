"""
Validate Coupon Use Case

Checks a coupon code against an order context and prices its discount.
Does not redeem the coupon.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from app.core.domain import ValidationException, to_money, utc_now
from app.domains.ecommerce.application.ports import ICouponRepository, IOrderRepository
from app.domains.ecommerce.domain.entities import Coupon
from app.domains.ecommerce.domain.services import CouponEvaluator
from app.domains.ecommerce.domain.services.coupon_evaluator import DiscountableLine
from app.domains.ecommerce.domain.value_objects import CouponEligibility

logger = logging.getLogger(__name__)


@dataclass
class ValidateCouponRequest:
    """Coupon code plus the order it would apply to."""

    code: str
    order_amount: Decimal
    user_id: str | None = None
    items: Sequence[DiscountableLine] = field(default_factory=list)


@dataclass
class ValidateCouponResponse:
    """Eligibility outcome and, when eligible, the discount it would give."""

    eligibility: CouponEligibility
    discount: Decimal = Decimal("0.00")
    coupon: Coupon | None = None

    @property
    def valid(self) -> bool:
        return self.eligibility is CouponEligibility.ELIGIBLE

    @property
    def message(self) -> str:
        return self.eligibility.message


class ValidateCouponUseCase:
    """
    Use Case: Validate Coupon

    Ineligible coupons are reported through the response, not raised.
    """

    def __init__(
        self,
        coupon_repository: ICouponRepository,
        order_repository: IOrderRepository,
        coupon_evaluator: CouponEvaluator | None = None,
    ):
        self.coupon_repository = coupon_repository
        self.order_repository = order_repository
        self.coupon_evaluator = coupon_evaluator or CouponEvaluator()

    async def execute(self, request: ValidateCouponRequest, now: datetime | None = None) -> ValidateCouponResponse:
        if not request.code or not request.code.strip():
            raise ValidationException("Coupon code is required", field="code")
        if request.order_amount < 0:
            raise ValidationException("Order amount cannot be negative", field="order_amount")

        order_amount = to_money(request.order_amount)
        coupon = await self.coupon_repository.get_by_code(request.code)

        is_first_time = False
        if request.user_id:
            is_first_time = await self.order_repository.count_for_user(request.user_id) == 0

        outcome = self.coupon_evaluator.check_eligibility(
            coupon, order_amount, request.user_id, is_first_time, now or utc_now()
        )
        if outcome is not CouponEligibility.ELIGIBLE:
            logger.info(f"Coupon {request.code} not applicable: {outcome.value}")
            return ValidateCouponResponse(eligibility=outcome, coupon=coupon)

        discount = self.coupon_evaluator.compute_discount(coupon, order_amount, list(request.items) or None)
        return ValidateCouponResponse(eligibility=outcome, discount=discount, coupon=coupon)


__all__ = ["ValidateCouponUseCase", "ValidateCouponRequest", "ValidateCouponResponse"]
