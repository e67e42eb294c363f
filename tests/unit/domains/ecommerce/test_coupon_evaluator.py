"""
Unit tests for the coupon evaluator: eligibility rules and discount pricing.
"""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from app.domains.ecommerce.domain.entities import OrderItem
from app.domains.ecommerce.domain.services import CouponEvaluator
from app.domains.ecommerce.domain.value_objects import CouponEligibility, DiscountType
from tests.conftest import NOW, make_coupon


@pytest.fixture
def evaluator() -> CouponEvaluator:
    return CouponEvaluator()


class TestCheckEligibility:
    """Rules are checked in a fixed order and the first failure is reported."""

    def test_unknown_code(self, evaluator):
        assert evaluator.check_eligibility(None, Decimal("100"), now=NOW) is CouponEligibility.NOT_FOUND

    def test_eligible(self, evaluator):
        coupon = make_coupon()
        assert evaluator.check_eligibility(coupon, Decimal("100"), "u-1", now=NOW) is CouponEligibility.ELIGIBLE

    def test_inactive(self, evaluator):
        coupon = make_coupon(is_active=False)
        assert evaluator.check_eligibility(coupon, Decimal("100"), now=NOW) is CouponEligibility.INACTIVE

    def test_not_started(self, evaluator):
        coupon = make_coupon(valid_from=datetime(2025, 5, 1, tzinfo=UTC))
        assert evaluator.check_eligibility(coupon, Decimal("100"), now=NOW) is CouponEligibility.NOT_STARTED

    def test_expired(self, evaluator):
        coupon = make_coupon(valid_until=datetime(2025, 4, 1, tzinfo=UTC))
        assert evaluator.check_eligibility(coupon, Decimal("100"), now=NOW) is CouponEligibility.EXPIRED

    def test_window_bounds_are_inclusive(self, evaluator):
        coupon = make_coupon(valid_from=NOW, valid_until=NOW)
        assert evaluator.check_eligibility(coupon, Decimal("100"), now=NOW) is CouponEligibility.ELIGIBLE

    def test_usage_limit_reached(self, evaluator):
        coupon = make_coupon(usage_limit=5, used_count=5)
        result = evaluator.check_eligibility(coupon, Decimal("100"), now=NOW)
        assert result is CouponEligibility.USAGE_LIMIT_REACHED

    def test_unlimited_usage(self, evaluator):
        coupon = make_coupon(usage_limit=-1, used_count=10_000)
        assert evaluator.check_eligibility(coupon, Decimal("100"), now=NOW) is CouponEligibility.ELIGIBLE

    def test_below_minimum(self, evaluator):
        coupon = make_coupon(min_order_amount=Decimal("500"))
        result = evaluator.check_eligibility(coupon, Decimal("499.99"), now=NOW)
        assert result is CouponEligibility.BELOW_MINIMUM

    def test_minimum_is_inclusive(self, evaluator):
        coupon = make_coupon(min_order_amount=Decimal("500"))
        assert evaluator.check_eligibility(coupon, Decimal("500"), now=NOW) is CouponEligibility.ELIGIBLE

    def test_first_time_only(self, evaluator):
        coupon = make_coupon(is_first_time_only=True)
        assert (
            evaluator.check_eligibility(coupon, Decimal("100"), "u-1", is_first_time_customer=False, now=NOW)
            is CouponEligibility.FIRST_TIME_ONLY
        )
        assert (
            evaluator.check_eligibility(coupon, Decimal("100"), "u-1", is_first_time_customer=True, now=NOW)
            is CouponEligibility.ELIGIBLE
        )

    def test_excluded_user(self, evaluator):
        coupon = make_coupon(excluded_users=["u-1"])
        result = evaluator.check_eligibility(coupon, Decimal("100"), "u-1", now=NOW)
        assert result is CouponEligibility.USER_EXCLUDED

    def test_allow_list(self, evaluator):
        coupon = make_coupon(applicable_users=["u-2"])
        assert evaluator.check_eligibility(coupon, Decimal("100"), "u-1", now=NOW) is CouponEligibility.USER_NOT_ALLOWED
        assert evaluator.check_eligibility(coupon, Decimal("100"), "u-2", now=NOW) is CouponEligibility.ELIGIBLE

    def test_allow_list_requires_a_user(self, evaluator):
        coupon = make_coupon(applicable_users=["u-2"])
        assert evaluator.check_eligibility(coupon, Decimal("100"), None, now=NOW) is CouponEligibility.USER_NOT_ALLOWED

    def test_inactive_is_reported_before_expiry(self, evaluator):
        coupon = make_coupon(is_active=False, valid_until=datetime(2025, 1, 2, tzinfo=UTC))
        assert evaluator.check_eligibility(coupon, Decimal("100"), now=NOW) is CouponEligibility.INACTIVE

    def test_can_apply_matches_eligibility(self, evaluator):
        assert evaluator.can_apply(make_coupon(), Decimal("100"), now=NOW) is True
        assert evaluator.can_apply(make_coupon(is_active=False), Decimal("100"), now=NOW) is False

    def test_outcomes_carry_messages(self):
        assert CouponEligibility.NOT_FOUND.message == "Invalid coupon code"
        assert all(outcome.message for outcome in CouponEligibility)


class TestComputeDiscount:
    def test_percentage(self, evaluator):
        assert evaluator.compute_discount(make_coupon(discount=Decimal("10")), Decimal("1000")) == Decimal("100.00")

    def test_percentage_rounds_half_up(self, evaluator):
        coupon = make_coupon(discount=Decimal("15"))
        assert evaluator.compute_discount(coupon, Decimal("33.30")) == Decimal("5.00")

    def test_percentage_capped(self, evaluator):
        coupon = make_coupon(discount=Decimal("50"), max_discount=Decimal("200"))
        assert evaluator.compute_discount(coupon, Decimal("1000")) == Decimal("200.00")

    def test_zero_cap_is_a_real_cap(self, evaluator):
        coupon = make_coupon(discount=Decimal("50"), max_discount=Decimal("0"))
        assert evaluator.compute_discount(coupon, Decimal("1000")) == Decimal("0.00")

    def test_fixed(self, evaluator):
        coupon = make_coupon(type=DiscountType.FIXED, discount=Decimal("150"))
        assert evaluator.compute_discount(coupon, Decimal("1000")) == Decimal("150.00")

    def test_fixed_never_exceeds_order(self, evaluator):
        coupon = make_coupon(type=DiscountType.FIXED, discount=Decimal("150"))
        assert evaluator.compute_discount(coupon, Decimal("99")) == Decimal("99.00")

    def test_category_restricted_uses_matching_lines(self, evaluator):
        coupon = make_coupon(discount=Decimal("20"), categories=["snacks"])
        items = [
            OrderItem(product_id="a", name="A", size="s", price=Decimal("100"), quantity=2, category="snacks"),
            OrderItem(product_id="b", name="B", size="s", price=Decimal("300"), quantity=1, category="drinks"),
        ]
        assert evaluator.discountable_base(coupon, Decimal("500"), items) == Decimal("200.00")
        assert evaluator.compute_discount(coupon, Decimal("500"), items) == Decimal("40.00")

    def test_category_restricted_without_matching_lines(self, evaluator):
        coupon = make_coupon(type=DiscountType.FIXED, discount=Decimal("50"), categories=["snacks"])
        items = [OrderItem(product_id="b", name="B", size="s", price=Decimal("300"), quantity=1, category="drinks")]
        assert evaluator.compute_discount(coupon, Decimal("300"), items) == Decimal("0.00")

    def test_category_restriction_ignored_without_items(self, evaluator):
        coupon = make_coupon(discount=Decimal("10"), categories=["snacks"])
        assert evaluator.compute_discount(coupon, Decimal("300")) == Decimal("30.00")

    def test_evaluation_does_not_mutate_coupon(self, evaluator):
        coupon = make_coupon(usage_limit=3, used_count=1)
        evaluator.check_eligibility(coupon, Decimal("100"), now=NOW)
        evaluator.compute_discount(coupon, Decimal("100"))
        assert coupon.used_count == 1
