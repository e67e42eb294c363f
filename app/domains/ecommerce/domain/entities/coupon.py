"""
Coupon Entity

Discount code with validity window, usage limit and targeting rules.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from app.core.domain import AggregateRoot, ValidationException, to_money, utc_now

from ..value_objects.coupon_terms import DiscountType

UNLIMITED = -1
MAX_CODE_LENGTH = 20
MAX_DESCRIPTION_LENGTH = 200


def normalize_code(code: str) -> str:
    """Coupon codes are stored and matched uppercase."""
    return code.strip().upper()


@dataclass
class Coupon(AggregateRoot[str]):
    """
    Coupon aggregate.

    ``max_discount`` and ``usage_limit`` use ``-1`` for "no cap" and
    "unlimited". ``used_count`` only grows through an atomic conditional
    increment in the repository once an order is committed.
    """

    code: str = ""
    description: str = ""
    discount: Decimal = Decimal("0")
    type: DiscountType = DiscountType.PERCENTAGE
    categories: list[str] = field(default_factory=list)
    min_order_amount: Decimal = Decimal("0")
    max_discount: Decimal = Decimal(UNLIMITED)
    usage_limit: int = UNLIMITED
    used_count: int = 0
    valid_from: datetime = field(default_factory=utc_now)
    valid_until: datetime = field(default_factory=utc_now)
    is_active: bool = True
    is_first_time_only: bool = False
    applicable_users: list[str] = field(default_factory=list)
    excluded_users: list[str] = field(default_factory=list)
    created_by: str | None = None

    def __post_init__(self):
        self.code = normalize_code(self.code)
        self.discount = to_money(self.discount)
        self.min_order_amount = to_money(self.min_order_amount)
        self.max_discount = to_money(self.max_discount)
        self.validate()

    def validate(self) -> None:
        """Check field-level invariants."""
        if not self.code:
            raise ValidationException("Coupon code is required", field="code")
        if len(self.code) > MAX_CODE_LENGTH:
            raise ValidationException("Coupon code cannot exceed 20 characters", field="code")
        if len(self.description) > MAX_DESCRIPTION_LENGTH:
            raise ValidationException("Description cannot exceed 200 characters", field="description")
        if self.discount < 0:
            raise ValidationException("Discount cannot be negative", field="discount")
        if self.type == DiscountType.PERCENTAGE and self.discount > 100:
            raise ValidationException("Percentage discount cannot exceed 100", field="discount")
        if self.min_order_amount < 0:
            raise ValidationException("Minimum order amount cannot be negative", field="min_order_amount")
        if self.max_discount < 0 and self.max_discount != UNLIMITED:
            raise ValidationException("Maximum discount must be -1 or non-negative", field="max_discount")
        if self.usage_limit < UNLIMITED:
            raise ValidationException("Usage limit must be -1 or non-negative", field="usage_limit")
        if self.valid_until < self.valid_from:
            raise ValidationException("Valid until must be after valid from", field="valid_until")

    @property
    def is_uncapped(self) -> bool:
        return self.max_discount == UNLIMITED

    @property
    def is_unlimited(self) -> bool:
        return self.usage_limit == UNLIMITED

    @property
    def remaining_usage(self) -> int | None:
        """Redemptions left, or None when unlimited."""
        if self.is_unlimited:
            return None
        return max(0, self.usage_limit - self.used_count)

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utc_now()) > self.valid_until

    def deactivate(self) -> None:
        self.is_active = False
        self.touch()
