"""
Coupon models
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from app.domains.ecommerce.domain.value_objects import DiscountType

from .base import Base, JSONType, TimestampMixin
from .orders import value_enum


class CouponModel(Base, TimestampMixin):
    """Discount code"""

    __tablename__ = "coupons"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    code: Mapped[str] = mapped_column(String(20), nullable=False, unique=True, index=True)
    description: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    discount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    type: Mapped[DiscountType] = mapped_column(value_enum(DiscountType), nullable=False)
    categories: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    min_order_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    max_discount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=-1)
    usage_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=-1)
    used_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    valid_from: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    valid_until: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    is_first_time_only: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    applicable_users: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    excluded_users: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    created_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("discount >= 0", name="ck_coupons_discount_non_negative"),
        CheckConstraint("usage_limit = -1 OR used_count <= usage_limit", name="ck_coupons_usage_limit"),
    )

    def __repr__(self):
        return f"<Coupon(code={self.code}, used={self.used_count}/{self.usage_limit})>"
