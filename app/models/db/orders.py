"""
Order models: orders and the per-day order number counter
"""

from decimal import Decimal
from typing import Any

from sqlalchemy import CheckConstraint, Enum as SQLEnum, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.domains.ecommerce.domain.value_objects import OrderStatus, PaymentMethod, PaymentStatus

from .base import Base, JSONType, TimestampMixin


def value_enum(enum_cls) -> SQLEnum:
    """Store enum values (not names) as a portable VARCHAR with a CHECK constraint."""
    return SQLEnum(
        enum_cls,
        native_enum=False,
        values_callable=lambda members: [m.value for m in members],
        length=20,
        validate_strings=True,
    )


class OrderModel(Base, TimestampMixin):
    """
    Customer order.

    Line items, address, coupon snapshot, payment and shipping details and
    the cancellation and return requests are embedded JSON documents so an
    order stays a self-contained historical record.
    """

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    customer_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    order_number: Mapped[str] = mapped_column(String(32), nullable=False, unique=True, index=True)

    items: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False)
    shipping_address: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)

    payment_method: Mapped[PaymentMethod] = mapped_column(value_enum(PaymentMethod), nullable=False)
    payment_status: Mapped[PaymentStatus] = mapped_column(
        value_enum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING, index=True
    )
    status: Mapped[OrderStatus] = mapped_column(
        value_enum(OrderStatus), nullable=False, default=OrderStatus.PENDING, index=True
    )

    subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    shipping_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    discount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    applied_coupon: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    payment_details: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    shipping_details: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    cancel_request: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    return_request: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("discount >= 0 AND discount <= subtotal", name="ck_orders_discount_range"),
    )

    def __repr__(self):
        return f"<Order(number={self.order_number}, status={self.status})>"


class OrderSequenceModel(Base):
    """Last order sequence number handed out for a calendar day (YYYYMMDD)."""

    __tablename__ = "order_sequences"

    day: Mapped[str] = mapped_column(String(8), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
