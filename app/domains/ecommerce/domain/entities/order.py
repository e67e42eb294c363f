"""
Order Entity

Order aggregate and the records embedded in it: line item snapshots,
applied coupon snapshot, payment and shipping details, and the
cancellation and return requests.

Orders are treated as values by the lifecycle service: every transition
builds a new ``Order`` with ``dataclasses.replace`` and leaves the input
untouched.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from app.core.domain import AggregateRoot, ValidationException, to_money

from ..value_objects.coupon_terms import DiscountType
from ..value_objects.order_status import (
    CancelReason,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    RefundMethod,
    RequestStatus,
    ReturnReason,
)
from ..value_objects.shipping import ShippingAddress

MAX_NOTES_LENGTH = 500


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_dt(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _decimal(value: Any) -> Decimal | None:
    return None if value is None else Decimal(str(value))


def check_text_length(value: str | None, field_name: str, limit: int = MAX_NOTES_LENGTH) -> None:
    if value and len(value) > limit:
        raise ValidationException(f"{field_name.capitalize()} cannot exceed {limit} characters", field=field_name)


@dataclass(frozen=True)
class OrderItem:
    """
    Snapshot of a product size at checkout.

    Prices here never follow later product edits.
    """

    product_id: str
    name: str
    size: str
    price: Decimal
    quantity: int
    image: str = ""
    category: str = ""

    def __post_init__(self):
        object.__setattr__(self, "price", to_money(self.price))
        if self.quantity < 1:
            raise ValidationException("Quantity must be at least 1", field="quantity")
        if self.price < 0:
            raise ValidationException("Price cannot be negative", field="price")

    @property
    def line_total(self) -> Decimal:
        return to_money(self.price * self.quantity)

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "size": self.size,
            "price": str(self.price),
            "quantity": self.quantity,
            "image": self.image,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OrderItem":
        return cls(
            product_id=data["product_id"],
            name=data["name"],
            size=data["size"],
            price=Decimal(str(data["price"])),
            quantity=int(data["quantity"]),
            image=data.get("image", ""),
            category=data.get("category", ""),
        )


@dataclass(frozen=True)
class AppliedCoupon:
    """
    Terms of the coupon as they were when the order was placed.

    Carries everything the discount rule needs, so totals can be
    recomputed later without reading the live coupon.
    """

    code: str
    discount: Decimal
    type: DiscountType
    max_discount: Decimal = Decimal("-1")
    categories: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "discount": str(self.discount),
            "type": self.type.value,
            "max_discount": str(self.max_discount),
            "categories": list(self.categories),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppliedCoupon":
        return cls(
            code=data["code"],
            discount=Decimal(str(data["discount"])),
            type=DiscountType(data["type"]),
            max_discount=Decimal(str(data.get("max_discount", "-1"))),
            categories=tuple(data.get("categories", ())),
        )


@dataclass(frozen=True)
class PaymentDetails:
    """Payment metadata reported by the payment collaborator."""

    transaction_id: str | None = None
    payment_intent_id: str | None = None
    payment_method: str | None = None
    paid_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "transaction_id": self.transaction_id,
            "payment_intent_id": self.payment_intent_id,
            "payment_method": self.payment_method,
            "paid_at": _iso(self.paid_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PaymentDetails":
        return cls(
            transaction_id=data.get("transaction_id"),
            payment_intent_id=data.get("payment_intent_id"),
            payment_method=data.get("payment_method"),
            paid_at=_parse_dt(data.get("paid_at")),
        )


@dataclass(frozen=True)
class ShippingDetails:
    """Carrier and tracking metadata."""

    tracking_number: str | None = None
    carrier: str | None = None
    shipped_at: datetime | None = None
    estimated_delivery: datetime | None = None
    delivered_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "tracking_number": self.tracking_number,
            "carrier": self.carrier,
            "shipped_at": _iso(self.shipped_at),
            "estimated_delivery": _iso(self.estimated_delivery),
            "delivered_at": _iso(self.delivered_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShippingDetails":
        return cls(
            tracking_number=data.get("tracking_number"),
            carrier=data.get("carrier"),
            shipped_at=_parse_dt(data.get("shipped_at")),
            estimated_delivery=_parse_dt(data.get("estimated_delivery")),
            delivered_at=_parse_dt(data.get("delivered_at")),
        )


@dataclass(frozen=True)
class CancelRequest:
    """Customer request to cancel an order, decided once by an admin."""

    reason: CancelReason
    requested_at: datetime
    description: str = ""
    status: RequestStatus = RequestStatus.PENDING
    processed_at: datetime | None = None
    processed_by: str | None = None

    def __post_init__(self):
        check_text_length(self.description, "description")

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING

    def to_dict(self) -> dict[str, Any]:
        return {
            "reason": self.reason.value,
            "requested_at": _iso(self.requested_at),
            "description": self.description,
            "status": self.status.value,
            "processed_at": _iso(self.processed_at),
            "processed_by": self.processed_by,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CancelRequest":
        return cls(
            reason=CancelReason(data["reason"]),
            requested_at=_parse_dt(data["requested_at"]),
            description=data.get("description", ""),
            status=RequestStatus(data.get("status", RequestStatus.PENDING.value)),
            processed_at=_parse_dt(data.get("processed_at")),
            processed_by=data.get("processed_by"),
        )


@dataclass(frozen=True)
class ReturnRequest:
    """Customer request to return a delivered order."""

    reason: ReturnReason
    requested_at: datetime
    description: str = ""
    status: RequestStatus = RequestStatus.PENDING
    processed_at: datetime | None = None
    processed_by: str | None = None
    return_tracking_number: str | None = None
    refund_amount: Decimal | None = None
    refund_method: RefundMethod | None = None

    def __post_init__(self):
        check_text_length(self.description, "description")

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING

    def to_dict(self) -> dict[str, Any]:
        return {
            "reason": self.reason.value,
            "requested_at": _iso(self.requested_at),
            "description": self.description,
            "status": self.status.value,
            "processed_at": _iso(self.processed_at),
            "processed_by": self.processed_by,
            "return_tracking_number": self.return_tracking_number,
            "refund_amount": str(self.refund_amount) if self.refund_amount is not None else None,
            "refund_method": self.refund_method.value if self.refund_method else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReturnRequest":
        refund_method = data.get("refund_method")
        return cls(
            reason=ReturnReason(data["reason"]),
            requested_at=_parse_dt(data["requested_at"]),
            description=data.get("description", ""),
            status=RequestStatus(data.get("status", RequestStatus.PENDING.value)),
            processed_at=_parse_dt(data.get("processed_at")),
            processed_by=data.get("processed_by"),
            return_tracking_number=data.get("return_tracking_number"),
            refund_amount=_decimal(data.get("refund_amount")),
            refund_method=RefundMethod(refund_method) if refund_method else None,
        )


@dataclass
class Order(AggregateRoot[str]):
    """
    Order aggregate.

    Invariants:
    - total = subtotal + shipping_cost - discount
    - 0 <= discount <= subtotal
    - order_number never changes once assigned
    """

    user_id: str = ""
    customer_email: str | None = None
    order_number: str = ""
    items: list[OrderItem] = field(default_factory=list)
    shipping_address: ShippingAddress | None = None
    payment_method: PaymentMethod = PaymentMethod.COD
    payment_status: PaymentStatus = PaymentStatus.PENDING
    status: OrderStatus = OrderStatus.PENDING
    subtotal: Decimal = Decimal("0.00")
    shipping_cost: Decimal = Decimal("0.00")
    discount: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")
    applied_coupon: AppliedCoupon | None = None
    payment_details: PaymentDetails = field(default_factory=PaymentDetails)
    shipping_details: ShippingDetails = field(default_factory=ShippingDetails)
    notes: str | None = None
    cancel_request: CancelRequest | None = None
    return_request: ReturnRequest | None = None

    def __post_init__(self):
        check_text_length(self.notes, "notes")

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def belongs_to(self, user_id: str) -> bool:
        return self.user_id == user_id

    def to_summary_dict(self) -> dict[str, Any]:
        """Convert to summary dictionary for listings."""
        return {
            "id": self.id,
            "order_number": self.order_number,
            "status": self.status.value,
            "payment_status": self.payment_status.value,
            "total": float(self.total),
            "item_count": self.item_count,
            "created_at": _iso(self.created_at),
        }
