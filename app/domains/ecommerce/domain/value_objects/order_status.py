"""
Order Status Value Objects for E-commerce Domain

Represents the lifecycle states of an order, its payment state and the
enumerations used by the cancellation and return sub-workflows.
"""

from app.core.domain import StatusEnum


class OrderStatus(StatusEnum):
    """
    Order lifecycle states.

    Main flow:
    - PENDING -> CONFIRMED -> PROCESSING -> SHIPPED -> DELIVERED
    Side branches:
    - PENDING, CONFIRMED, PROCESSING -> CANCELLED (approved cancellation)
    - DELIVERED -> RETURNED (approved return)
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"

    @classmethod
    def main_flow(cls) -> list["OrderStatus"]:
        """Statuses of the main flow in order, used for tracking timelines."""
        return [cls.PENDING, cls.CONFIRMED, cls.PROCESSING, cls.SHIPPED, cls.DELIVERED]

    def is_terminal(self) -> bool:
        """Check if this status ends the main flow."""
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.RETURNED)

    def can_be_cancelled(self) -> bool:
        """Check if a cancellation may be requested in this state."""
        return self in (OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING)

    def can_be_returned(self) -> bool:
        """Check if a return may be requested in this state."""
        return self == OrderStatus.DELIVERED


class PaymentStatus(StatusEnum):
    """Payment status for orders."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"

    def is_successful(self) -> bool:
        """Check if payment was successful."""
        return self == PaymentStatus.COMPLETED


class PaymentMethod(StatusEnum):
    """Accepted payment methods."""

    CARD = "card"
    COD = "cod"
    UPI = "upi"
    NETBANKING = "netbanking"
    RAZORPAY = "razorpay"


class RequestStatus(StatusEnum):
    """State of a cancellation or return request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class CancelReason(StatusEnum):
    """Reasons a customer may give for cancelling an order."""

    CHANGED_MIND = "changed_mind"
    WRONG_ITEM = "wrong_item"
    DEFECTIVE = "defective"
    LATE_DELIVERY = "late_delivery"
    OTHER = "other"


class ReturnReason(StatusEnum):
    """Reasons a customer may give for returning an order."""

    DEFECTIVE = "defective"
    WRONG_ITEM = "wrong_item"
    NOT_AS_DESCRIBED = "not_as_described"
    CHANGED_MIND = "changed_mind"
    OTHER = "other"


class RefundMethod(StatusEnum):
    """How an approved return is refunded."""

    ORIGINAL_PAYMENT = "original_payment"
    STORE_CREDIT = "store_credit"
    BANK_TRANSFER = "bank_transfer"
