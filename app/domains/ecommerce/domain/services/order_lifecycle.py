"""
Order Lifecycle State Machine

Status and payment transitions for orders, including the cancellation
and return request sub-workflows.

Every transition is a pure function of the current order and the event
arguments. It returns a ``TransitionResult`` holding a new order value and
the side effects (notifications, restocks) the caller must execute. The
input order is never modified, and all checks run before any field of the
new order is built, so a rejected transition changes nothing.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Any

from app.core.domain import DomainEvent, InvalidOperationException, to_money, utc_now

from ..entities.order import (
    CancelRequest,
    Order,
    PaymentDetails,
    ReturnRequest,
    check_text_length,
)
from ..events import (
    Audience,
    NotificationRequested,
    NotificationTemplate,
    RestockLine,
    StockRestockRequested,
)
from ..value_objects.order_status import (
    CancelReason,
    OrderStatus,
    PaymentStatus,
    RefundMethod,
    RequestStatus,
    ReturnReason,
)

NO_PENDING_CANCELLATION = "No pending cancellation request found"
NO_PENDING_RETURN = "No pending return request found"

_STATUS_NOTIFICATIONS = {
    OrderStatus.SHIPPED: NotificationTemplate.ORDER_SHIPPED,
    OrderStatus.CANCELLED: NotificationTemplate.ORDER_CANCELLED,
    OrderStatus.RETURNED: NotificationTemplate.RETURN_PROCESSED,
}


@dataclass(frozen=True)
class TransitionResult:
    """New order value plus the effects the transition asks for."""

    order: Order
    effects: tuple[DomainEvent, ...] = ()

    @property
    def notifications(self) -> list[NotificationRequested]:
        return [e for e in self.effects if isinstance(e, NotificationRequested)]

    @property
    def restocks(self) -> list[StockRestockRequested]:
        return [e for e in self.effects if isinstance(e, StockRestockRequested)]


def _notify_customer(order: Order, template: NotificationTemplate, **data: Any) -> NotificationRequested:
    return NotificationRequested(
        template=template,
        audience=Audience.CUSTOMER,
        recipient=order.customer_email,
        data={"order_id": order.id, "order_number": order.order_number, "user_id": order.user_id, **data},
    )


def _notify_admin(order: Order, template: NotificationTemplate, **data: Any) -> NotificationRequested:
    return NotificationRequested(
        template=template,
        audience=Audience.ADMIN,
        data={"order_id": order.id, "order_number": order.order_number, "user_id": order.user_id, **data},
    )


class OrderLifecycle:
    """
    Domain service driving order transitions.

    Main flow is pending, confirmed, processing, shipped, delivered.
    Approved cancellations end in cancelled, approved returns in returned.
    """

    # Status updates

    def update_status(
        self,
        order: Order,
        new_status: OrderStatus,
        notes: str | None = None,
        tracking_number: str | None = None,
        carrier: str | None = None,
        now: datetime | None = None,
    ) -> TransitionResult:
        """
        Overwrite the order status.

        No transition table is enforced here; administrators may correct
        a status freely. Entering shipped or delivered stamps the
        matching shipping timestamp.
        """
        check_text_length(notes, "notes")
        now = now or utc_now()

        shipping = order.shipping_details
        if tracking_number:
            shipping = replace(shipping, tracking_number=tracking_number)
        if carrier:
            shipping = replace(shipping, carrier=carrier)
        if new_status == OrderStatus.SHIPPED:
            shipping = replace(shipping, shipped_at=now)
        elif new_status == OrderStatus.DELIVERED:
            shipping = replace(shipping, delivered_at=now)

        updated = replace(
            order,
            status=new_status,
            shipping_details=shipping,
            notes=notes or order.notes,
            updated_at=now,
        )

        effects: list[DomainEvent] = []
        template = _STATUS_NOTIFICATIONS.get(new_status)
        if template is not None and new_status != order.status:
            effects.append(
                _notify_customer(
                    updated,
                    template,
                    status=new_status.value,
                    tracking_number=shipping.tracking_number,
                    carrier=shipping.carrier,
                )
            )
        return TransitionResult(order=updated, effects=tuple(effects))

    def update_payment_status(
        self,
        order: Order,
        new_status: PaymentStatus,
        details: PaymentDetails | None = None,
        now: datetime | None = None,
    ) -> TransitionResult:
        """
        Record the payment outcome reported by the payment collaborator.

        A completed payment merges the supplied details over the existing
        ones and stamps ``paid_at``.
        """
        now = now or utc_now()
        payment_details = order.payment_details
        if new_status == PaymentStatus.COMPLETED:
            incoming = details or PaymentDetails()
            payment_details = PaymentDetails(
                transaction_id=incoming.transaction_id or payment_details.transaction_id,
                payment_intent_id=incoming.payment_intent_id or payment_details.payment_intent_id,
                payment_method=incoming.payment_method or payment_details.payment_method,
                paid_at=now,
            )

        updated = replace(order, payment_status=new_status, payment_details=payment_details, updated_at=now)
        return TransitionResult(order=updated)

    # Cancellation workflow

    def request_cancellation(
        self,
        order: Order,
        reason: CancelReason,
        description: str = "",
        now: datetime | None = None,
    ) -> TransitionResult:
        """File a cancellation request. Only pending, confirmed or processing orders qualify."""
        if not order.status.can_be_cancelled():
            raise InvalidOperationException(
                operation="request_cancellation",
                current_state=order.status.value,
                message="Order cannot be cancelled at this stage",
            )
        if order.cancel_request is not None:
            raise InvalidOperationException(
                operation="request_cancellation",
                current_state=order.cancel_request.status.value,
                message="A cancellation request has already been filed for this order",
            )

        now = now or utc_now()
        request = CancelRequest(reason=reason, description=description, requested_at=now)
        updated = replace(order, cancel_request=request, updated_at=now)
        return TransitionResult(
            order=updated,
            effects=(
                _notify_admin(
                    updated,
                    NotificationTemplate.CANCEL_REQUEST,
                    reason=reason.value,
                    description=description,
                ),
            ),
        )

    def process_cancel_request(
        self,
        order: Order,
        approved: bool,
        processed_by: str,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> TransitionResult:
        """
        Decide a pending cancellation request.

        Approval cancels the order, marks the payment refunded and asks for
        every line to be restocked.
        """
        request = order.cancel_request
        if request is None or not request.is_pending:
            raise InvalidOperationException(
                operation="process_cancel_request",
                current_state=request.status.value if request else "none",
                message=NO_PENDING_CANCELLATION,
            )
        check_text_length(notes, "notes")

        now = now or utc_now()
        decided = replace(
            request,
            status=RequestStatus.APPROVED if approved else RequestStatus.REJECTED,
            processed_at=now,
            processed_by=processed_by,
        )
        changes: dict[str, Any] = {"cancel_request": decided, "notes": notes or order.notes, "updated_at": now}
        if approved:
            changes["status"] = OrderStatus.CANCELLED
            changes["payment_status"] = PaymentStatus.REFUNDED
        updated = replace(order, **changes)

        effects: list[DomainEvent] = []
        if approved:
            effects.append(
                StockRestockRequested(
                    order_id=order.id,
                    lines=tuple(
                        RestockLine(product_id=item.product_id, size=item.size, quantity=item.quantity)
                        for item in order.items
                    ),
                )
            )
            effects.append(_notify_customer(updated, NotificationTemplate.ORDER_CANCELLED, reason=request.reason.value))
        return TransitionResult(order=updated, effects=tuple(effects))

    # Return workflow

    def request_return(
        self,
        order: Order,
        reason: ReturnReason,
        description: str = "",
        now: datetime | None = None,
    ) -> TransitionResult:
        """File a return request. Only delivered orders qualify."""
        if not order.status.can_be_returned():
            raise InvalidOperationException(
                operation="request_return",
                current_state=order.status.value,
                message="Returns can only be requested for delivered orders",
            )
        if order.return_request is not None:
            raise InvalidOperationException(
                operation="request_return",
                current_state=order.return_request.status.value,
                message="A return request has already been filed for this order",
            )

        now = now or utc_now()
        request = ReturnRequest(reason=reason, description=description, requested_at=now)
        updated = replace(order, return_request=request, updated_at=now)
        return TransitionResult(
            order=updated,
            effects=(
                _notify_admin(
                    updated,
                    NotificationTemplate.RETURN_REQUEST,
                    reason=reason.value,
                    description=description,
                ),
            ),
        )

    def process_return_request(
        self,
        order: Order,
        approved: bool,
        processed_by: str,
        refund_amount: Decimal | None = None,
        refund_method: RefundMethod | None = None,
        tracking_number: str | None = None,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> TransitionResult:
        """
        Decide a pending return request.

        Approval moves the order to returned and records the refund and
        return tracking details on the request.
        """
        request = order.return_request
        if request is None or not request.is_pending:
            raise InvalidOperationException(
                operation="process_return_request",
                current_state=request.status.value if request else "none",
                message=NO_PENDING_RETURN,
            )
        check_text_length(notes, "notes")
        if approved and refund_amount is not None and not (0 <= to_money(refund_amount) <= order.total):
            raise InvalidOperationException(
                operation="process_return_request",
                current_state=order.status.value,
                message="Refund amount must be between 0 and the order total",
            )

        now = now or utc_now()
        decided = replace(
            request,
            status=RequestStatus.APPROVED if approved else RequestStatus.REJECTED,
            processed_at=now,
            processed_by=processed_by,
        )
        if approved:
            decided = replace(
                decided,
                return_tracking_number=tracking_number,
                refund_amount=to_money(refund_amount) if refund_amount is not None else order.total,
                refund_method=refund_method or RefundMethod.ORIGINAL_PAYMENT,
            )

        changes: dict[str, Any] = {"return_request": decided, "notes": notes or order.notes, "updated_at": now}
        if approved:
            changes["status"] = OrderStatus.RETURNED
        updated = replace(order, **changes)

        effects: list[DomainEvent] = []
        if approved:
            effects.append(
                _notify_customer(
                    updated,
                    NotificationTemplate.RETURN_PROCESSED,
                    refund_amount=str(decided.refund_amount),
                    refund_method=decided.refund_method.value if decided.refund_method else None,
                )
            )
        return TransitionResult(order=updated, effects=tuple(effects))
