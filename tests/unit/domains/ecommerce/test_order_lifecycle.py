"""
Unit tests for the order lifecycle state machine.

Transitions are pure: they return a new order plus effects and leave the
input untouched.
"""

from decimal import Decimal

import pytest

from app.core.domain import InvalidOperationException, ValidationException
from app.domains.ecommerce.domain.entities import PaymentDetails
from app.domains.ecommerce.domain.events import (
    Audience,
    NotificationTemplate,
    RestockLine,
)
from app.domains.ecommerce.domain.services import OrderLifecycle
from app.domains.ecommerce.domain.value_objects import (
    CancelReason,
    OrderStatus,
    PaymentStatus,
    RefundMethod,
    RequestStatus,
    ReturnReason,
)
from tests.conftest import NOW, make_order


@pytest.fixture
def lifecycle() -> OrderLifecycle:
    return OrderLifecycle()


class TestUpdateStatus:
    def test_shipping_stamps_timestamp_and_notifies(self, lifecycle):
        order = make_order(status=OrderStatus.PROCESSING)
        result = lifecycle.update_status(
            order, OrderStatus.SHIPPED, tracking_number="TRK1", carrier="BlueDart", now=NOW
        )

        assert result.order.status == OrderStatus.SHIPPED
        assert result.order.shipping_details.shipped_at == NOW
        assert result.order.shipping_details.tracking_number == "TRK1"
        assert [n.template for n in result.notifications] == [NotificationTemplate.ORDER_SHIPPED]
        assert result.notifications[0].audience == Audience.CUSTOMER
        assert result.notifications[0].data["tracking_number"] == "TRK1"
        assert order.status == OrderStatus.PROCESSING

    def test_delivered_stamps_delivered_at_without_notification(self, lifecycle):
        result = lifecycle.update_status(make_order(status=OrderStatus.SHIPPED), OrderStatus.DELIVERED, now=NOW)

        assert result.order.shipping_details.delivered_at == NOW
        assert result.effects == ()

    def test_no_transition_table_for_admin_overwrite(self, lifecycle):
        result = lifecycle.update_status(make_order(status=OrderStatus.DELIVERED), OrderStatus.PENDING, now=NOW)
        assert result.order.status == OrderStatus.PENDING

    def test_cancel_by_overwrite_notifies_but_does_not_restock(self, lifecycle):
        result = lifecycle.update_status(make_order(), OrderStatus.CANCELLED, now=NOW)

        assert [n.template for n in result.notifications] == [NotificationTemplate.ORDER_CANCELLED]
        assert result.restocks == []

    def test_same_status_does_not_notify_again(self, lifecycle):
        result = lifecycle.update_status(make_order(status=OrderStatus.SHIPPED), OrderStatus.SHIPPED, now=NOW)
        assert result.notifications == []

    def test_notes_are_kept_unless_replaced(self, lifecycle):
        order = make_order(notes="leave at door")
        assert lifecycle.update_status(order, OrderStatus.CONFIRMED, now=NOW).order.notes == "leave at door"
        assert lifecycle.update_status(order, OrderStatus.CONFIRMED, notes="call first", now=NOW).order.notes == (
            "call first"
        )

    def test_notes_length_limit(self, lifecycle):
        with pytest.raises(ValidationException):
            lifecycle.update_status(make_order(), OrderStatus.CONFIRMED, notes="x" * 501, now=NOW)


class TestUpdatePaymentStatus:
    def test_completed_merges_details_and_stamps_paid_at(self, lifecycle):
        order = make_order(payment_details=PaymentDetails(payment_intent_id="pi_1"))
        result = lifecycle.update_payment_status(
            order, PaymentStatus.COMPLETED, PaymentDetails(transaction_id="tx_9"), now=NOW
        )

        details = result.order.payment_details
        assert result.order.payment_status == PaymentStatus.COMPLETED
        assert details.transaction_id == "tx_9"
        assert details.payment_intent_id == "pi_1"
        assert details.paid_at == NOW

    def test_failed_keeps_details(self, lifecycle):
        order = make_order(payment_details=PaymentDetails(payment_intent_id="pi_1"))
        result = lifecycle.update_payment_status(order, PaymentStatus.FAILED, now=NOW)

        assert result.order.payment_status == PaymentStatus.FAILED
        assert result.order.payment_details.paid_at is None
        assert result.effects == ()


class TestCancellationWorkflow:
    @pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING])
    def test_request_allowed_before_shipping(self, lifecycle, status):
        result = lifecycle.request_cancellation(make_order(status=status), CancelReason.CHANGED_MIND, now=NOW)

        request = result.order.cancel_request
        assert request.status == RequestStatus.PENDING
        assert request.requested_at == NOW
        assert result.order.status == status
        assert result.notifications[0].template == NotificationTemplate.CANCEL_REQUEST
        assert result.notifications[0].audience == Audience.ADMIN

    @pytest.mark.parametrize(
        "status", [OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.RETURNED]
    )
    def test_request_rejected_after_shipping(self, lifecycle, status):
        order = make_order(status=status)
        with pytest.raises(InvalidOperationException, match="cannot be cancelled"):
            lifecycle.request_cancellation(order, CancelReason.OTHER, now=NOW)
        assert order.cancel_request is None

    def test_second_request_rejected(self, lifecycle):
        first = lifecycle.request_cancellation(make_order(), CancelReason.OTHER, now=NOW).order
        with pytest.raises(InvalidOperationException):
            lifecycle.request_cancellation(first, CancelReason.OTHER, now=NOW)

    def test_approval_cancels_refunds_and_restocks(self, lifecycle):
        requested = lifecycle.request_cancellation(make_order(), CancelReason.CHANGED_MIND, now=NOW).order
        result = lifecycle.process_cancel_request(requested, approved=True, processed_by="admin-1", now=NOW)

        assert result.order.status == OrderStatus.CANCELLED
        assert result.order.payment_status == PaymentStatus.REFUNDED
        assert result.order.cancel_request.status == RequestStatus.APPROVED
        assert result.order.cancel_request.processed_by == "admin-1"
        assert result.restocks[0].lines == (
            RestockLine(product_id="p-1", size="100g", quantity=2),
            RestockLine(product_id="p-2", size="200g", quantity=1),
        )
        assert [n.template for n in result.notifications] == [NotificationTemplate.ORDER_CANCELLED]

    def test_rejection_leaves_status(self, lifecycle):
        requested = lifecycle.request_cancellation(make_order(), CancelReason.OTHER, now=NOW).order
        result = lifecycle.process_cancel_request(requested, approved=False, processed_by="admin-1", now=NOW)

        assert result.order.status == OrderStatus.PENDING
        assert result.order.cancel_request.status == RequestStatus.REJECTED
        assert result.effects == ()

    def test_processing_without_request_fails(self, lifecycle):
        with pytest.raises(InvalidOperationException, match="No pending cancellation request found"):
            lifecycle.process_cancel_request(make_order(), approved=True, processed_by="admin-1")

    def test_processing_twice_fails(self, lifecycle):
        requested = lifecycle.request_cancellation(make_order(), CancelReason.OTHER, now=NOW).order
        decided = lifecycle.process_cancel_request(requested, approved=False, processed_by="a", now=NOW).order
        with pytest.raises(InvalidOperationException):
            lifecycle.process_cancel_request(decided, approved=True, processed_by="a", now=NOW)


class TestReturnWorkflow:
    def test_request_only_for_delivered(self, lifecycle):
        with pytest.raises(InvalidOperationException, match="delivered orders"):
            lifecycle.request_return(make_order(status=OrderStatus.SHIPPED), ReturnReason.DEFECTIVE, now=NOW)

    def test_request_notifies_admin(self, lifecycle):
        result = lifecycle.request_return(
            make_order(status=OrderStatus.DELIVERED), ReturnReason.DEFECTIVE, "torn pack", now=NOW
        )

        assert result.order.return_request.description == "torn pack"
        assert result.notifications[0].template == NotificationTemplate.RETURN_REQUEST
        assert result.notifications[0].audience == Audience.ADMIN

    def test_approval_defaults_refund_to_total(self, lifecycle):
        requested = lifecycle.request_return(
            make_order(status=OrderStatus.DELIVERED), ReturnReason.DEFECTIVE, now=NOW
        ).order
        result = lifecycle.process_return_request(requested, approved=True, processed_by="admin-1", now=NOW)

        request = result.order.return_request
        assert result.order.status == OrderStatus.RETURNED
        assert request.refund_amount == Decimal("520.00")
        assert request.refund_method == RefundMethod.ORIGINAL_PAYMENT
        assert result.restocks == []
        assert result.notifications[0].template == NotificationTemplate.RETURN_PROCESSED

    def test_approval_with_partial_refund(self, lifecycle):
        requested = lifecycle.request_return(
            make_order(status=OrderStatus.DELIVERED), ReturnReason.WRONG_ITEM, now=NOW
        ).order
        result = lifecycle.process_return_request(
            requested,
            approved=True,
            processed_by="admin-1",
            refund_amount=Decimal("120"),
            refund_method=RefundMethod.STORE_CREDIT,
            tracking_number="RET-1",
            now=NOW,
        )

        request = result.order.return_request
        assert request.refund_amount == Decimal("120.00")
        assert request.refund_method == RefundMethod.STORE_CREDIT
        assert request.return_tracking_number == "RET-1"

    def test_refund_above_total_rejected(self, lifecycle):
        requested = lifecycle.request_return(
            make_order(status=OrderStatus.DELIVERED), ReturnReason.OTHER, now=NOW
        ).order
        with pytest.raises(InvalidOperationException):
            lifecycle.process_return_request(
                requested, approved=True, processed_by="a", refund_amount=Decimal("520.01"), now=NOW
            )
        assert requested.return_request.status == RequestStatus.PENDING

    def test_rejection(self, lifecycle):
        requested = lifecycle.request_return(
            make_order(status=OrderStatus.DELIVERED), ReturnReason.OTHER, now=NOW
        ).order
        result = lifecycle.process_return_request(requested, approved=False, processed_by="a", now=NOW)

        assert result.order.status == OrderStatus.DELIVERED
        assert result.order.return_request.status == RequestStatus.REJECTED
        assert result.order.return_request.refund_amount is None

    def test_processing_without_request_fails(self, lifecycle):
        with pytest.raises(InvalidOperationException, match="No pending return request found"):
            lifecycle.process_return_request(
                make_order(status=OrderStatus.DELIVERED), approved=True, processed_by="a"
            )
