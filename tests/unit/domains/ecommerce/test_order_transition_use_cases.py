"""
Unit tests for order lifecycle use cases.

Covers ownership checks, restock on approved cancellation, rollback and
publish-after-commit ordering.
"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from app.core.domain import (
    AuthorizationException,
    EntityNotFoundException,
    InvalidOperationException,
)
from app.domains.ecommerce.application.use_cases import (
    ProcessCancelRequestRequest,
    ProcessCancelRequestUseCase,
    ProcessReturnRequestRequest,
    ProcessReturnRequestUseCase,
    RequestCancellationRequest,
    RequestCancellationUseCase,
    RequestReturnRequest,
    RequestReturnUseCase,
    UpdateOrderStatusRequest,
    UpdateOrderStatusUseCase,
    UpdatePaymentStatusRequest,
    UpdatePaymentStatusUseCase,
)
from app.domains.ecommerce.domain.entities import CancelRequest, ReturnRequest
from app.domains.ecommerce.domain.events import Audience, NotificationRequested, NotificationTemplate
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
def deps(mock_order_repository, mock_product_repository, mock_transaction, publisher):
    return {
        "order_repository": mock_order_repository,
        "product_repository": mock_product_repository,
        "transaction": mock_transaction,
        "publisher": publisher,
    }


def pending_cancel(order_status: OrderStatus = OrderStatus.CONFIRMED):
    return make_order(
        status=order_status,
        cancel_request=CancelRequest(reason=CancelReason.CHANGED_MIND, requested_at=NOW),
    )


class TestRequestCancellationUseCase:
    @pytest.mark.asyncio
    async def test_owner_files_request(self, deps, mock_order_repository, mock_transaction, publisher):
        """Test request stored and admins notified after commit."""
        mock_order_repository.get_by_id.return_value = make_order()
        use_case = RequestCancellationUseCase(**deps)

        saved = await use_case.execute(
            RequestCancellationRequest(order_id="o-1", user_id="u-1", reason=CancelReason.CHANGED_MIND)
        )

        assert saved.cancel_request.status == RequestStatus.PENDING
        assert saved.status == OrderStatus.PENDING
        mock_order_repository.update.assert_awaited_once()
        mock_transaction.commit.assert_awaited_once()
        assert [e.template for e in publisher.published] == [NotificationTemplate.CANCEL_REQUEST]
        assert publisher.published[0].audience == Audience.ADMIN

    @pytest.mark.asyncio
    async def test_other_user_rejected(self, deps, mock_order_repository, mock_transaction):
        mock_order_repository.get_by_id.return_value = make_order(user_id="u-1")
        use_case = RequestCancellationUseCase(**deps)

        with pytest.raises(AuthorizationException):
            await use_case.execute(
                RequestCancellationRequest(order_id="o-1", user_id="u-2", reason=CancelReason.OTHER)
            )

        mock_order_repository.update.assert_not_awaited()
        mock_transaction.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_order(self, deps, mock_order_repository):
        mock_order_repository.get_by_id.return_value = None
        use_case = RequestCancellationUseCase(**deps)

        with pytest.raises(EntityNotFoundException):
            await use_case.execute(
                RequestCancellationRequest(order_id="o-9", user_id="u-1", reason=CancelReason.OTHER)
            )

    @pytest.mark.asyncio
    async def test_shipped_order_cannot_be_cancelled(self, deps, mock_order_repository, publisher):
        mock_order_repository.get_by_id.return_value = make_order(status=OrderStatus.SHIPPED)
        use_case = RequestCancellationUseCase(**deps)

        with pytest.raises(InvalidOperationException):
            await use_case.execute(
                RequestCancellationRequest(order_id="o-1", user_id="u-1", reason=CancelReason.LATE_DELIVERY)
            )

        assert publisher.published == []


class TestRequestReturnUseCase:
    @pytest.mark.asyncio
    async def test_delivered_order(self, deps, mock_order_repository, publisher):
        mock_order_repository.get_by_id.return_value = make_order(status=OrderStatus.DELIVERED)
        use_case = RequestReturnUseCase(**deps)

        saved = await use_case.execute(
            RequestReturnRequest(order_id="o-1", user_id="u-1", reason=ReturnReason.DEFECTIVE, description="Stale")
        )

        assert saved.return_request.reason == ReturnReason.DEFECTIVE
        assert publisher.published[0].template == NotificationTemplate.RETURN_REQUEST

    @pytest.mark.asyncio
    async def test_undelivered_order_rejected(self, deps, mock_order_repository):
        mock_order_repository.get_by_id.return_value = make_order(status=OrderStatus.SHIPPED)
        use_case = RequestReturnUseCase(**deps)

        with pytest.raises(InvalidOperationException):
            await use_case.execute(RequestReturnRequest(order_id="o-1", user_id="u-1", reason=ReturnReason.OTHER))


class TestProcessCancelRequestUseCase:
    @pytest.mark.asyncio
    async def test_approval_restocks_every_line(
        self, deps, mock_order_repository, mock_product_repository, mock_transaction, publisher
    ):
        """Test approved cancellation restores stock inside the transaction."""
        mock_order_repository.get_by_id.return_value = pending_cancel()
        use_case = ProcessCancelRequestUseCase(**deps)

        saved = await use_case.execute(
            ProcessCancelRequestRequest(order_id="o-1", approved=True, processed_by="admin-1")
        )

        assert saved.status == OrderStatus.CANCELLED
        assert saved.payment_status == PaymentStatus.REFUNDED
        assert saved.cancel_request.status == RequestStatus.APPROVED
        assert saved.cancel_request.processed_by == "admin-1"
        assert mock_product_repository.restock.await_args_list[0].args == ("p-1", "100g", 2)
        assert mock_product_repository.restock.await_args_list[1].args == ("p-2", "200g", 1)
        mock_transaction.commit.assert_awaited_once()
        assert [e.template for e in publisher.published] == [NotificationTemplate.ORDER_CANCELLED]

    @pytest.mark.asyncio
    async def test_rejection_leaves_stock_and_status(
        self, deps, mock_order_repository, mock_product_repository, publisher
    ):
        mock_order_repository.get_by_id.return_value = pending_cancel()
        use_case = ProcessCancelRequestUseCase(**deps)

        saved = await use_case.execute(
            ProcessCancelRequestRequest(order_id="o-1", approved=False, processed_by="admin-1", notes="Already packed")
        )

        assert saved.status == OrderStatus.CONFIRMED
        assert saved.cancel_request.status == RequestStatus.REJECTED
        assert saved.notes == "Already packed"
        mock_product_repository.restock.assert_not_awaited()
        assert publisher.published == []

    @pytest.mark.asyncio
    async def test_restock_of_deleted_product_still_commits(
        self, deps, mock_order_repository, mock_product_repository, mock_transaction
    ):
        mock_order_repository.get_by_id.return_value = pending_cancel()
        mock_product_repository.restock.return_value = False
        use_case = ProcessCancelRequestUseCase(**deps)

        await use_case.execute(ProcessCancelRequestRequest(order_id="o-1", approved=True, processed_by="admin-1"))

        mock_transaction.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failure_rolls_back_without_notifying(
        self, deps, mock_order_repository, mock_product_repository, mock_transaction, publisher
    ):
        """Test notifications are never published for a rolled back transition."""
        mock_order_repository.get_by_id.return_value = pending_cancel()
        mock_product_repository.restock.side_effect = RuntimeError("connection lost")
        use_case = ProcessCancelRequestUseCase(**deps)

        with pytest.raises(RuntimeError):
            await use_case.execute(
                ProcessCancelRequestRequest(order_id="o-1", approved=True, processed_by="admin-1")
            )

        mock_transaction.rollback.assert_awaited_once()
        mock_transaction.commit.assert_not_awaited()
        assert publisher.published == []

    @pytest.mark.asyncio
    async def test_no_pending_request(self, deps, mock_order_repository):
        mock_order_repository.get_by_id.return_value = make_order()
        use_case = ProcessCancelRequestUseCase(**deps)

        with pytest.raises(InvalidOperationException):
            await use_case.execute(ProcessCancelRequestRequest(order_id="o-1", approved=True, processed_by="admin-1"))

    @pytest.mark.asyncio
    async def test_publisher_runs_after_commit(self, deps, mock_order_repository, mock_transaction):
        """Test commit happens before any handler sees the event."""
        calls = []
        mock_transaction.commit.side_effect = lambda: calls.append("commit")
        handler = AsyncMock(side_effect=lambda event: calls.append("notify"))
        deps["publisher"].subscribe(NotificationRequested, handler)
        mock_order_repository.get_by_id.return_value = pending_cancel()
        use_case = ProcessCancelRequestUseCase(**deps)

        await use_case.execute(ProcessCancelRequestRequest(order_id="o-1", approved=True, processed_by="admin-1"))

        assert calls == ["commit", "notify"]


class TestProcessReturnRequestUseCase:
    def returned_order(self):
        return make_order(
            status=OrderStatus.DELIVERED,
            return_request=ReturnRequest(reason=ReturnReason.DEFECTIVE, requested_at=NOW),
        )

    @pytest.mark.asyncio
    async def test_approval_defaults_refund(self, deps, mock_order_repository, mock_product_repository, publisher):
        """Test refund defaults and no restock on returns."""
        mock_order_repository.get_by_id.return_value = self.returned_order()
        use_case = ProcessReturnRequestUseCase(**deps)

        saved = await use_case.execute(
            ProcessReturnRequestRequest(order_id="o-1", approved=True, processed_by="admin-1")
        )

        assert saved.status == OrderStatus.RETURNED
        assert saved.return_request.refund_amount == Decimal("520.00")
        assert saved.return_request.refund_method == RefundMethod.ORIGINAL_PAYMENT
        mock_product_repository.restock.assert_not_awaited()
        assert publisher.published[0].template == NotificationTemplate.RETURN_PROCESSED

    @pytest.mark.asyncio
    async def test_refund_above_total_rejected(self, deps, mock_order_repository):
        mock_order_repository.get_by_id.return_value = self.returned_order()
        use_case = ProcessReturnRequestUseCase(**deps)

        with pytest.raises(InvalidOperationException, match="Refund amount"):
            await use_case.execute(
                ProcessReturnRequestRequest(
                    order_id="o-1", approved=True, processed_by="admin-1", refund_amount=Decimal("600")
                )
            )


class TestUpdateStatusUseCases:
    @pytest.mark.asyncio
    async def test_status_overwrite(self, deps, mock_order_repository, mock_product_repository, publisher):
        mock_order_repository.get_by_id.return_value = make_order(status=OrderStatus.PROCESSING)
        use_case = UpdateOrderStatusUseCase(**deps)

        saved = await use_case.execute(
            UpdateOrderStatusRequest(order_id="o-1", status=OrderStatus.SHIPPED, tracking_number="TRK1")
        )

        assert saved.status == OrderStatus.SHIPPED
        assert saved.shipping_details.tracking_number == "TRK1"
        mock_product_repository.restock.assert_not_awaited()
        assert publisher.published[0].template == NotificationTemplate.ORDER_SHIPPED

    @pytest.mark.asyncio
    async def test_payment_completed(self, deps, mock_order_repository):
        mock_order_repository.get_by_id.return_value = make_order()
        use_case = UpdatePaymentStatusUseCase(**deps)

        saved = await use_case.execute(
            UpdatePaymentStatusRequest(
                order_id="o-1", payment_status=PaymentStatus.COMPLETED, transaction_id="txn_1"
            )
        )

        assert saved.payment_status == PaymentStatus.COMPLETED
        assert saved.payment_details.transaction_id == "txn_1"
        assert saved.payment_details.paid_at is not None
