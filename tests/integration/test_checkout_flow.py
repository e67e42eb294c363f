"""
Integration tests for checkout, order transitions and reviews on SQLite.

These exercise the conditional UPDATE statements, the per-day order
counter and optimistic versioning through real transactions.
"""

import asyncio
from decimal import Decimal

import pytest

from app.core.domain import (
    BusinessRuleViolationException,
    ConcurrencyException,
    DuplicateEntityException,
    InsufficientStockException,
)
from app.domains.ecommerce.application.use_cases import (
    AddReviewRequest,
    AddReviewUseCase,
    CreateOrderRequest,
    CreateOrderUseCase,
    GetShippingSettingsUseCase,
    OrderItemInput,
    ProcessCancelRequestRequest,
    ProcessCancelRequestUseCase,
    RequestCancellationRequest,
    RequestCancellationUseCase,
    UpdateOrderStatusRequest,
    UpdateOrderStatusUseCase,
    UpdateShippingSettingsUseCase,
)
from app.domains.ecommerce.domain.entities import Review
from app.domains.ecommerce.domain.services import is_valid_order_number
from app.domains.ecommerce.domain.value_objects import CancelReason, OrderStatus
from app.domains.ecommerce.infrastructure.repositories import (
    SQLAlchemyCouponRepository,
    SQLAlchemyOrderRepository,
    SQLAlchemyProductRepository,
    SQLAlchemyReviewRepository,
    SQLAlchemyStoreSettingsRepository,
)
from tests.conftest import NOW, RecordingPublisher, make_address, make_coupon

pytestmark = pytest.mark.integration


def checkout_use_case(session, default_shipping) -> CreateOrderUseCase:
    return CreateOrderUseCase(
        order_repository=SQLAlchemyOrderRepository(session),
        product_repository=SQLAlchemyProductRepository(session),
        coupon_repository=SQLAlchemyCouponRepository(session),
        settings_repository=SQLAlchemyStoreSettingsRepository(session, defaults=default_shipping),
        transaction=session,
        publisher=RecordingPublisher(),
    )


def transition_deps(session) -> dict:
    return {
        "order_repository": SQLAlchemyOrderRepository(session),
        "product_repository": SQLAlchemyProductRepository(session),
        "transaction": session,
        "publisher": RecordingPublisher(),
    }


def checkout_request(user_id: str = "u-1", size: str = "250g", quantity: int = 1, **kwargs) -> CreateOrderRequest:
    return CreateOrderRequest(
        user_id=user_id,
        items=[OrderItemInput(product_id="p-1", size=size, quantity=quantity)],
        shipping_address=make_address().to_dict(),
        customer_email=f"{user_id}@example.com",
        **kwargs,
    )


async def place(session_factory, default_shipping, request: CreateOrderRequest):
    async with session_factory() as session:
        return await checkout_use_case(session, default_shipping).execute(request, now=NOW)


async def stock_of(session_factory, size: str) -> int:
    async with session_factory() as session:
        product = await SQLAlchemyProductRepository(session).get_by_id("p-1")
        return product.get_size(size).stock


class TestCheckout:
    async def test_order_numbers_are_sequential_per_day(self, session_factory, default_shipping, seeded_product):
        numbers = []
        for user_id in ("u-1", "u-2", "u-3"):
            response = await place(session_factory, default_shipping, checkout_request(user_id))
            numbers.append(response.order.order_number)

        assert numbers == ["VB202504170001", "VB202504170002", "VB202504170003"]

    async def test_concurrent_same_day_checkouts_get_distinct_numbers(
        self, session_factory, default_shipping, seeded_product
    ):
        users = [f"u-{n}" for n in range(1, 7)]
        responses = await asyncio.gather(
            *(place(session_factory, default_shipping, checkout_request(user_id)) for user_id in users)
        )

        numbers = [response.order.order_number for response in responses]
        assert len(set(numbers)) == len(users)
        assert all(is_valid_order_number(number) for number in numbers)
        assert sorted(numbers) == [f"VB20250417{n:04d}" for n in range(1, 7)]
        assert await stock_of(session_factory, "250g") == 20 - len(users)

    async def test_order_is_persisted_with_totals(self, session_factory, default_shipping, seeded_product):
        response = await place(session_factory, default_shipping, checkout_request(quantity=2))

        async with session_factory() as session:
            stored = await SQLAlchemyOrderRepository(session).get_by_order_number(response.order.order_number)

        assert stored.total == Decimal("560.00")
        assert stored.shipping_cost == Decimal("0.00")
        assert stored.items[0].price == Decimal("280.00")
        assert stored.shipping_address == make_address()
        assert await stock_of(session_factory, "250g") == 18

    async def test_last_unit_is_sold_once(self, session_factory, default_shipping, seeded_product):
        """Two concurrent checkouts for the final unit: one wins, one is refused."""
        results = await asyncio.gather(
            place(session_factory, default_shipping, checkout_request("u-1", size="100g")),
            place(session_factory, default_shipping, checkout_request("u-2", size="100g")),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], InsufficientStockException)
        assert await stock_of(session_factory, "100g") == 0

        async with session_factory() as session:
            product = await SQLAlchemyProductRepository(session).get_by_id("p-1")
        assert product.in_stock is True

    async def test_coupon_usage_limit(self, session_factory, default_shipping, seeded_product):
        async with session_factory() as session:
            await SQLAlchemyCouponRepository(session).add(make_coupon(code="ONCE", usage_limit=1))
            await session.commit()

        first = await place(session_factory, default_shipping, checkout_request("u-1", coupon_code="once"))
        assert first.order.discount == Decimal("28.00")

        with pytest.raises(BusinessRuleViolationException):
            await place(session_factory, default_shipping, checkout_request("u-2", coupon_code="ONCE"))

        async with session_factory() as session:
            coupon = await SQLAlchemyCouponRepository(session).get_by_code("ONCE")
        assert coupon.used_count == 1
        assert await stock_of(session_factory, "250g") == 19

    async def test_redeem_refuses_past_limit(self, session_factory, seeded_product):
        async with session_factory() as session:
            repo = SQLAlchemyCouponRepository(session)
            await repo.add(make_coupon(code="TWICE", usage_limit=2))
            assert await repo.redeem("twice") is True
            assert await repo.redeem("TWICE") is True
            assert await repo.redeem("TWICE") is False
            await session.commit()


class TestOrderTransitions:
    async def test_approved_cancellation_restocks(self, session_factory, default_shipping, seeded_product):
        response = await place(session_factory, default_shipping, checkout_request(quantity=3))
        order_id = response.order.id
        assert await stock_of(session_factory, "250g") == 17

        async with session_factory() as session:
            await RequestCancellationUseCase(**transition_deps(session)).execute(
                RequestCancellationRequest(order_id=order_id, user_id="u-1", reason=CancelReason.CHANGED_MIND)
            )
        async with session_factory() as session:
            cancelled = await ProcessCancelRequestUseCase(**transition_deps(session)).execute(
                ProcessCancelRequestRequest(order_id=order_id, approved=True, processed_by="admin-1")
            )

        assert cancelled.status == OrderStatus.CANCELLED
        assert await stock_of(session_factory, "250g") == 20

    async def test_stale_update_is_rejected(self, session_factory, default_shipping, seeded_product):
        """An order changed since it was read cannot be overwritten."""
        response = await place(session_factory, default_shipping, checkout_request())
        order_id = response.order.id

        async with session_factory() as first, session_factory() as second:
            first_copy = await SQLAlchemyOrderRepository(first).get_by_id(order_id)
            await first.commit()
            second_copy = await SQLAlchemyOrderRepository(second).get_by_id(order_id)
            await second.commit()

            first_copy.status = OrderStatus.CONFIRMED
            await SQLAlchemyOrderRepository(first).update(first_copy)
            await first.commit()

            second_copy.status = OrderStatus.PROCESSING
            with pytest.raises(ConcurrencyException):
                await SQLAlchemyOrderRepository(second).update(second_copy)
            await second.rollback()

        async with session_factory() as session:
            stored = await SQLAlchemyOrderRepository(session).get_by_id(order_id)
        assert stored.status == OrderStatus.CONFIRMED
        assert stored.version == 1


class TestReviews:
    async def test_review_after_delivery(self, session_factory, default_shipping, seeded_product):
        response = await place(session_factory, default_shipping, checkout_request())
        order_id = response.order.id

        async with session_factory() as session:
            await UpdateOrderStatusUseCase(**transition_deps(session)).execute(
                UpdateOrderStatusRequest(order_id=order_id, status=OrderStatus.DELIVERED)
            )

        def review_use_case(session) -> AddReviewUseCase:
            return AddReviewUseCase(
                review_repository=SQLAlchemyReviewRepository(session),
                order_repository=SQLAlchemyOrderRepository(session),
                product_repository=SQLAlchemyProductRepository(session),
                transaction=session,
                publisher=RecordingPublisher(),
            )

        request = AddReviewRequest(
            user_id="u-1",
            order_id=order_id,
            product_id="p-1",
            rating=4,
            title="Great crunch",
            comment="Fresh and not too salty.",
        )
        async with session_factory() as session:
            await review_use_case(session).execute(request)
        async with session_factory() as session:
            with pytest.raises(DuplicateEntityException):
                await review_use_case(session).execute(request)

        async with session_factory() as session:
            product = await SQLAlchemyProductRepository(session).get_by_id("p-1")
            reviews, total = await SQLAlchemyReviewRepository(session).list_for_product("p-1")
        assert product.review_count == 1
        assert product.rating == pytest.approx(4.0)
        assert total == 1
        assert reviews[0].title == "Great crunch"

    async def test_unique_review_constraint(self, session_factory, seeded_product):
        def review(review_id: str) -> Review:
            return Review(
                id=review_id,
                product_id="p-1",
                user_id="u-1",
                order_id="o-1",
                rating=5,
                title="Lovely snack",
                comment="Would buy this again.",
            )

        async with session_factory() as session:
            repo = SQLAlchemyReviewRepository(session)
            await repo.add(review("r-1"))
            with pytest.raises(DuplicateEntityException):
                await repo.add(review("r-2"))
            await session.commit()


class TestShippingSettings:
    async def test_seeded_from_defaults_then_updated(self, session_factory, default_shipping):
        async with session_factory() as session:
            repo = SQLAlchemyStoreSettingsRepository(session, defaults=default_shipping)
            assert await GetShippingSettingsUseCase(repo, session).execute() == default_shipping

        async with session_factory() as session:
            repo = SQLAlchemyStoreSettingsRepository(session, defaults=default_shipping)
            await UpdateShippingSettingsUseCase(repo, session).execute(Decimal("59"), Decimal("799"), "admin-1")

        async with session_factory() as session:
            repo = SQLAlchemyStoreSettingsRepository(session, defaults=default_shipping)
            config = await repo.get_shipping_config()

        assert config.flat_fee == Decimal("59.00")
        assert config.free_shipping_threshold == Decimal("799.00")
