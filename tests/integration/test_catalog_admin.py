"""
Integration tests for catalog administration, review moderation and the
dashboard read model on SQLite.
"""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from app.core.domain import ConcurrencyException, DuplicateEntityException, EntityNotFoundException
from app.domains.ecommerce.application.use_cases import (
    AddReviewRequest,
    AddReviewUseCase,
    CategoryChanges,
    CategoryInput,
    CouponInput,
    CreateCategoryUseCase,
    DeactivateProductUseCase,
    DeleteCategoryUseCase,
    GetDashboardUseCase,
    GetSalesAnalyticsUseCase,
    ListAllReviewsUseCase,
    ListCategoriesUseCase,
    ListUserReviewsUseCase,
    ProcessCancelRequestRequest,
    ProcessCancelRequestUseCase,
    ProductInput,
    ProductSizeInput,
    RequestCancellationRequest,
    RequestCancellationUseCase,
    SetReviewStatusUseCase,
    UpdateCategoryUseCase,
    UpdateCouponUseCase,
    UpdateOrderStatusRequest,
    UpdateOrderStatusUseCase,
    UpdateProductUseCase,
    UpdateReviewRequest,
    UpdateReviewUseCase,
)
from app.domains.ecommerce.domain.entities import ProductSize
from app.domains.ecommerce.domain.value_objects import CancelReason, DiscountType, OrderStatus, ReportPeriod
from app.domains.ecommerce.infrastructure.repositories import (
    SQLAlchemyAnalyticsRepository,
    SQLAlchemyCategoryRepository,
    SQLAlchemyCouponRepository,
    SQLAlchemyOrderRepository,
    SQLAlchemyProductRepository,
    SQLAlchemyReviewRepository,
)
from tests.conftest import NOW, RecordingPublisher, make_coupon, make_product
from tests.integration.test_checkout_flow import checkout_request, place, stock_of, transition_deps

pytestmark = pytest.mark.integration


def edit_input(version: int | None, **kwargs) -> ProductInput:
    defaults = {
        "name": "Masala Makhana",
        "description": "Roasted fox nuts",
        "category": "snacks",
        "image": "makhana.jpg",
        "sizes": [
            ProductSizeInput(label="250g", price=Decimal("300.00"), stock=15),
            ProductSizeInput(label="500g", price=Decimal("520.00"), stock=4),
        ],
        "version": version,
    }
    defaults.update(kwargs)
    return ProductInput(**defaults)


async def deliver(session_factory, order_id: str) -> None:
    async with session_factory() as session:
        await UpdateOrderStatusUseCase(**transition_deps(session)).execute(
            UpdateOrderStatusRequest(order_id=order_id, status=OrderStatus.DELIVERED)
        )


class TestProductEdits:
    async def test_stale_copy_cannot_overwrite_stock(self, session_factory, seeded_product):
        """A product read before a sale cannot be written back over it."""
        async with session_factory() as session:
            stale = await SQLAlchemyProductRepository(session).get_by_id("p-1")
            await session.commit()

        async with session_factory() as session:
            assert await SQLAlchemyProductRepository(session).decrement_stock("p-1", "250g", 5) is True
            await session.commit()

        stale.name = "Masala Makhana (new)"
        async with session_factory() as session:
            with pytest.raises(ConcurrencyException):
                await SQLAlchemyProductRepository(session).update(stale)
            await session.rollback()

        async with session_factory() as session:
            with pytest.raises(ConcurrencyException):
                await UpdateProductUseCase(SQLAlchemyProductRepository(session), session).execute(
                    "p-1", edit_input(version=stale.version)
                )

        assert await stock_of(session_factory, "250g") == 15
        async with session_factory() as session:
            stored = await SQLAlchemyProductRepository(session).get_by_id("p-1")
        assert stored.name == "Masala Makhana"

    async def test_deactivate_keeps_stock_and_rating(self, session_factory, seeded_product):
        async with session_factory() as session:
            assert await SQLAlchemyProductRepository(session).add_rating("p-1", 4) is True
            assert await SQLAlchemyProductRepository(session).decrement_stock("p-1", "250g", 5) is True
            await session.commit()

        async with session_factory() as session:
            product = await DeactivateProductUseCase(SQLAlchemyProductRepository(session), session).execute("p-1")

        assert product.is_active is False
        assert product.get_size("250g").stock == 15
        assert product.review_count == 1
        assert product.rating == pytest.approx(4.0)

    async def test_current_version_replaces_sizes(self, session_factory, seeded_product):
        async with session_factory() as session:
            current = await SQLAlchemyProductRepository(session).get_by_id("p-1")
            await session.commit()

        async with session_factory() as session:
            updated = await UpdateProductUseCase(SQLAlchemyProductRepository(session), session).execute(
                "p-1", edit_input(version=current.version)
            )
        assert updated.version == current.version + 1

        async with session_factory() as session:
            stored = await SQLAlchemyProductRepository(session).get_by_id("p-1")
        assert [(s.label, s.price, s.stock) for s in stored.sizes] == [
            ("250g", Decimal("300.00"), 15),
            ("500g", Decimal("520.00"), 4),
        ]
        assert stored.version == current.version + 1


class TestCouponEdits:
    async def test_renaming_to_taken_code_is_duplicate(self, session_factory):
        async with session_factory() as session:
            repo = SQLAlchemyCouponRepository(session)
            await repo.add(make_coupon(code="AAA"))
            await repo.add(make_coupon(code="BBB"))
            await session.commit()

        data = CouponInput(
            code="AAA",
            discount=Decimal("15"),
            type=DiscountType.PERCENTAGE,
            valid_from=datetime(2025, 1, 1, tzinfo=UTC),
            valid_until=datetime(2025, 12, 31, tzinfo=UTC),
        )
        async with session_factory() as session:
            with pytest.raises(DuplicateEntityException) as exc_info:
                await UpdateCouponUseCase(SQLAlchemyCouponRepository(session), session).execute("c-bbb", data)

        assert exc_info.value.field == "code"
        async with session_factory() as session:
            stored = await SQLAlchemyCouponRepository(session).get_by_id("c-bbb")
        assert stored.code == "BBB"
        assert stored.discount == Decimal("10")


class TestCategories:
    async def test_lifecycle(self, session_factory):
        async with session_factory() as session:
            snacks = await CreateCategoryUseCase(SQLAlchemyCategoryRepository(session), session).execute(
                CategoryInput(name="Snacks", description="Crunchy things")
            )
        async with session_factory() as session:
            await CreateCategoryUseCase(SQLAlchemyCategoryRepository(session), session).execute(
                CategoryInput(name="Healthy Bites")
            )

        async with session_factory() as session:
            with pytest.raises(DuplicateEntityException):
                await CreateCategoryUseCase(SQLAlchemyCategoryRepository(session), session).execute(
                    CategoryInput(name="Snacks")
                )

        async with session_factory() as session:
            renamed = await UpdateCategoryUseCase(SQLAlchemyCategoryRepository(session), session).execute(
                snacks.id, CategoryChanges(name="Savoury Snacks", is_active=False)
            )
        assert renamed.slug == "savoury-snacks"

        async with session_factory() as session:
            active = await ListCategoriesUseCase(SQLAlchemyCategoryRepository(session)).execute()
            every = await ListCategoriesUseCase(SQLAlchemyCategoryRepository(session)).execute(include_inactive=True)
        assert [c.name for c in active] == ["Healthy Bites"]
        assert {c.slug for c in every} == {"savoury-snacks", "healthy-bites"}
        assert next(c for c in every if c.id == snacks.id).description == "Crunchy things"

        async with session_factory() as session:
            await DeleteCategoryUseCase(SQLAlchemyCategoryRepository(session), session).execute(snacks.id)
        async with session_factory() as session:
            with pytest.raises(EntityNotFoundException):
                await DeleteCategoryUseCase(SQLAlchemyCategoryRepository(session), session).execute(snacks.id)


class TestReviewManagement:
    async def test_edit_and_hide_recompute_rating(self, session_factory, default_shipping, seeded_product):
        response = await place(session_factory, default_shipping, checkout_request())
        await deliver(session_factory, response.order.id)

        async with session_factory() as session:
            review = await AddReviewUseCase(
                review_repository=SQLAlchemyReviewRepository(session),
                order_repository=SQLAlchemyOrderRepository(session),
                product_repository=SQLAlchemyProductRepository(session),
                transaction=session,
                publisher=RecordingPublisher(),
            ).execute(
                AddReviewRequest(
                    user_id="u-1",
                    order_id=response.order.id,
                    product_id="p-1",
                    rating=4,
                    title="Great crunch",
                    comment="Fresh and not too salty.",
                )
            )

        def repos(session) -> tuple:
            return SQLAlchemyReviewRepository(session), SQLAlchemyProductRepository(session), session

        async with session_factory() as session:
            await UpdateReviewUseCase(*repos(session)).execute(
                UpdateReviewRequest(review_id=review.id, user_id="u-1", rating=2)
            )
        async with session_factory() as session:
            product = await SQLAlchemyProductRepository(session).get_by_id("p-1")
        assert (product.rating, product.review_count) == (pytest.approx(2.0), 1)

        async with session_factory() as session:
            await SetReviewStatusUseCase(*repos(session)).execute(review.id, is_active=False)
        async with session_factory() as session:
            product = await SQLAlchemyProductRepository(session).get_by_id("p-1")
            public, public_total = await SQLAlchemyReviewRepository(session).list_for_product("p-1")
            hidden = await ListAllReviewsUseCase(SQLAlchemyReviewRepository(session)).execute(is_active=False)
            mine = await ListUserReviewsUseCase(SQLAlchemyReviewRepository(session)).execute("u-1")
        assert (product.rating, product.review_count) == (pytest.approx(0.0), 0)
        assert public_total == 0
        assert [r.rating for r in hidden.reviews] == [2]
        assert mine.total == 1


class TestAnalytics:
    async def test_dashboard_and_sales(self, session_factory, default_shipping, seeded_product):
        async with session_factory() as session:
            await SQLAlchemyProductRepository(session).add(
                make_product("p-2", name="Ragi Chips", sizes=[ProductSize(label="200g", price=Decimal("90"), stock=0)])
            )
            await session.commit()

        delivered = await place(session_factory, default_shipping, checkout_request("u-1", quantity=2))
        await place(session_factory, default_shipping, checkout_request("u-2", quantity=1))
        cancelled = await place(session_factory, default_shipping, checkout_request("u-1", quantity=3))
        await deliver(session_factory, delivered.order.id)
        async with session_factory() as session:
            await RequestCancellationUseCase(**transition_deps(session)).execute(
                RequestCancellationRequest(order_id=cancelled.order.id, user_id="u-1", reason=CancelReason.CHANGED_MIND)
            )
        async with session_factory() as session:
            await ProcessCancelRequestUseCase(**transition_deps(session)).execute(
                ProcessCancelRequestRequest(order_id=cancelled.order.id, approved=True, processed_by="admin-1")
            )
        async with session_factory() as session:
            await SQLAlchemyProductRepository(session).set_size_stock("p-1", "250g", 5)
            await session.commit()

        async with session_factory() as session:
            analytics = SQLAlchemyAnalyticsRepository(session)
            dashboard = await GetDashboardUseCase(analytics, SQLAlchemyOrderRepository(session)).execute(now=NOW)
            sales = await GetSalesAnalyticsUseCase(analytics).execute(ReportPeriod.WEEK, now=NOW)

        stats = dashboard.stats
        assert (stats.total_products, stats.total_orders, stats.total_customers) == (2, 3, 2)
        assert stats.total_revenue == Decimal("560.00")
        assert stats.monthly_revenue == Decimal("560.00")
        assert len(dashboard.recent_orders) == 3
        assert [(p.product_id, p.quantity_sold) for p in dashboard.top_products] == [("p-1", 3)]
        assert [(s.product_id, s.total_stock) for s in dashboard.low_stock] == [("p-1", 6)]
        assert [s.product_id for s in dashboard.out_of_stock] == ["p-2"]

        assert [(d.day.isoformat(), d.total_sales, d.order_count) for d in sales.daily_sales] == [
            ("2025-04-17", Decimal("560.00"), 1)
        ]
        assert sum(p.count for p in sales.payment_status) == 3
