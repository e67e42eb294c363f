"""
Unit tests for categories, reporting windows and sales aggregation.
"""

from datetime import UTC, date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.core.domain import ValidationException
from app.domains.ecommerce.domain.entities import Category, OrderItem
from app.domains.ecommerce.domain.services import SalesReportService
from app.domains.ecommerce.domain.value_objects import ReportPeriod
from tests.conftest import NOW


def item(product_id: str, quantity: int, price: str = "100.00", name: str | None = None) -> OrderItem:
    return OrderItem(
        product_id=product_id,
        name=name or f"Product {product_id}",
        size="100g",
        price=Decimal(price),
        quantity=quantity,
    )


class TestCategory:
    @pytest.mark.parametrize(
        "name,slug",
        [
            ("Snacks", "snacks"),
            ("Roasted & Baked", "roasted-baked"),
            ("  Gift Boxes 2025 ", "gift-boxes-2025"),
        ],
    )
    def test_slug_follows_name(self, name, slug):
        assert Category(id="cat-1", name=name).slug == slug

    def test_supplied_slug_is_ignored(self):
        assert Category(id="cat-1", name="Healthy Bites", slug="other").slug == "healthy-bites"

    @pytest.mark.parametrize("name", ["a", "x" * 51, "!!"])
    def test_invalid_names(self, name):
        with pytest.raises(ValidationException) as exc_info:
            Category(id="cat-1", name=name)

        assert exc_info.value.field == "name"

    def test_long_description(self):
        with pytest.raises(ValidationException):
            Category(id="cat-1", name="Snacks", description="x" * 301)

    def test_image_must_be_url(self):
        with pytest.raises(ValidationException):
            Category(id="cat-1", name="Snacks", image="snacks.jpg")

        assert Category(id="cat-1", name="Snacks", image="https://cdn.example.com/s.jpg").image


class TestReportPeriod:
    def test_rolling_windows(self):
        assert ReportPeriod.WEEK.start(NOW) == NOW - timedelta(days=7)
        assert ReportPeriod.LAST_30_DAYS.start(NOW) == NOW - timedelta(days=30)

    def test_calendar_windows(self):
        assert ReportPeriod.MONTH.start(NOW) == datetime(2025, 4, 1, tzinfo=UTC)
        assert ReportPeriod.YEAR.start(NOW) == datetime(2025, 1, 1, tzinfo=UTC)

    def test_query_values(self):
        assert ReportPeriod("30d") is ReportPeriod.LAST_30_DAYS


class TestBestSellers:
    def test_ranks_by_units_then_revenue(self):
        report = SalesReportService()

        ranked = report.best_sellers(
            [
                item("p-1", 2, "100.00"),
                item("p-2", 3, "50.00"),
                item("p-3", 3, "80.00"),
                item("p-1", 2, "100.00"),
            ]
        )

        assert [(s.product_id, s.quantity_sold) for s in ranked] == [("p-1", 4), ("p-3", 3), ("p-2", 3)]
        assert ranked[0].revenue == Decimal("400.00")

    def test_keeps_first_captured_name(self):
        ranked = SalesReportService().best_sellers(
            [item("p-1", 1, name="Masala Makhana"), item("p-1", 1, name="Makhana (renamed)")]
        )

        assert ranked[0].name == "Masala Makhana"

    def test_limit(self):
        items = [item(f"p-{n}", n) for n in range(1, 8)]

        assert len(SalesReportService().best_sellers(items, limit=5)) == 5
        assert SalesReportService().best_sellers([]) == []


class TestDailySales:
    def test_groups_by_utc_day(self):
        late = datetime(2025, 4, 16, 23, 0, tzinfo=UTC)
        ist = datetime(2025, 4, 17, 7, 30, tzinfo=timezone(timedelta(hours=5, minutes=30)))

        series = SalesReportService().daily_sales(
            [(NOW, Decimal("520.00")), (late, Decimal("100.00")), (ist, Decimal("80.50"))]
        )

        assert [(d.day, d.total_sales, d.order_count) for d in series] == [
            (date(2025, 4, 16), Decimal("100.00"), 1),
            (date(2025, 4, 17), Decimal("600.50"), 2),
        ]

    def test_empty(self):
        assert SalesReportService().daily_sales([]) == []
