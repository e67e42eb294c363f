"""
Unit tests for per-size stock rules.
"""

from decimal import Decimal

import pytest

from app.domains.ecommerce.domain.entities import ProductSize
from app.domains.ecommerce.domain.services import StockLedger
from tests.conftest import make_product


@pytest.fixture
def ledger() -> StockLedger:
    return StockLedger()


class TestStockLedger:
    def test_is_available(self, ledger, product):
        assert ledger.is_available(product, "100g", 10) is True
        assert ledger.is_available(product, "100g", 11) is False
        assert ledger.is_available(product, "250g") is True

    def test_unknown_size_is_unavailable(self, ledger, product):
        assert ledger.is_available(product, "1kg") is False

    def test_empty_size_is_unavailable_even_for_zero(self, ledger):
        product = make_product(sizes=[ProductSize(label="100g", price=Decimal("10"), stock=0)])
        assert ledger.is_available(product, "100g", 0) is False

    def test_decrement(self, ledger, product):
        assert ledger.decrement(product, "250g", 2) is True
        assert product.get_size("250g").stock == 1
        assert product.in_stock is True

    def test_decrement_saturates_at_zero(self, ledger, product):
        ledger.decrement(product, "250g", 5)
        assert product.get_size("250g").stock == 0

    def test_decrement_unknown_size(self, ledger, product):
        assert ledger.decrement(product, "1kg", 1) is False
        assert product.total_stock == 13

    def test_in_stock_flag_follows_sizes(self, ledger, product):
        ledger.decrement(product, "100g", 10)
        ledger.decrement(product, "250g", 3)
        assert product.in_stock is False

        ledger.restock(product, "250g", 1)
        assert product.in_stock is True

    def test_restock_unknown_size(self, ledger, product):
        assert ledger.restock(product, "1kg", 1) is False

    def test_restock_ignores_negative_quantity(self, ledger, product):
        ledger.restock(product, "100g", -4)
        assert product.get_size("100g").stock == 10
