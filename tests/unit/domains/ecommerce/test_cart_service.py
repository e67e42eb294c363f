"""
Unit tests for CartService.
"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from app.core.domain import EntityNotFoundException, InsufficientStockException, ValidationException
from app.domains.ecommerce.application.use_cases import CartLineInput, CartService
from app.domains.ecommerce.domain.entities import Cart, CartItem
from tests.conftest import make_product


@pytest.fixture
def stored_cart() -> Cart:
    return Cart(user_id="u-1")


@pytest.fixture
def mock_cart_repository(stored_cart):
    repo = AsyncMock()
    repo.get.return_value = stored_cart
    return repo


@pytest.fixture
def service(mock_cart_repository, mock_product_repository) -> CartService:
    return CartService(cart_repository=mock_cart_repository, product_repository=mock_product_repository)


class TestCartService:
    @pytest.mark.asyncio
    async def test_add_item_snapshots_product(self, service, mock_cart_repository):
        """Test line carries the current name and price."""
        cart = await service.add_item("u-1", "p-1", "250g", 2)

        line = cart.items[0]
        assert line.name == "Masala Makhana"
        assert line.price == Decimal("280.00")
        assert line.category == "snacks"
        assert cart.subtotal == Decimal("560.00")
        mock_cart_repository.save.assert_awaited_once_with(cart)

    @pytest.mark.asyncio
    async def test_add_item_merges_and_checks_combined_stock(self, service, stored_cart):
        """Test a second add is checked against the quantity already in the cart."""
        stored_cart.add(CartItem(product_id="p-1", size="250g", quantity=2, price=Decimal("280")))

        with pytest.raises(InsufficientStockException):
            await service.add_item("u-1", "p-1", "250g", 2)

        cart = await service.add_item("u-1", "p-1", "250g", 1)
        assert cart.items[0].quantity == 3

    @pytest.mark.asyncio
    async def test_add_item_rejects_zero_quantity(self, service):
        with pytest.raises(ValidationException):
            await service.add_item("u-1", "p-1", "100g", 0)

    @pytest.mark.asyncio
    async def test_add_unknown_size(self, service):
        with pytest.raises(ValidationException, match="Size '1kg'"):
            await service.add_item("u-1", "p-1", "1kg", 1)

    @pytest.mark.asyncio
    async def test_add_inactive_product(self, service, product):
        product.deactivate()

        with pytest.raises(EntityNotFoundException):
            await service.add_item("u-1", "p-1", "100g", 1)

    @pytest.mark.asyncio
    async def test_update_quantity_zero_removes(self, service, stored_cart, mock_product_repository):
        stored_cart.add(CartItem(product_id="p-1", size="100g", quantity=2))

        cart = await service.update_quantity("u-1", "p-1", "100g", 0)

        assert cart.items == []
        mock_product_repository.get_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_quantity_above_stock(self, service, stored_cart):
        stored_cart.add(CartItem(product_id="p-1", size="100g", quantity=2))

        with pytest.raises(InsufficientStockException):
            await service.update_quantity("u-1", "p-1", "100g", 11)

    @pytest.mark.asyncio
    async def test_update_missing_line(self, service):
        with pytest.raises(EntityNotFoundException, match="Item not found in cart"):
            await service.update_quantity("u-1", "p-1", "100g", 1)

    @pytest.mark.asyncio
    async def test_remove_item(self, service, stored_cart, mock_cart_repository):
        stored_cart.add(CartItem(product_id="p-1", size="100g", quantity=2))

        cart = await service.remove_item("u-1", "p-1", "100g")

        assert cart.items == []
        mock_cart_repository.save.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_clear(self, service, mock_cart_repository):
        cart = await service.clear("u-1")

        assert cart.items == []
        mock_cart_repository.delete.assert_awaited_once_with("u-1")

    @pytest.mark.asyncio
    async def test_sync_drops_unknown_and_caps_to_stock(self, service, mock_product_repository):
        """Test guest cart lines are re-validated against the catalog."""
        mock_product_repository.get_many.return_value = {
            "p-1": make_product(),
            "p-3": make_product(product_id="p-3", is_active=False),
        }

        cart = await service.sync(
            "u-1",
            [
                CartLineInput(product_id="p-1", size="250g", quantity=5),
                CartLineInput(product_id="p-1", size="1kg", quantity=1),
                CartLineInput(product_id="p-2", size="100g", quantity=1),
                CartLineInput(product_id="p-3", size="100g", quantity=1),
                CartLineInput(product_id="p-1", size="100g", quantity=1),
            ],
        )

        assert [(line.product_id, line.size, line.quantity) for line in cart.items] == [
            ("p-1", "250g", 3),
            ("p-1", "100g", 1),
        ]

    @pytest.mark.asyncio
    async def test_sync_repeated_lines_share_stock(self, service):
        cart = await service.sync(
            "u-1",
            [
                CartLineInput(product_id="p-1", size="250g", quantity=2),
                CartLineInput(product_id="p-1", size="250g", quantity=2),
            ],
        )

        assert cart.items[0].quantity == 3
