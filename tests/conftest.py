"""
Shared pytest fixtures for all tests.

Provides entity factories, mocked repositories and a recording event
publisher for use case tests.
"""

import os
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

# Ensure test environment before any app module reads settings
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("DB_PASSWORD", "test")

from app.core.domain import DomainEvent, DomainEventPublisher  # noqa: E402
from app.domains.ecommerce.domain.entities import (  # noqa: E402
    Coupon,
    Order,
    OrderItem,
    Product,
    ProductSize,
)
from app.domains.ecommerce.domain.value_objects import (  # noqa: E402
    DiscountType,
    OrderStatus,
    ShippingAddress,
    ShippingConfig,
)

NOW = datetime(2025, 4, 17, 10, 30, tzinfo=UTC)


# ============================================================================
# ENTITY FACTORIES
# ============================================================================


def make_product(
    product_id: str = "p-1",
    name: str = "Masala Makhana",
    category: str = "snacks",
    sizes: list[ProductSize] | None = None,
    **kwargs,
) -> Product:
    """Product with two sizes unless told otherwise."""
    if sizes is None:
        sizes = [
            ProductSize(label="100g", price=Decimal("120.00"), stock=10),
            ProductSize(label="250g", price=Decimal("280.00"), stock=3),
        ]
    return Product(id=product_id, name=name, category=category, sizes=sizes, image="makhana.jpg", **kwargs)


def make_coupon(code: str = "SAVE10", **kwargs) -> Coupon:
    """Active 10% coupon valid through 2025."""
    defaults = {
        "id": f"c-{code.lower()}",
        "discount": Decimal("10"),
        "type": DiscountType.PERCENTAGE,
        "valid_from": datetime(2025, 1, 1, tzinfo=UTC),
        "valid_until": datetime(2025, 12, 31, tzinfo=UTC),
    }
    defaults.update(kwargs)
    return Coupon(code=code, **defaults)


def make_address() -> ShippingAddress:
    return ShippingAddress(
        first_name="Asha",
        last_name="Rao",
        address="12 MG Road",
        city="Bengaluru",
        state="Karnataka",
        pincode="560001",
        phone="9876543210",
    )


def make_order(
    order_id: str = "o-1",
    user_id: str = "u-1",
    status: OrderStatus = OrderStatus.PENDING,
    **kwargs,
) -> Order:
    """Two-line order of 520.00 with free shipping."""
    items = kwargs.pop(
        "items",
        [
            OrderItem(product_id="p-1", name="Masala Makhana", size="100g", price=Decimal("120.00"), quantity=2),
            OrderItem(product_id="p-2", name="Ragi Chips", size="200g", price=Decimal("280.00"), quantity=1),
        ],
    )
    defaults = {
        "customer_email": "asha@example.com",
        "order_number": "VB202504170001",
        "shipping_address": make_address(),
        "subtotal": Decimal("520.00"),
        "shipping_cost": Decimal("0.00"),
        "discount": Decimal("0.00"),
        "total": Decimal("520.00"),
        "created_at": NOW,
        "updated_at": NOW,
    }
    defaults.update(kwargs)
    return Order(id=order_id, user_id=user_id, status=status, items=items, **defaults)


@pytest.fixture
def product() -> Product:
    return make_product()


@pytest.fixture
def coupon() -> Coupon:
    return make_coupon()


@pytest.fixture
def order() -> Order:
    return make_order()


@pytest.fixture
def shipping_config() -> ShippingConfig:
    return ShippingConfig(flat_fee=Decimal("49"), free_shipping_threshold=Decimal("500"))


# ============================================================================
# MOCKED COLLABORATORS
# ============================================================================


class RecordingPublisher(DomainEventPublisher):
    """Publisher that keeps every published event."""

    def __init__(self) -> None:
        super().__init__()
        self.published: list[DomainEvent] = []

    async def publish(self, event: DomainEvent) -> None:
        self.published.append(event)
        await super().publish(event)


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def mock_transaction():
    """Unit of work with commit and rollback."""
    transaction = AsyncMock()
    transaction.commit = AsyncMock()
    transaction.rollback = AsyncMock()
    return transaction


@pytest.fixture
def mock_product_repository(product):
    repo = AsyncMock()
    repo.get_by_id.return_value = product
    repo.get_many.return_value = {product.id: product}
    repo.decrement_stock.return_value = True
    repo.restock.return_value = True
    repo.add_rating.return_value = True
    return repo


@pytest.fixture
def mock_order_repository():
    repo = AsyncMock()
    repo.count_for_user.return_value = 0
    repo.allocate_order_number.return_value = "VB202504170001"
    repo.add.side_effect = lambda order: order
    repo.update.side_effect = lambda order: order
    return repo


@pytest.fixture
def mock_coupon_repository(coupon):
    repo = AsyncMock()
    repo.get_by_code.return_value = coupon
    repo.redeem.return_value = True
    return repo


@pytest.fixture
def mock_settings_repository(shipping_config):
    repo = AsyncMock()
    repo.get_shipping_config.return_value = shipping_config
    return repo
