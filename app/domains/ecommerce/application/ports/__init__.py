"""
Ecommerce Application Ports

Interface definitions (ports) for the Ecommerce domain.
Uses Protocol for structural typing.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Protocol, runtime_checkable

from app.domains.ecommerce.domain.entities import Cart, Category, Coupon, Order, OrderItem, Product, Review
from app.domains.ecommerce.domain.events import NotificationRequested
from app.domains.ecommerce.domain.value_objects import OrderStatus, PaymentStatus, ShippingConfig


@dataclass
class ProductQuery:
    """Filters, sorting and paging for catalog listings."""

    category: str | None = None
    featured: bool | None = None
    search: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    in_stock: bool | None = None
    include_inactive: bool = False
    sort: str = "newest"
    limit: int = 12
    offset: int = 0


@runtime_checkable
class ITransaction(Protocol):
    """
    Unit of work boundary shared by the repositories of one request.

    ``AsyncSession`` satisfies this protocol.
    """

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...


@runtime_checkable
class IProductRepository(Protocol):
    """
    Interface for product repository.

    Stock mutations are single conditional statements so concurrent
    checkouts cannot oversell a size.
    """

    async def get_by_id(self, product_id: str) -> Product | None:
        """Get product by ID"""
        ...

    async def get_many(self, product_ids: list[str]) -> dict[str, Product]:
        """Get products by ID, keyed by ID"""
        ...

    async def search(self, query: ProductQuery) -> tuple[list[Product], int]:
        """List products matching the query with the total match count"""
        ...

    async def add(self, product: Product) -> Product:
        """Insert a new product with its sizes"""
        ...

    async def update(self, product: Product) -> Product:
        """Replace a product's fields and sizes; raises ConcurrencyException when ``product.version`` is stale"""
        ...

    async def deactivate(self, product_id: str) -> bool:
        """Hide a product; False when it does not exist"""
        ...

    async def decrement_stock(self, product_id: str, size: str, quantity: int) -> bool:
        """Remove units only if the size holds at least ``quantity``; False otherwise"""
        ...

    async def restock(self, product_id: str, size: str, quantity: int) -> bool:
        """Return units to a size; False for an unknown size"""
        ...

    async def set_size_stock(self, product_id: str, size: str, stock: int) -> bool:
        """Set a size's stock to an absolute value; False for an unknown size"""
        ...

    async def add_rating(self, product_id: str, rating: int) -> bool:
        """Fold a rating into the running average atomically"""
        ...

    async def refresh_rating(self, product_id: str) -> bool:
        """Recompute rating and review count from the product's active reviews"""
        ...


@runtime_checkable
class IOrderRepository(Protocol):
    """
    Interface for order repository.

    Defines the contract for order data access.
    """

    async def get_by_id(self, order_id: str) -> Order | None:
        """Get order by ID"""
        ...

    async def get_by_order_number(self, order_number: str) -> Order | None:
        """Get order by its human-readable number"""
        ...

    async def list_for_user(
        self, user_id: str, status: OrderStatus | None = None, limit: int = 10, offset: int = 0
    ) -> tuple[list[Order], int]:
        """Customer's orders, newest first, with total count"""
        ...

    async def list_all(
        self,
        status: OrderStatus | None = None,
        payment_status: PaymentStatus | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Order], int]:
        """All orders for administration, newest first, with total count"""
        ...

    async def count_for_user(self, user_id: str) -> int:
        """Number of orders the customer has placed"""
        ...

    async def allocate_order_number(self, now: datetime, prefix: str) -> str:
        """Atomically take the next order number for the day of ``now``"""
        ...

    async def add(self, order: Order) -> Order:
        """Insert a new order; raises DuplicateEntityException on a taken order number"""
        ...

    async def update(self, order: Order) -> Order:
        """Persist a transitioned order; raises ConcurrencyException if it changed meanwhile"""
        ...


@runtime_checkable
class ICouponRepository(Protocol):
    """Interface for coupon repository."""

    async def get_by_id(self, coupon_id: str) -> Coupon | None:
        ...

    async def get_by_code(self, code: str) -> Coupon | None:
        """Get coupon by code (case-insensitive)"""
        ...

    async def list_active(self, now: datetime) -> list[Coupon]:
        """Active coupons inside their validity window"""
        ...

    async def list_all(self, limit: int = 50, offset: int = 0) -> tuple[list[Coupon], int]:
        ...

    async def add(self, coupon: Coupon) -> Coupon:
        """Insert a coupon; raises DuplicateEntityException on a taken code"""
        ...

    async def update(self, coupon: Coupon) -> Coupon:
        ...

    async def redeem(self, code: str) -> bool:
        """Count one use only while under the usage limit; False when the limit is reached"""
        ...


@runtime_checkable
class IReviewRepository(Protocol):
    """Interface for review repository."""

    async def add(self, review: Review) -> Review:
        """Insert a review; raises DuplicateEntityException for a repeated review"""
        ...

    async def exists(self, user_id: str, product_id: str, order_id: str) -> bool:
        ...

    async def list_for_product(self, product_id: str, limit: int = 10, offset: int = 0) -> tuple[list[Review], int]:
        ...

    async def get_by_id(self, review_id: str) -> Review | None:
        ...

    async def update(self, review: Review) -> Review:
        """Write rating, title, comment and visibility"""
        ...

    async def list_for_user(self, user_id: str, limit: int = 10, offset: int = 0) -> tuple[list[Review], int]:
        """Reviewer's own reviews, hidden ones included, newest first"""
        ...

    async def list_all(
        self, is_active: bool | None = None, limit: int = 10, offset: int = 0
    ) -> tuple[list[Review], int]:
        """All reviews for moderation, newest first"""
        ...


@runtime_checkable
class ICategoryRepository(Protocol):
    """Interface for category repository."""

    async def get_by_id(self, category_id: str) -> Category | None:
        ...

    async def list_all(self, include_inactive: bool = False) -> list[Category]:
        """Active categories by name, or every category newest first"""
        ...

    async def add(self, category: Category) -> Category:
        """Insert a category; raises DuplicateEntityException for a taken name or slug"""
        ...

    async def update(self, category: Category) -> Category:
        """Write a category's fields; raises DuplicateEntityException for a taken name or slug"""
        ...

    async def delete(self, category_id: str) -> bool:
        """Remove a category; False when it does not exist"""
        ...


@dataclass
class StockLevel:
    """Total units across all sizes of a product."""

    product_id: str
    name: str
    category: str
    total_stock: int


@dataclass
class PaymentStatusTotals:
    """Order count and value for one payment status."""

    status: PaymentStatus
    count: int
    total: Decimal


@runtime_checkable
class IAnalyticsRepository(Protocol):
    """Read-only aggregates over orders and the catalog for the admin dashboard."""

    async def count_products(self) -> int:
        ...

    async def count_customers(self) -> int:
        """Distinct customers that have placed an order"""
        ...

    async def count_orders(self, since: datetime | None = None) -> int:
        ...

    async def delivered_revenue(self, since: datetime | None = None) -> Decimal:
        """Sum of totals of delivered orders"""
        ...

    async def delivered_order_totals(self, since: datetime) -> list[tuple[datetime, Decimal]]:
        """``(created_at, total)`` of delivered orders placed since ``since``"""
        ...

    async def sold_items(self, since: datetime | None = None) -> list[OrderItem]:
        """Line items of every order that was not cancelled"""
        ...

    async def payment_status_totals(self, since: datetime) -> list[PaymentStatusTotals]:
        ...

    async def low_stock(self, threshold: int, limit: int) -> list[StockLevel]:
        """Active products with some stock but fewer than ``threshold`` units, lowest first"""
        ...

    async def out_of_stock(self, limit: int) -> list[StockLevel]:
        """Active products with no units in any size"""
        ...


@runtime_checkable
class IStoreSettingsRepository(Protocol):
    """Interface for the persisted store settings."""

    async def get_shipping_config(self) -> ShippingConfig:
        """Current shipping rule, seeded from defaults on first read"""
        ...

    async def update_shipping_config(self, config: ShippingConfig, updated_by: str | None = None) -> ShippingConfig:
        ...


@runtime_checkable
class ICartRepository(Protocol):
    """Interface for the per-user cart store."""

    async def get(self, user_id: str) -> Cart:
        """User's cart, empty when none is stored"""
        ...

    async def save(self, cart: Cart) -> None:
        ...

    async def delete(self, user_id: str) -> None:
        ...


@runtime_checkable
class INotificationService(Protocol):
    """Sends templated notifications. Implementations may raise; callers log failures."""

    async def send(self, notification: NotificationRequested) -> None:
        ...


__all__ = [
    "ProductQuery",
    "ITransaction",
    "IProductRepository",
    "IOrderRepository",
    "ICouponRepository",
    "IReviewRepository",
    "ICategoryRepository",
    "IAnalyticsRepository",
    "StockLevel",
    "PaymentStatusTotals",
    "IStoreSettingsRepository",
    "ICartRepository",
    "INotificationService",
]
