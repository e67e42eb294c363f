"""
Cart Service

Application service for the per-user shopping cart. Lines snapshot the
product's name, price, image and category when they are added.
"""

import logging
from dataclasses import dataclass

from app.core.domain import EntityNotFoundException, InsufficientStockException, ValidationException
from app.domains.ecommerce.application.ports import ICartRepository, IProductRepository
from app.domains.ecommerce.domain.entities import Cart, CartItem, Product
from app.domains.ecommerce.domain.services import StockLedger

logger = logging.getLogger(__name__)


@dataclass
class CartLineInput:
    """A product size and quantity supplied by the client."""

    product_id: str
    size: str
    quantity: int


class CartService:
    """
    Cart operations for one store.

    Stock is checked when lines are added or changed so the customer sees
    shortages early; checkout still makes the authoritative decrement.
    """

    def __init__(self, cart_repository: ICartRepository, product_repository: IProductRepository):
        self.cart_repository = cart_repository
        self.product_repository = product_repository
        self.stock_ledger = StockLedger()

    async def get_cart(self, user_id: str) -> Cart:
        return await self.cart_repository.get(user_id)

    async def add_item(self, user_id: str, product_id: str, size: str, quantity: int) -> Cart:
        """Add a line, merging with an existing line for the same product size."""
        if quantity < 1:
            raise ValidationException("Quantity must be at least 1", field="quantity")

        cart = await self.cart_repository.get(user_id)
        product = await self._get_product(product_id)
        existing = cart.find(product_id, size)
        wanted = quantity + (existing.quantity if existing else 0)
        cart.add(self._snapshot(product, size, quantity, wanted))

        await self.cart_repository.save(cart)
        logger.debug(f"Cart {user_id}: added {quantity} x {product_id}/{size}")
        return cart

    async def update_quantity(self, user_id: str, product_id: str, size: str, quantity: int) -> Cart:
        """Set a line's quantity; zero or less removes the line."""
        cart = await self.cart_repository.get(user_id)
        if cart.find(product_id, size) is None:
            raise EntityNotFoundException("CartItem", f"{product_id}:{size}", "Item not found in cart")

        if quantity > 0:
            product = await self._get_product(product_id)
            self._ensure_available(product, size, quantity)
        cart.set_quantity(product_id, size, quantity)

        await self.cart_repository.save(cart)
        return cart

    async def remove_item(self, user_id: str, product_id: str, size: str) -> Cart:
        cart = await self.cart_repository.get(user_id)
        if not cart.remove(product_id, size):
            raise EntityNotFoundException("CartItem", f"{product_id}:{size}", "Item not found in cart")
        await self.cart_repository.save(cart)
        return cart

    async def clear(self, user_id: str) -> Cart:
        await self.cart_repository.delete(user_id)
        return Cart(user_id=user_id)

    async def sync(self, user_id: str, lines: list[CartLineInput]) -> Cart:
        """
        Replace the cart with client-side lines, e.g. a guest cart after login.

        Lines are re-snapshotted from the catalog; unknown or inactive
        products and unknown sizes are dropped, quantities above the
        available stock are reduced to it.
        """
        products = await self.product_repository.get_many(list({line.product_id for line in lines}))
        cart = Cart(user_id=user_id)

        for line in lines:
            product = products.get(line.product_id)
            size = product.get_size(line.size) if product and product.is_active else None
            existing = cart.find(line.product_id, line.size)
            already = existing.quantity if existing else 0
            quantity = min(line.quantity, size.stock - already) if size else 0
            if quantity < 1:
                logger.info(f"Cart sync dropped {line.product_id}/{line.size} for user {user_id}")
                continue
            cart.add(self._snapshot(product, line.size, quantity, already + quantity))

        await self.cart_repository.save(cart)
        return cart

    async def _get_product(self, product_id: str) -> Product:
        product = await self.product_repository.get_by_id(product_id)
        if product is None or not product.is_active:
            raise EntityNotFoundException("Product", product_id)
        return product

    def _ensure_available(self, product: Product, size: str, quantity: int) -> None:
        product_size = product.get_size(size)
        if product_size is None:
            raise ValidationException(f"Size '{size}' is not available for {product.name}", field="size")
        if not self.stock_ledger.is_available(product, size, quantity):
            raise InsufficientStockException(product.id, size, quantity, product_size.stock)

    def _snapshot(self, product: Product, size: str, quantity: int, total_wanted: int) -> CartItem:
        self._ensure_available(product, size, total_wanted)
        return CartItem(
            product_id=product.id,
            size=size,
            quantity=quantity,
            name=product.name,
            price=product.get_size(size).price,
            image=product.image,
            category=product.category,
        )


__all__ = ["CartService", "CartLineInput"]
