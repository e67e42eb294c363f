"""
Stock Ledger

In-memory rules for per-size inventory on a product. The repository
exposes the same rules as atomic conditional updates for concurrent use.
"""

from ..entities.product import Product


class StockLedger:
    """Domain service for product size stock."""

    def is_available(self, product: Product, size_label: str, quantity: int = 1) -> bool:
        """True when the size exists and holds at least ``quantity`` units (at least one)."""
        size = product.get_size(size_label)
        if size is None:
            return False
        return size.stock > 0 and size.stock >= quantity

    def decrement(self, product: Product, size_label: str, quantity: int) -> bool:
        """
        Remove units from a size, saturating at zero.

        Callers check availability first; an underflowing request is a
        domain error to report before calling this.

        Returns:
            False (and changes nothing) when the size does not exist
        """
        size = product.get_size(size_label)
        if size is None:
            return False
        size.stock = max(0, size.stock - quantity)
        product.refresh_stock_flag()
        product.touch()
        return True

    def restock(self, product: Product, size_label: str, quantity: int) -> bool:
        """Return units to a size. False for an unknown size."""
        size = product.get_size(size_label)
        if size is None:
            return False
        size.stock += max(0, quantity)
        product.refresh_stock_flag()
        product.touch()
        return True
