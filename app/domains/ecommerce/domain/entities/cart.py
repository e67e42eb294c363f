"""
Cart Entity

Per-user shopping cart. Lines snapshot product data when added; checkout
reads the cart only as a list of line items.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from app.core.domain import ValidationException, to_money, utc_now


@dataclass
class CartItem:
    """One product size in a cart."""

    product_id: str
    size: str
    quantity: int
    name: str = ""
    price: Decimal = Decimal("0")
    image: str = ""
    category: str = ""

    def __post_init__(self):
        self.price = to_money(self.price)
        if self.quantity < 1:
            raise ValidationException("Quantity must be at least 1", field="quantity")

    @property
    def line_total(self) -> Decimal:
        return to_money(self.price * self.quantity)

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "size": self.size,
            "quantity": self.quantity,
            "name": self.name,
            "price": str(self.price),
            "image": self.image,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        return cls(
            product_id=data["product_id"],
            size=data["size"],
            quantity=int(data["quantity"]),
            name=data.get("name", ""),
            price=Decimal(str(data.get("price", "0"))),
            image=data.get("image", ""),
            category=data.get("category", ""),
        )


@dataclass
class Cart:
    """A user's cart, keyed by user id."""

    user_id: str
    items: list[CartItem] = field(default_factory=list)
    updated_at: datetime = field(default_factory=utc_now)

    def find(self, product_id: str, size: str) -> CartItem | None:
        return next(
            (item for item in self.items if item.product_id == product_id and item.size == size),
            None,
        )

    def add(self, item: CartItem) -> None:
        """Add a line, merging quantities with an existing line of the same size."""
        existing = self.find(item.product_id, item.size)
        if existing is None:
            self.items.append(item)
        else:
            existing.quantity += item.quantity
            existing.price = item.price
        self.updated_at = utc_now()

    def set_quantity(self, product_id: str, size: str, quantity: int) -> bool:
        """Set a line's quantity; zero removes it. Returns False if the line is missing."""
        existing = self.find(product_id, size)
        if existing is None:
            return False
        if quantity <= 0:
            self.items.remove(existing)
        else:
            existing.quantity = quantity
        self.updated_at = utc_now()
        return True

    def remove(self, product_id: str, size: str) -> bool:
        return self.set_quantity(product_id, size, 0)

    def clear(self) -> None:
        self.items.clear()
        self.updated_at = utc_now()

    @property
    def subtotal(self) -> Decimal:
        return to_money(sum((item.line_total for item in self.items), Decimal("0")))

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "items": [item.to_dict() for item in self.items],
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Cart":
        return cls(
            user_id=data["user_id"],
            items=[CartItem.from_dict(item) for item in data.get("items", [])],
            updated_at=datetime.fromisoformat(data["updated_at"]) if data.get("updated_at") else utc_now(),
        )
