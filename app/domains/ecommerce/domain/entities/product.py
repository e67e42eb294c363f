"""
Product Entity

Catalog product with per-size pricing and stock.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from app.core.domain import AggregateRoot, ValidationException, ValueObject, to_money


@dataclass
class ProductSize:
    """A purchasable variant of a product with its own price and stock."""

    label: str
    price: Decimal
    stock: int = 0
    sku: str | None = None

    def __post_init__(self):
        self.price = to_money(self.price)
        if self.price < 0:
            raise ValidationException("Size price cannot be negative", field="price")
        if self.stock < 0:
            raise ValidationException("Size stock cannot be negative", field="stock")

    def to_dict(self) -> dict:
        return {"size": self.label, "price": float(self.price), "stock": self.stock, "sku": self.sku}


@dataclass(frozen=True)
class Nutrition(ValueObject):
    """Nutrition facts per serving."""

    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None
    fiber: float | None = None

    def to_dict(self) -> dict:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
            "fiber": self.fiber,
        }


@dataclass
class Product(AggregateRoot[str]):
    """
    Product aggregate.

    Owns an ordered list of sizes with unique labels. The aggregate
    ``in_stock`` flag is true exactly when some size has stock left.
    Products are deactivated, never removed.
    """

    name: str = ""
    description: str = ""
    category: str = ""
    image: str = ""
    images: list[str] = field(default_factory=list)
    sizes: list[ProductSize] = field(default_factory=list)
    ingredients: list[str] = field(default_factory=list)
    nutrition: Nutrition | None = None
    tags: list[str] = field(default_factory=list)
    rating: float = 0.0
    review_count: int = 0
    featured: bool = False
    is_active: bool = True
    in_stock: bool = False

    def __post_init__(self):
        labels = [size.label for size in self.sizes]
        if len(labels) != len(set(labels)):
            raise ValidationException("Size labels must be unique per product", field="sizes")
        self.refresh_stock_flag()

    # Size queries

    def get_size(self, label: str) -> ProductSize | None:
        """Find a size by label."""
        return next((size for size in self.sizes if size.label == label), None)

    @property
    def min_price(self) -> Decimal:
        return min((size.price for size in self.sizes), default=to_money(0))

    @property
    def max_price(self) -> Decimal:
        return max((size.price for size in self.sizes), default=to_money(0))

    @property
    def total_stock(self) -> int:
        return sum(size.stock for size in self.sizes)

    def refresh_stock_flag(self) -> None:
        """Recompute the aggregate in-stock flag from the sizes."""
        self.in_stock = any(size.stock > 0 for size in self.sizes)

    # Mutations

    def set_size_stock(self, label: str, stock: int) -> bool:
        """Set a size's stock to an absolute value. Returns False for unknown sizes."""
        if stock < 0:
            raise ValidationException("Stock cannot be negative", field="stock")
        size = self.get_size(label)
        if size is None:
            return False
        size.stock = stock
        self.refresh_stock_flag()
        self.touch()
        return True

    def add_rating(self, rating: int) -> float:
        """Fold a new review rating into the running average."""
        if not 1 <= rating <= 5:
            raise ValidationException("Rating must be between 1 and 5", field="rating")
        total = self.rating * self.review_count + rating
        self.review_count += 1
        self.rating = total / self.review_count
        return self.rating

    def deactivate(self) -> None:
        self.is_active = False
        self.touch()

    def to_summary_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "image": self.image,
            "min_price": float(self.min_price),
            "max_price": float(self.max_price),
            "in_stock": self.in_stock,
            "rating": round(self.rating, 1),
            "review_count": self.review_count,
            "featured": self.featured,
        }
