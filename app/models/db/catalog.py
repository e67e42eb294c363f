"""
Catalog models: products and their per-size price and stock rows
"""

from decimal import Decimal
from typing import Any

from sqlalchemy import Boolean, CheckConstraint, Float, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, JSONType, TimestampMixin


class ProductModel(Base, TimestampMixin):
    """Catalog product"""

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    image: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    images: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    ingredients: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    nutrition: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)

    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    in_stock: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    sizes: Mapped[list["ProductSizeModel"]] = relationship(
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductSizeModel.position",
        lazy="selectin",
    )

    __table_args__ = (CheckConstraint("rating >= 0 AND rating <= 5", name="ck_products_rating_range"),)

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}')>"


class ProductSizeModel(Base):
    """
    One purchasable size of a product.

    Stock lives in its own row so checkout can decrement it with a single
    conditional UPDATE.
    """

    __tablename__ = "product_sizes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    label: Mapped[str] = mapped_column(String(50), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sku: Mapped[str | None] = mapped_column(String(100), nullable=True)

    product: Mapped[ProductModel] = relationship(back_populates="sizes")

    __table_args__ = (
        UniqueConstraint("product_id", "label", name="uq_product_sizes_product_label"),
        CheckConstraint("stock >= 0", name="ck_product_sizes_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_product_sizes_price_non_negative"),
    )


class CategoryModel(Base, TimestampMixin):
    """Storefront category"""

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    slug: Mapped[str] = mapped_column(String(60), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(String(300), nullable=False, default="")
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
