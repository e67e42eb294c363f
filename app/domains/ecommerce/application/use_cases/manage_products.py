"""
Manage Products Use Cases

Administrative catalog maintenance: create, edit, adjust stock, deactivate.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from app.core.domain import (
    ConcurrencyException,
    EntityNotFoundException,
    ValidationException,
    generate_uuid_str,
    utc_now,
)
from app.domains.ecommerce.application.ports import IProductRepository, ITransaction
from app.domains.ecommerce.domain.entities import Nutrition, Product, ProductSize

logger = logging.getLogger(__name__)


@dataclass
class ProductSizeInput:
    """Size definition supplied by an administrator."""

    label: str
    price: Decimal
    stock: int = 0
    sku: str | None = None


@dataclass
class ProductInput:
    """Editable product fields."""

    name: str
    description: str
    category: str
    sizes: list[ProductSizeInput]
    image: str = ""
    images: list[str] = field(default_factory=list)
    ingredients: list[str] = field(default_factory=list)
    nutrition: dict[str, Any] | None = None
    tags: list[str] = field(default_factory=list)
    featured: bool = False
    is_active: bool = True
    # Version the editor last read; None edits whatever is current.
    version: int | None = None


def _validate_input(data: ProductInput) -> None:
    if not data.name.strip():
        raise ValidationException("Product name is required", field="name")
    if not data.category.strip():
        raise ValidationException("Category is required", field="category")
    if not data.sizes:
        raise ValidationException("At least one size is required", field="sizes")


def _build_sizes(sizes: list[ProductSizeInput]) -> list[ProductSize]:
    return [ProductSize(label=s.label.strip(), price=s.price, stock=s.stock, sku=s.sku) for s in sizes]


class CreateProductUseCase:
    """Use Case: Create Product"""

    def __init__(self, product_repository: IProductRepository, transaction: ITransaction):
        self.product_repository = product_repository
        self.transaction = transaction

    async def execute(self, data: ProductInput) -> Product:
        _validate_input(data)
        product = Product(
            id=generate_uuid_str(),
            name=data.name.strip(),
            description=data.description,
            category=data.category.strip(),
            image=data.image,
            images=list(data.images),
            sizes=_build_sizes(data.sizes),
            ingredients=list(data.ingredients),
            nutrition=Nutrition(**data.nutrition) if data.nutrition else None,
            tags=list(data.tags),
            featured=data.featured,
            is_active=data.is_active,
        )
        try:
            await self.product_repository.add(product)
            await self.transaction.commit()
        except Exception:
            await self.transaction.rollback()
            raise
        return product


class UpdateProductUseCase:
    """
    Use Case: Update Product

    Replaces the editable fields. Rating and review count are kept; they
    only change through reviews. The write is refused when the product
    changed after the editor read it, including stock sold meanwhile.
    """

    def __init__(self, product_repository: IProductRepository, transaction: ITransaction):
        self.product_repository = product_repository
        self.transaction = transaction

    async def execute(self, product_id: str, data: ProductInput) -> Product:
        _validate_input(data)
        current = await self.product_repository.get_by_id(product_id)
        if current is None:
            raise EntityNotFoundException("Product", product_id)
        if data.version is not None and data.version != current.version:
            raise ConcurrencyException("Product", product_id)

        product = Product(
            id=current.id,
            name=data.name.strip(),
            description=data.description,
            category=data.category.strip(),
            image=data.image,
            images=list(data.images),
            sizes=_build_sizes(data.sizes),
            ingredients=list(data.ingredients),
            nutrition=Nutrition(**data.nutrition) if data.nutrition else None,
            tags=list(data.tags),
            rating=current.rating,
            review_count=current.review_count,
            featured=data.featured,
            is_active=data.is_active,
            version=current.version,
            created_at=current.created_at,
            updated_at=utc_now(),
        )
        try:
            await self.product_repository.update(product)
            await self.transaction.commit()
        except Exception:
            await self.transaction.rollback()
            raise
        logger.info(f"Product updated: {product.id}")
        return product


class SetSizeStockUseCase:
    """Use Case: Set Size Stock"""

    def __init__(self, product_repository: IProductRepository, transaction: ITransaction):
        self.product_repository = product_repository
        self.transaction = transaction

    async def execute(self, product_id: str, size: str, stock: int) -> Product:
        if stock < 0:
            raise ValidationException("Stock cannot be negative", field="stock")
        try:
            if not await self.product_repository.set_size_stock(product_id, size, stock):
                raise EntityNotFoundException("ProductSize", f"{product_id}:{size}")
            await self.transaction.commit()
        except Exception:
            await self.transaction.rollback()
            raise

        product = await self.product_repository.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundException("Product", product_id)
        logger.info(f"Stock set: product={product_id} size={size} stock={stock}")
        return product


class DeactivateProductUseCase:
    """Use Case: Deactivate Product (products are never deleted)"""

    def __init__(self, product_repository: IProductRepository, transaction: ITransaction):
        self.product_repository = product_repository
        self.transaction = transaction

    async def execute(self, product_id: str) -> Product:
        try:
            if not await self.product_repository.deactivate(product_id):
                raise EntityNotFoundException("Product", product_id)
            await self.transaction.commit()
        except Exception:
            await self.transaction.rollback()
            raise

        product = await self.product_repository.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundException("Product", product_id)
        logger.info(f"Product deactivated: {product_id}")
        return product


__all__ = [
    "ProductInput",
    "ProductSizeInput",
    "CreateProductUseCase",
    "UpdateProductUseCase",
    "SetSizeStockUseCase",
    "DeactivateProductUseCase",
]
