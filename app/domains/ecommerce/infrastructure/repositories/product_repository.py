"""
Product Repository Implementation

SQLAlchemy implementation of IProductRepository.
"""

import logging
from decimal import Decimal

from sqlalchemy import Select, delete, exists, func, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import ConcurrencyException
from app.domains.ecommerce.application.ports import IProductRepository, ProductQuery
from app.domains.ecommerce.domain.entities import Nutrition, Product, ProductSize
from app.models.db import ProductModel, ProductSizeModel, ReviewModel
from app.models.db.base import utc_now

from ._helpers import ensure_utc

logger = logging.getLogger(__name__)

# Statements below bypass the identity map; reads reload rows so callers
# never see stock values from before an atomic update.
_NO_SYNC = {"synchronize_session": False}


class SQLAlchemyProductRepository(IProductRepository):
    """
    SQLAlchemy implementation of product repository.

    Stock changes are single conditional UPDATE statements on
    ``product_sizes`` followed by a recomputation of ``products.in_stock``
    in the same transaction. Every write to a product bumps its
    ``version`` except rating changes.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def get_by_id(self, product_id: str) -> Product | None:
        """Get product by ID."""
        result = await self.session.execute(
            select(ProductModel)
            .where(ProductModel.id == product_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_many(self, product_ids: list[str]) -> dict[str, Product]:
        """Get products by ID, keyed by ID."""
        if not product_ids:
            return {}
        result = await self.session.execute(
            select(ProductModel)
            .where(ProductModel.id.in_(set(product_ids)))
            .execution_options(populate_existing=True)
        )
        return {model.id: self._to_entity(model) for model in result.scalars().all()}

    async def search(self, query: ProductQuery) -> tuple[list[Product], int]:
        """List products matching filters, with the total match count."""
        stmt = self._apply_filters(select(ProductModel), query)
        count_stmt = self._apply_filters(select(func.count(ProductModel.id)), query)

        total = (await self.session.execute(count_stmt)).scalar_one()
        result = await self.session.execute(
            self._apply_sort(stmt, query.sort)
            .limit(query.limit)
            .offset(query.offset)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(m) for m in result.scalars().all()], total

    async def add(self, product: Product) -> Product:
        """Insert a new product with its sizes."""
        model = ProductModel(
            id=product.id,
            sizes=[self._size_to_model(size, position) for position, size in enumerate(product.sizes)],
            rating=product.rating,
            review_count=product.review_count,
            created_at=product.created_at,
            updated_at=product.updated_at,
            **self._scalar_values(product),
        )
        self.session.add(model)
        await self.session.flush()
        logger.info(f"Product created: {product.id} ({product.name})")
        return product

    async def update(self, product: Product) -> Product:
        """
        Replace a product's editable fields and sizes.

        Guarded by ``product.version``: any stock movement, deactivation or
        edit committed since the caller read the product bumps the version
        and the write is refused. Rating and review count are not written;
        they only change through ``add_rating`` and ``refresh_rating``.
        """
        result = await self.session.execute(
            update(ProductModel)
            .where(ProductModel.id == product.id, ProductModel.version == product.version)
            .values(
                **self._scalar_values(product),
                version=ProductModel.version + 1,
                updated_at=utc_now(),
            )
            .execution_options(**_NO_SYNC)
        )
        if result.rowcount != 1:
            logger.warning(f"Stale product update refused: {product.id} (version {product.version})")
            raise ConcurrencyException("Product", product.id)

        wanted = [size.label for size in product.sizes]
        await self.session.execute(
            delete(ProductSizeModel)
            .where(ProductSizeModel.product_id == product.id, ProductSizeModel.label.not_in(wanted))
            .execution_options(**_NO_SYNC)
        )
        existing = set(
            (
                await self.session.execute(
                    select(ProductSizeModel.label).where(ProductSizeModel.product_id == product.id)
                )
            )
            .scalars()
            .all()
        )
        for position, size in enumerate(product.sizes):
            if size.label in existing:
                await self.session.execute(
                    update(ProductSizeModel)
                    .where(ProductSizeModel.product_id == product.id, ProductSizeModel.label == size.label)
                    .values(position=position, price=size.price, stock=size.stock, sku=size.sku)
                    .execution_options(**_NO_SYNC)
                )
            else:
                await self.session.execute(
                    insert(ProductSizeModel).values(
                        product_id=product.id,
                        position=position,
                        label=size.label,
                        price=size.price,
                        stock=size.stock,
                        sku=size.sku,
                    )
                )

        product.version += 1
        return product

    async def deactivate(self, product_id: str) -> bool:
        """Hide a product from the storefront without touching its sizes."""
        result = await self.session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(is_active=False, version=ProductModel.version + 1, updated_at=utc_now())
            .execution_options(**_NO_SYNC)
        )
        return result.rowcount == 1

    async def decrement_stock(self, product_id: str, size: str, quantity: int) -> bool:
        """Remove units only while the size holds at least ``quantity``."""
        if quantity < 1:
            return False
        result = await self.session.execute(
            update(ProductSizeModel)
            .where(
                ProductSizeModel.product_id == product_id,
                ProductSizeModel.label == size,
                ProductSizeModel.stock >= quantity,
            )
            .values(stock=ProductSizeModel.stock - quantity)
            .execution_options(**_NO_SYNC)
        )
        if result.rowcount != 1:
            logger.info(f"Stock decrement refused: product={product_id} size={size} quantity={quantity}")
            return False
        await self._refresh_in_stock(product_id)
        return True

    async def restock(self, product_id: str, size: str, quantity: int) -> bool:
        """Return units to a size."""
        if quantity < 1:
            return False
        result = await self.session.execute(
            update(ProductSizeModel)
            .where(ProductSizeModel.product_id == product_id, ProductSizeModel.label == size)
            .values(stock=ProductSizeModel.stock + quantity)
            .execution_options(**_NO_SYNC)
        )
        if result.rowcount != 1:
            logger.warning(f"Restock skipped for unknown size: product={product_id} size={size}")
            return False
        await self._refresh_in_stock(product_id)
        return True

    async def set_size_stock(self, product_id: str, size: str, stock: int) -> bool:
        """Set a size's stock to an absolute value."""
        result = await self.session.execute(
            update(ProductSizeModel)
            .where(ProductSizeModel.product_id == product_id, ProductSizeModel.label == size)
            .values(stock=stock)
            .execution_options(**_NO_SYNC)
        )
        if result.rowcount != 1:
            return False
        await self._refresh_in_stock(product_id)
        return True

    async def add_rating(self, product_id: str, rating: int) -> bool:
        """Fold a rating into the running average in one statement."""
        result = await self.session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(
                rating=(ProductModel.rating * ProductModel.review_count + rating) / (ProductModel.review_count + 1),
                review_count=ProductModel.review_count + 1,
                updated_at=utc_now(),
            )
            .execution_options(**_NO_SYNC)
        )
        return result.rowcount == 1

    async def refresh_rating(self, product_id: str) -> bool:
        """Recompute the average and count from active reviews in one statement."""
        active = (ReviewModel.product_id == product_id, ReviewModel.is_active.is_(True))
        average = select(func.coalesce(func.avg(ReviewModel.rating), 0.0)).where(*active).scalar_subquery()
        count = select(func.count(ReviewModel.id)).where(*active).scalar_subquery()
        result = await self.session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(rating=average, review_count=count, updated_at=utc_now())
            .execution_options(**_NO_SYNC)
        )
        return result.rowcount == 1

    async def _refresh_in_stock(self, product_id: str) -> None:
        has_stock = exists().where(ProductSizeModel.product_id == product_id, ProductSizeModel.stock > 0)
        await self.session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(in_stock=has_stock, version=ProductModel.version + 1, updated_at=utc_now())
            .execution_options(**_NO_SYNC)
        )

    # Query building

    def _apply_filters(self, stmt: Select, query: ProductQuery) -> Select:
        if not query.include_inactive:
            stmt = stmt.where(ProductModel.is_active.is_(True))
        if query.category:
            stmt = stmt.where(ProductModel.category == query.category)
        if query.featured is not None:
            stmt = stmt.where(ProductModel.featured.is_(query.featured))
        if query.in_stock is not None:
            stmt = stmt.where(ProductModel.in_stock.is_(query.in_stock))
        if query.search:
            pattern = f"%{query.search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(ProductModel.name).like(pattern),
                    func.lower(ProductModel.description).like(pattern),
                    func.lower(ProductModel.category).like(pattern),
                )
            )
        if query.min_price is not None or query.max_price is not None:
            price_match = select(ProductSizeModel.id).where(ProductSizeModel.product_id == ProductModel.id)
            if query.min_price is not None:
                price_match = price_match.where(ProductSizeModel.price >= query.min_price)
            if query.max_price is not None:
                price_match = price_match.where(ProductSizeModel.price <= query.max_price)
            stmt = stmt.where(price_match.exists())
        return stmt

    def _apply_sort(self, stmt: Select, sort: str) -> Select:
        min_price = (
            select(func.min(ProductSizeModel.price))
            .where(ProductSizeModel.product_id == ProductModel.id)
            .scalar_subquery()
        )
        orderings = {
            "newest": [ProductModel.created_at.desc()],
            "oldest": [ProductModel.created_at.asc()],
            "name": [ProductModel.name.asc()],
            "rating": [ProductModel.rating.desc(), ProductModel.review_count.desc()],
            "price_asc": [min_price.asc()],
            "price_desc": [min_price.desc()],
        }
        return stmt.order_by(*orderings.get(sort, orderings["newest"]), ProductModel.id)

    # Mapping methods

    def _scalar_values(self, product: Product) -> dict:
        return {
            "name": product.name,
            "description": product.description,
            "category": product.category,
            "image": product.image,
            "images": list(product.images),
            "ingredients": list(product.ingredients),
            "nutrition": product.nutrition.to_dict() if product.nutrition else None,
            "tags": list(product.tags),
            "featured": product.featured,
            "is_active": product.is_active,
            "in_stock": any(size.stock > 0 for size in product.sizes),
        }

    def _size_to_model(self, size: ProductSize, position: int) -> ProductSizeModel:
        return ProductSizeModel(
            position=position,
            label=size.label,
            price=size.price,
            stock=size.stock,
            sku=size.sku,
        )

    def _to_entity(self, model: ProductModel) -> Product:
        """Convert model to entity."""
        return Product(
            id=model.id,
            name=model.name,
            description=model.description,
            category=model.category,
            image=model.image,
            images=list(model.images or []),
            sizes=[
                ProductSize(label=s.label, price=Decimal(s.price), stock=s.stock, sku=s.sku)
                for s in model.sizes
            ],
            ingredients=list(model.ingredients or []),
            nutrition=Nutrition(**model.nutrition) if model.nutrition else None,
            tags=list(model.tags or []),
            rating=float(model.rating or 0.0),
            review_count=model.review_count,
            featured=model.featured,
            is_active=model.is_active,
            in_stock=model.in_stock,
            version=model.version,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )
