"""
Category Repository Implementation

SQLAlchemy implementation of ICategoryRepository.
"""

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import DuplicateEntityException, EntityNotFoundException
from app.domains.ecommerce.application.ports import ICategoryRepository
from app.domains.ecommerce.domain.entities import Category
from app.models.db import CategoryModel

from ._helpers import ensure_utc, is_unique_violation

logger = logging.getLogger(__name__)


class SQLAlchemyCategoryRepository(ICategoryRepository):
    """SQLAlchemy implementation of category repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, category_id: str) -> Category | None:
        result = await self.session.execute(
            select(CategoryModel).where(CategoryModel.id == category_id).execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_all(self, include_inactive: bool = False) -> list[Category]:
        stmt = select(CategoryModel)
        if include_inactive:
            stmt = stmt.order_by(CategoryModel.created_at.desc(), CategoryModel.id)
        else:
            stmt = stmt.where(CategoryModel.is_active.is_(True)).order_by(CategoryModel.name)
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        return [self._to_entity(m) for m in result.scalars().all()]

    async def add(self, category: Category) -> Category:
        """Insert a category."""
        model = CategoryModel(
            id=category.id,
            name=category.name,
            slug=category.slug,
            description=category.description,
            image=category.image,
            is_active=category.is_active,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )
        try:
            async with self.session.begin_nested():
                self.session.add(model)
        except IntegrityError as e:
            if is_unique_violation(e):
                raise DuplicateEntityException("Category", "name", category.name) from e
            raise
        logger.info(f"Category created: {category.slug}")
        return category

    async def update(self, category: Category) -> Category:
        """Write a category's fields."""
        try:
            async with self.session.begin_nested():
                result = await self.session.execute(
                    update(CategoryModel)
                    .where(CategoryModel.id == category.id)
                    .values(
                        name=category.name,
                        slug=category.slug,
                        description=category.description,
                        image=category.image,
                        is_active=category.is_active,
                        updated_at=category.updated_at,
                    )
                    .execution_options(synchronize_session=False)
                )
        except IntegrityError as e:
            if is_unique_violation(e):
                raise DuplicateEntityException("Category", "name", category.name) from e
            raise
        if result.rowcount != 1:
            raise EntityNotFoundException("Category", category.id, "Category not found")
        return category

    async def delete(self, category_id: str) -> bool:
        result = await self.session.execute(
            delete(CategoryModel).where(CategoryModel.id == category_id).execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def _to_entity(self, model: CategoryModel) -> Category:
        return Category(
            id=model.id,
            name=model.name,
            description=model.description,
            image=model.image,
            is_active=model.is_active,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )
