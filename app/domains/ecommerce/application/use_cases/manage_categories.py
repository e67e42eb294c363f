"""
Manage Categories Use Cases

Storefront categories: public listing and administrative maintenance.
"""

import logging
from dataclasses import dataclass

from app.core.domain import EntityNotFoundException, generate_uuid_str, utc_now
from app.domains.ecommerce.application.ports import ICategoryRepository, ITransaction
from app.domains.ecommerce.domain.entities import Category

logger = logging.getLogger(__name__)


@dataclass
class CategoryInput:
    """Fields of a new category."""

    name: str
    description: str = ""
    image: str | None = None
    is_active: bool = True


@dataclass
class CategoryChanges:
    """Partial category update; None leaves a field unchanged."""

    name: str | None = None
    description: str | None = None
    image: str | None = None
    is_active: bool | None = None


class ListCategoriesUseCase:
    """Use Case: List Categories (active by name, or all newest first for admins)"""

    def __init__(self, category_repository: ICategoryRepository):
        self.category_repository = category_repository

    async def execute(self, include_inactive: bool = False) -> list[Category]:
        return await self.category_repository.list_all(include_inactive=include_inactive)


class CreateCategoryUseCase:
    """Use Case: Create Category"""

    def __init__(self, category_repository: ICategoryRepository, transaction: ITransaction):
        self.category_repository = category_repository
        self.transaction = transaction

    async def execute(self, data: CategoryInput) -> Category:
        category = Category(
            id=generate_uuid_str(),
            name=data.name,
            description=data.description,
            image=data.image or None,
            is_active=data.is_active,
        )
        try:
            await self.category_repository.add(category)
            await self.transaction.commit()
        except Exception:
            await self.transaction.rollback()
            raise
        return category


class UpdateCategoryUseCase:
    """
    Use Case: Update Category

    Applies only the supplied fields. Renaming moves the slug with the
    name.
    """

    def __init__(self, category_repository: ICategoryRepository, transaction: ITransaction):
        self.category_repository = category_repository
        self.transaction = transaction

    async def execute(self, category_id: str, changes: CategoryChanges) -> Category:
        current = await self.category_repository.get_by_id(category_id)
        if current is None:
            raise EntityNotFoundException("Category", category_id, "Category not found")

        category = Category(
            id=current.id,
            name=current.name if changes.name is None else changes.name,
            description=current.description if changes.description is None else changes.description,
            image=current.image if changes.image is None else (changes.image or None),
            is_active=current.is_active if changes.is_active is None else changes.is_active,
            created_at=current.created_at,
            updated_at=utc_now(),
        )
        try:
            await self.category_repository.update(category)
            await self.transaction.commit()
        except Exception:
            await self.transaction.rollback()
            raise
        logger.info(f"Category updated: {category.slug}")
        return category


class SetCategoryStatusUseCase:
    """Use Case: Activate or Deactivate Category"""

    def __init__(self, category_repository: ICategoryRepository, transaction: ITransaction):
        self.update_category = UpdateCategoryUseCase(category_repository, transaction)

    async def execute(self, category_id: str, is_active: bool) -> Category:
        return await self.update_category.execute(category_id, CategoryChanges(is_active=is_active))


class DeleteCategoryUseCase:
    """
    Use Case: Delete Category

    Products keep their category name; they are not reassigned.
    """

    def __init__(self, category_repository: ICategoryRepository, transaction: ITransaction):
        self.category_repository = category_repository
        self.transaction = transaction

    async def execute(self, category_id: str) -> None:
        try:
            if not await self.category_repository.delete(category_id):
                raise EntityNotFoundException("Category", category_id, "Category not found")
            await self.transaction.commit()
        except Exception:
            await self.transaction.rollback()
            raise
        logger.info(f"Category deleted: {category_id}")


__all__ = [
    "CategoryInput",
    "CategoryChanges",
    "ListCategoriesUseCase",
    "CreateCategoryUseCase",
    "UpdateCategoryUseCase",
    "SetCategoryStatusUseCase",
    "DeleteCategoryUseCase",
]
