"""
Review Repository Implementation

SQLAlchemy implementation of IReviewRepository.
"""

import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import DuplicateEntityException, EntityNotFoundException
from app.domains.ecommerce.application.ports import IReviewRepository
from app.domains.ecommerce.domain.entities import Review
from app.models.db import ReviewModel

from ._helpers import ensure_utc, is_unique_violation

logger = logging.getLogger(__name__)


class SQLAlchemyReviewRepository(IReviewRepository):
    """SQLAlchemy implementation of review repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, review: Review) -> Review:
        model = ReviewModel(
            id=review.id,
            product_id=review.product_id,
            order_id=review.order_id,
            user_id=review.user_id,
            user_name=review.user_name,
            rating=review.rating,
            title=review.title,
            comment=review.comment,
            is_verified=review.is_verified,
            is_active=review.is_active,
            created_at=review.created_at,
            updated_at=review.updated_at,
        )
        try:
            async with self.session.begin_nested():
                self.session.add(model)
        except IntegrityError as e:
            if is_unique_violation(e):
                raise DuplicateEntityException("Review", "order_id", review.order_id) from e
            raise
        return review

    async def exists(self, user_id: str, product_id: str, order_id: str) -> bool:
        result = await self.session.execute(
            select(func.count(ReviewModel.id)).where(
                ReviewModel.user_id == user_id,
                ReviewModel.product_id == product_id,
                ReviewModel.order_id == order_id,
            )
        )
        return result.scalar_one() > 0

    async def list_for_product(self, product_id: str, limit: int = 10, offset: int = 0) -> tuple[list[Review], int]:
        return await self._page([ReviewModel.product_id == product_id, ReviewModel.is_active.is_(True)], limit, offset)

    async def get_by_id(self, review_id: str) -> Review | None:
        result = await self.session.execute(
            select(ReviewModel).where(ReviewModel.id == review_id).execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def update(self, review: Review) -> Review:
        """Write the editable fields and visibility."""
        result = await self.session.execute(
            update(ReviewModel)
            .where(ReviewModel.id == review.id)
            .values(
                rating=review.rating,
                title=review.title,
                comment=review.comment,
                is_active=review.is_active,
                updated_at=review.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise EntityNotFoundException("Review", review.id, "Review not found")
        return review

    async def list_for_user(self, user_id: str, limit: int = 10, offset: int = 0) -> tuple[list[Review], int]:
        return await self._page([ReviewModel.user_id == user_id], limit, offset)

    async def list_all(
        self, is_active: bool | None = None, limit: int = 10, offset: int = 0
    ) -> tuple[list[Review], int]:
        conditions = [] if is_active is None else [ReviewModel.is_active.is_(is_active)]
        return await self._page(conditions, limit, offset)

    async def _page(self, conditions: list, limit: int, offset: int) -> tuple[list[Review], int]:
        total = (await self.session.execute(select(func.count(ReviewModel.id)).where(*conditions))).scalar_one()
        result = await self.session.execute(
            select(ReviewModel)
            .where(*conditions)
            .order_by(ReviewModel.created_at.desc(), ReviewModel.id)
            .limit(limit)
            .offset(offset)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(m) for m in result.scalars().all()], total

    def _to_entity(self, model: ReviewModel) -> Review:
        return Review(
            id=model.id,
            product_id=model.product_id,
            order_id=model.order_id,
            user_id=model.user_id,
            user_name=model.user_name,
            rating=model.rating,
            title=model.title,
            comment=model.comment,
            is_verified=model.is_verified,
            is_active=model.is_active,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )
