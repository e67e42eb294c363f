"""
Review Use Cases

Verified reviews left against delivered orders, their edits and moderation.
"""

import logging
from dataclasses import dataclass, field, replace

from app.core.domain import (
    AuthorizationException,
    BusinessRuleViolationException,
    DomainEventPublisher,
    DuplicateEntityException,
    EntityNotFoundException,
    generate_uuid_str,
    utc_now,
)
from app.domains.ecommerce.application.ports import (
    IOrderRepository,
    IProductRepository,
    IReviewRepository,
    ITransaction,
)
from app.domains.ecommerce.domain.entities import Review
from app.domains.ecommerce.domain.events import Audience, NotificationRequested, NotificationTemplate
from app.domains.ecommerce.domain.value_objects import OrderStatus

from .get_customer_orders import page_offset

logger = logging.getLogger(__name__)


@dataclass
class AddReviewRequest:
    """Review submitted by a customer for a product of one of their orders."""

    user_id: str
    order_id: str
    product_id: str
    rating: int
    title: str
    comment: str
    user_name: str | None = None


class AddReviewUseCase:
    """
    Use Case: Add Review

    Rules:
    - The order belongs to the reviewer and has been delivered
    - The product is one of the order's lines
    - One review per user, product and order
    The product's running average is updated in the same transaction.
    """

    def __init__(
        self,
        review_repository: IReviewRepository,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        transaction: ITransaction,
        publisher: DomainEventPublisher,
    ):
        self.review_repository = review_repository
        self.order_repository = order_repository
        self.product_repository = product_repository
        self.transaction = transaction
        self.publisher = publisher

    async def execute(self, request: AddReviewRequest) -> Review:
        order = await self.order_repository.get_by_id(request.order_id)
        if order is None:
            raise EntityNotFoundException("Order", request.order_id)
        if not order.belongs_to(request.user_id):
            raise AuthorizationException("review", f"order:{request.order_id}", request.user_id)
        if order.status != OrderStatus.DELIVERED:
            raise BusinessRuleViolationException("review_requires_delivery", "You can only review delivered orders")
        if not any(item.product_id == request.product_id for item in order.items):
            raise BusinessRuleViolationException("review_product_not_in_order", "Product not found in this order")

        product = await self.product_repository.get_by_id(request.product_id)
        if product is None:
            raise EntityNotFoundException("Product", request.product_id)
        if await self.review_repository.exists(request.user_id, request.product_id, request.order_id):
            raise DuplicateEntityException("Review", "order_id", request.order_id)

        review = Review(
            id=generate_uuid_str(),
            product_id=request.product_id,
            order_id=request.order_id,
            user_id=request.user_id,
            user_name=request.user_name,
            rating=request.rating,
            title=request.title,
            comment=request.comment,
        )
        try:
            await self.review_repository.add(review)
            await self.product_repository.add_rating(request.product_id, review.rating)
            await self.transaction.commit()
        except Exception:
            await self.transaction.rollback()
            raise

        logger.info(f"Review added: product={request.product_id} order={order.order_number} rating={review.rating}")
        await self.publisher.publish(
            NotificationRequested(
                template=NotificationTemplate.NEW_REVIEW,
                audience=Audience.ADMIN,
                data={
                    "product_id": product.id,
                    "product_name": product.name,
                    "order_number": order.order_number,
                    "rating": review.rating,
                    "title": review.title,
                },
            )
        )
        return review


class ListProductReviewsUseCase:
    """Use Case: List Product Reviews"""

    def __init__(self, review_repository: IReviewRepository, product_repository: IProductRepository):
        self.review_repository = review_repository
        self.product_repository = product_repository

    async def execute(self, product_id: str, limit: int = 10, offset: int = 0) -> tuple[list[Review], int]:
        if await self.product_repository.get_by_id(product_id) is None:
            raise EntityNotFoundException("Product", product_id)
        return await self.review_repository.list_for_product(product_id, limit=limit, offset=offset)


@dataclass
class ReviewPage:
    """One page of reviews, newest first."""

    reviews: list[Review] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0


@dataclass
class UpdateReviewRequest:
    """Reviewer's edit; None leaves a field unchanged."""

    review_id: str
    user_id: str
    rating: int | None = None
    title: str | None = None
    comment: str | None = None


async def _get_own_review(review_repository: IReviewRepository, review_id: str, user_id: str) -> Review:
    """The caller's review. Someone else's review is reported as missing."""
    review = await review_repository.get_by_id(review_id)
    if review is None or review.user_id != user_id:
        raise EntityNotFoundException("Review", review_id, "Review not found")
    return review


class UpdateReviewUseCase:
    """
    Use Case: Update Review

    Only the author may edit. The product's rating is recomputed from its
    active reviews in the same transaction.
    """

    def __init__(
        self,
        review_repository: IReviewRepository,
        product_repository: IProductRepository,
        transaction: ITransaction,
    ):
        self.review_repository = review_repository
        self.product_repository = product_repository
        self.transaction = transaction

    async def execute(self, request: UpdateReviewRequest) -> Review:
        current = await _get_own_review(self.review_repository, request.review_id, request.user_id)
        review = replace(
            current,
            rating=current.rating if request.rating is None else request.rating,
            title=current.title if request.title is None else request.title,
            comment=current.comment if request.comment is None else request.comment,
            updated_at=utc_now(),
        )
        try:
            await self.review_repository.update(review)
            await self.product_repository.refresh_rating(review.product_id)
            await self.transaction.commit()
        except Exception:
            await self.transaction.rollback()
            raise
        logger.info(f"Review updated: {review.id}")
        return review


class SetReviewStatusUseCase:
    """
    Use Case: Show or Hide Review

    Hidden reviews leave the product listing and its rating. Customers
    hide their own reviews by deleting them; admins moderate any review.
    """

    def __init__(
        self,
        review_repository: IReviewRepository,
        product_repository: IProductRepository,
        transaction: ITransaction,
    ):
        self.review_repository = review_repository
        self.product_repository = product_repository
        self.transaction = transaction

    async def execute(self, review_id: str, is_active: bool, user_id: str | None = None) -> Review:
        """Change visibility; with ``user_id`` only that user's review qualifies."""
        if user_id is None:
            current = await self.review_repository.get_by_id(review_id)
            if current is None:
                raise EntityNotFoundException("Review", review_id, "Review not found")
        else:
            current = await _get_own_review(self.review_repository, review_id, user_id)

        review = replace(current, is_active=is_active, updated_at=utc_now())
        try:
            await self.review_repository.update(review)
            await self.product_repository.refresh_rating(review.product_id)
            await self.transaction.commit()
        except Exception:
            await self.transaction.rollback()
            raise
        logger.info(f"Review {'activated' if is_active else 'deactivated'}: {review.id}")
        return review


class DeleteReviewUseCase:
    """Use Case: Delete Review (the author's soft delete)"""

    def __init__(self, set_status: SetReviewStatusUseCase):
        self.set_status = set_status

    async def execute(self, review_id: str, user_id: str) -> None:
        await self.set_status.execute(review_id, is_active=False, user_id=user_id)


class ListUserReviewsUseCase:
    """Use Case: List the caller's own reviews, hidden ones included"""

    def __init__(self, review_repository: IReviewRepository):
        self.review_repository = review_repository

    async def execute(self, user_id: str, page: int = 1, limit: int = 10) -> ReviewPage:
        offset = page_offset(page, limit)
        reviews, total = await self.review_repository.list_for_user(user_id, limit=limit, offset=offset)
        return ReviewPage(reviews=reviews, total=total, page=page, limit=limit)


class ListAllReviewsUseCase:
    """Use Case: List Reviews for moderation"""

    def __init__(self, review_repository: IReviewRepository):
        self.review_repository = review_repository

    async def execute(self, is_active: bool | None = None, page: int = 1, limit: int = 10) -> ReviewPage:
        offset = page_offset(page, limit)
        reviews, total = await self.review_repository.list_all(is_active=is_active, limit=limit, offset=offset)
        return ReviewPage(reviews=reviews, total=total, page=page, limit=limit)


__all__ = [
    "AddReviewUseCase",
    "AddReviewRequest",
    "ListProductReviewsUseCase",
    "ReviewPage",
    "UpdateReviewRequest",
    "UpdateReviewUseCase",
    "SetReviewStatusUseCase",
    "DeleteReviewUseCase",
    "ListUserReviewsUseCase",
    "ListAllReviewsUseCase",
]
