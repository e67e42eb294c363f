"""
Review Entity

Verified product review left against a delivered order.
"""

from dataclasses import dataclass

from app.core.domain import Entity, ValidationException


@dataclass
class Review(Entity[str]):
    """A customer's rating of one product from one delivered order."""

    product_id: str = ""
    user_id: str = ""
    order_id: str = ""
    user_name: str | None = None
    rating: int = 5
    title: str = ""
    comment: str = ""
    is_verified: bool = True
    is_active: bool = True

    def __post_init__(self):
        self.title = self.title.strip()
        self.comment = self.comment.strip()
        if not 1 <= self.rating <= 5:
            raise ValidationException("Rating must be between 1 and 5", field="rating")
        if not 5 <= len(self.title) <= 100:
            raise ValidationException("Title must be between 5 and 100 characters", field="title")
        if not 10 <= len(self.comment) <= 500:
            raise ValidationException("Comment must be between 10 and 500 characters", field="comment")
