"""
Category Entity

Named product grouping shown in the storefront navigation.
"""

import re
from dataclasses import dataclass

from app.core.domain import Entity, ValidationException

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 300


def slugify(name: str) -> str:
    """``"Roasted & Baked"`` -> ``"roasted-baked"``"""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


@dataclass
class Category(Entity[str]):
    """A storefront category. The slug always follows the name."""

    name: str = ""
    slug: str = ""
    description: str = ""
    image: str | None = None
    is_active: bool = True

    def __post_init__(self):
        self.name = self.name.strip()
        self.description = self.description.strip()
        if not MIN_NAME_LENGTH <= len(self.name) <= MAX_NAME_LENGTH:
            raise ValidationException(
                f"Category name must be between {MIN_NAME_LENGTH} and {MAX_NAME_LENGTH} characters",
                field="name",
            )
        if len(self.description) > MAX_DESCRIPTION_LENGTH:
            raise ValidationException(
                f"Description cannot exceed {MAX_DESCRIPTION_LENGTH} characters", field="description"
            )
        if self.image and not self.image.startswith(("http://", "https://")):
            raise ValidationException("Image must be a valid URL", field="image")
        self.slug = slugify(self.name)
        if not self.slug:
            raise ValidationException("Category name must contain letters or digits", field="name")
