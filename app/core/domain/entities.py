"""
Base Entity Classes for Domain-Driven Design

Entities are domain objects with identity and lifecycle.
They maintain their identity regardless of their attributes.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Generic, TypeVar
from uuid import uuid4

# Type variable for entity ID (int, str, UUID, etc.)
TId = TypeVar("TId")


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


@dataclass
class Entity(ABC, Generic[TId]):
    """
    Base class for all domain entities.

    An entity is a domain object that has a distinct identity
    that runs through time and different states.

    Type Parameters:
        TId: Type of entity identifier (int, str, UUID)

    Example:
        ```python
        @dataclass
        class Review(Entity[str]):
            product_id: str = ""
            rating: int = 5
        ```
    """

    id: TId | None = field(default=None)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __eq__(self, other: object) -> bool:
        """Entities are equal if they have the same ID."""
        if not isinstance(other, Entity):
            return False
        if self.id is None or other.id is None:
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id) if self.id is not None else id(self)

    def is_new(self) -> bool:
        """Check if entity is new (not yet persisted)."""
        return self.id is None

    def touch(self, now: datetime | None = None) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = now or utc_now()


@dataclass
class AggregateRoot(Entity[TId], Generic[TId]):
    """
    Base class for aggregate roots.

    An aggregate root is the entry point to an aggregate.
    It controls access to all members of the aggregate
    and ensures invariants are maintained. State changes that
    must be observed by collaborators are returned as effects
    by domain services instead of being recorded on the aggregate.
    """

    version: int = field(default=0)

    def increment_version(self) -> None:
        """Increment version for optimistic concurrency."""
        self.version += 1


def generate_uuid_str() -> str:
    """Generate a new UUID as string."""
    return str(uuid4())
