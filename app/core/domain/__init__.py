"""
Domain Layer - Core DDD building blocks

This module provides base classes for Domain-Driven Design:
- Entities: Objects with identity and lifecycle
- Value Objects: Immutable objects compared by value
- Events: Domain events returned as side effects
- Exceptions: Domain-specific error handling
"""

from app.core.domain.entities import (
    AggregateRoot,
    Entity,
    generate_uuid_str,
    utc_now,
)
from app.core.domain.events import (
    DomainEvent,
    DomainEventPublisher,
    EventHandler,
)
from app.core.domain.exceptions import (
    AuthorizationException,
    BusinessRuleViolationException,
    ConcurrencyException,
    DomainException,
    DuplicateEntityException,
    EntityNotFoundException,
    InsufficientStockException,
    IntegrationException,
    InvalidOperationException,
    ValidationException,
)
from app.core.domain.value_objects import (
    CENTS,
    StatusEnum,
    ValueObject,
    to_money,
)

__all__ = [
    # Entities
    "Entity",
    "AggregateRoot",
    "generate_uuid_str",
    "utc_now",
    # Value Objects
    "ValueObject",
    "StatusEnum",
    "CENTS",
    "to_money",
    # Events
    "DomainEvent",
    "DomainEventPublisher",
    "EventHandler",
    # Exceptions
    "DomainException",
    "ValidationException",
    "EntityNotFoundException",
    "BusinessRuleViolationException",
    "InsufficientStockException",
    "InvalidOperationException",
    "ConcurrencyException",
    "AuthorizationException",
    "DuplicateEntityException",
    "IntegrationException",
]
