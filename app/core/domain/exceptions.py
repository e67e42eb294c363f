"""
Store Domain Exceptions

Errors raised by entities, domain services and use cases. Each carries a
machine-readable code and a details payload; the API layer maps the
exception type to an HTTP status.
"""

from typing import Any


class DomainException(Exception):
    """
    Base exception for all store errors.

    Attributes:
        message: Text safe to show to a shopper or admin
        code: Stable machine-readable code (e.g. "INSUFFICIENT_STOCK")
        details: Structured context for clients
    """

    code_default = "DOMAIN_ERROR"

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.code_default
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Error body returned by the API."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DomainException):
    """Malformed input: bad quantities, prices, addresses, coupon terms."""

    code_default = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        self.field = field
        details = dict(details or {})
        if field:
            details["field"] = field
        super().__init__(message, details=details)


class EntityNotFoundException(DomainException):
    """A product, size, order, coupon or cart line does not exist."""

    code_default = "ENTITY_NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: Any, message: str | None = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            message or f"{entity_type} not found",
            details={"entity_type": entity_type, "entity_id": str(entity_id)},
        )


class BusinessRuleViolationException(DomainException):
    """
    A store rule refused the request.

    ``rule`` names the rule, e.g. ``coupon_expired`` or
    ``review_requires_delivery``, so callers can branch without parsing
    the message.
    """

    code_default = "BUSINESS_RULE_VIOLATION"

    def __init__(self, rule: str, message: str | None = None, details: dict[str, Any] | None = None):
        self.rule = rule
        details = dict(details or {})
        details["rule"] = rule
        super().__init__(message or f"Request refused: {rule}", details=details)


class InsufficientStockException(DomainException):
    """A size does not hold enough units for an order or cart line."""

    code_default = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: str, size: str, requested: int, available: int | None = None):
        self.product_id = product_id
        self.size = size
        self.requested = requested
        self.available = available
        if available is None:
            message = f"Not enough stock for size {size}"
        else:
            message = f"Only {available} left in stock for size {size}"
        super().__init__(
            message,
            details={
                "product_id": product_id,
                "size": size,
                "requested": requested,
                "available": available,
            },
        )


class InvalidOperationException(DomainException):
    """An order transition that its current status does not allow."""

    code_default = "INVALID_OPERATION"

    def __init__(self, operation: str, current_state: str, message: str | None = None):
        self.operation = operation
        self.current_state = current_state
        super().__init__(
            message or f"Cannot {operation} an order that is {current_state}",
            details={"operation": operation, "current_state": current_state},
        )


class ConcurrencyException(DomainException):
    """A concurrent writer won a race and retries are exhausted."""

    code_default = "CONCURRENCY_CONFLICT"

    def __init__(self, entity_type: str, entity_id: Any, message: str | None = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            message or f"{entity_type} was changed by another request. Please try again",
            details={"entity_type": entity_type, "entity_id": str(entity_id)},
        )


class AuthorizationException(DomainException):
    """The caller does not own the order it is acting on."""

    code_default = "AUTHORIZATION_ERROR"

    def __init__(self, operation: str, resource: str | None = None, user_id: str | None = None):
        self.operation = operation
        self.resource = resource
        self.user_id = user_id
        super().__init__(
            "Access denied",
            details={"operation": operation, "resource": resource},
        )


class DuplicateEntityException(DomainException):
    """A unique key is already taken: coupon code, order number, review."""

    code_default = "DUPLICATE_ENTITY"

    def __init__(self, entity_type: str, field: str, value: Any):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(
            f"{entity_type} with {field} '{value}' already exists",
            details={"entity_type": entity_type, "field": field, "value": str(value)},
        )


class IntegrationException(DomainException):
    """Redis or the notification webhook failed."""

    code_default = "INTEGRATION_ERROR"

    def __init__(self, service: str, message: str, original_error: Exception | None = None):
        self.service = service
        self.original_error = original_error
        details: dict[str, Any] = {"service": service}
        if original_error:
            details["original_error"] = str(original_error)
        super().__init__(message, details=details)
