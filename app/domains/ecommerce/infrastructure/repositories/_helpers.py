"""
Shared helpers for the SQLAlchemy repositories.
"""

from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes read back from backends without timezone support."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def is_unique_violation(error: IntegrityError, constraint_hint: str | None = None) -> bool:
    """True when the IntegrityError comes from a unique constraint (optionally a named column)."""
    message = str(error.orig if error.orig is not None else error).lower()
    unique = "unique" in message or "duplicate key" in message
    if not unique:
        return False
    return constraint_hint is None or constraint_hint.lower() in message
