"""
Order Numbering Sequence

Human-readable order numbers: prefix, the calendar day and a
four-digit daily sequence, e.g. ``VB202504170007``. A day holds at most
9999 orders; the sequence never widens.
"""

import re
from datetime import datetime, timedelta

from app.core.domain import BusinessRuleViolationException

ORDER_NUMBER_PREFIX = "VB"
SEQUENCE_WIDTH = 4
MAX_ORDERS_PER_DAY = 10**SEQUENCE_WIDTH - 1


def day_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Half-open interval ``[start_of_day, start_of_next_day)`` containing ``now``."""
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def next_order_number(now: datetime, count_of_orders_today: int, prefix: str = ORDER_NUMBER_PREFIX) -> str:
    """
    Build the order number following ``count_of_orders_today`` same-day orders.

    The count must be read when the number is assigned; the repository
    serializes that read per day through an atomic counter row.

    Raises:
        BusinessRuleViolationException: the day's sequence is exhausted
    """
    if count_of_orders_today < 0:
        raise ValueError("Order count cannot be negative")
    if count_of_orders_today >= MAX_ORDERS_PER_DAY:
        raise BusinessRuleViolationException(
            "daily_order_limit",
            "No more orders can be placed today. Please try again tomorrow",
            details={"day": f"{now:%Y%m%d}", "limit": MAX_ORDERS_PER_DAY},
        )
    return f"{prefix}{now:%Y%m%d}{count_of_orders_today + 1:0{SEQUENCE_WIDTH}d}"


def is_valid_order_number(value: str, prefix: str = ORDER_NUMBER_PREFIX) -> bool:
    """Check the literal ``<prefix><YYYY><MM><DD><NNNN>`` shape."""
    return re.fullmatch(rf"{re.escape(prefix)}\d{{8}}\d{{{SEQUENCE_WIDTH}}}", value) is not None
