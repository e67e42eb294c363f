"""
Unit tests for order number generation.
"""

from datetime import UTC, datetime

import pytest

from app.core.domain import BusinessRuleViolationException
from app.domains.ecommerce.domain.services import day_bounds, is_valid_order_number, next_order_number


class TestOrderNumbering:
    def test_first_order_of_the_day(self):
        assert next_order_number(datetime(2025, 4, 17, 9, tzinfo=UTC), 0) == "VB202504170001"

    def test_follows_todays_count(self):
        assert next_order_number(datetime(2025, 4, 17, 23, 59, tzinfo=UTC), 41) == "VB202504170042"

    def test_last_number_of_the_day(self):
        number = next_order_number(datetime(2025, 4, 17, tzinfo=UTC), 9998)
        assert number == "VB202504179999"
        assert is_valid_order_number(number)

    def test_sequence_never_widens(self):
        with pytest.raises(BusinessRuleViolationException) as exc_info:
            next_order_number(datetime(2025, 4, 17, tzinfo=UTC), 9999)
        assert exc_info.value.rule == "daily_order_limit"

    def test_custom_prefix(self):
        assert next_order_number(datetime(2025, 1, 2, tzinfo=UTC), 6, prefix="XX") == "XX202501020007"

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            next_order_number(datetime(2025, 1, 2, tzinfo=UTC), -1)

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("VB202504170001", True),
            ("VB20250417001", False),
            ("vb202504170001", False),
            ("XX202504170001", False),
            ("VB2025-04170001", False),
            ("VB2025041710000", False),
        ],
    )
    def test_is_valid_order_number(self, value, expected):
        assert is_valid_order_number(value) is expected

    def test_day_bounds(self):
        start, end = day_bounds(datetime(2025, 4, 17, 15, 45, 12, tzinfo=UTC))
        assert start == datetime(2025, 4, 17, tzinfo=UTC)
        assert end == datetime(2025, 4, 18, tzinfo=UTC)
