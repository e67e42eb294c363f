"""
Reporting windows for the admin analytics.
"""

from datetime import datetime, timedelta

from app.core.domain import StatusEnum


class ReportPeriod(StatusEnum):
    """
    Sales reporting windows.

    ``week`` and ``last_30_days`` are rolling; ``month`` and ``year`` start
    at the calendar boundary.
    """

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    LAST_30_DAYS = "30d"

    def start(self, now: datetime) -> datetime:
        """First instant covered by the window ending at ``now``."""
        if self == ReportPeriod.WEEK:
            return now - timedelta(days=7)
        if self == ReportPeriod.MONTH:
            return month_start(now)
        if self == ReportPeriod.YEAR:
            return month_start(now).replace(month=1)
        return now - timedelta(days=30)


def month_start(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
