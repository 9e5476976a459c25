# core/dates.py
"""Calendar helpers shared by the summary, payroll and dashboard queries."""

import calendar
from datetime import date, datetime

from django.utils import timezone


def today() -> date:
    return timezone.localdate()


def parse_date(value, default=None):
    """Accept a date, a datetime or an ISO 'YYYY-MM-DD...' string."""
    if value in (None, ""):
        return default
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return default


def month_bounds(day: date) -> tuple[date, date]:
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def parse_month(value: str) -> date:
    """'2025-03' -> date(2025, 3, 1). Raises ValueError on bad input."""
    year, month = str(value).split("-")[:2]
    return date(int(year), int(month), 1)


def shift_month(day: date, months: int) -> date:
    """First day of the month `months` away from `day` (negative goes back)."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)
