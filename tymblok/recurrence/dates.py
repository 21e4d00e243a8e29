"""Calendar-date arithmetic used by the recurrence engine.

All values are naive `datetime.date` objects (user-local days, no timezone).
"""

from __future__ import annotations

from datetime import date, datetime

from dateutil.relativedelta import relativedelta


def utc_today() -> date:
    return datetime.utcnow().date()


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative if end precedes start)."""
    return (end - start).days


def weeks_between(start: date, end: date) -> int:
    """Whole weeks from start to end, i.e. floor(days / 7)."""
    return days_between(start, end) // 7


def months_between(start: date, end: date) -> int:
    """Calendar-month distance, ignoring the day of month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def add_months(d: date, months: int) -> date:
    """Add calendar months, clamping to the last day of shorter months.

    add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)
    """
    return d + relativedelta(months=months)


def add_years(d: date, years: int) -> date:
    # Feb 29 clamps to Feb 28 in non-leap years.
    return d + relativedelta(years=years)


def day_of_week(d: date) -> int:
    """Weekday number with Sunday as 0 and Saturday as 6."""
    return d.isoweekday() % 7
