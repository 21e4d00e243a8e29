"""Recurrence engine: expand a RecurrenceRule into concrete dates.

Every function here is pure. Nothing raises for odd rule shapes: a weekly
rule without weekdays matches on interval alone, a monthly rule anchored on
the 31st never matches shorter months, and an unknown type or an interval
below 1 never matches.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional

from tymblok.models.constants import GENERATION_HORIZON_YEARS, MAX_NEXT_OCCURRENCE_ITERATIONS
from tymblok.models.recurrence import RecurrenceRule, RecurrenceType
from tymblok.recurrence.dates import (
    add_months,
    add_years,
    day_of_week,
    days_between,
    months_between,
    utc_today,
    weeks_between,
)

logger = logging.getLogger(__name__)


def _is_daily_occurrence(rule: RecurrenceRule, start_date: date, candidate: date) -> bool:
    return days_between(start_date, candidate) % rule.interval == 0


def _is_weekly_occurrence(rule: RecurrenceRule, start_date: date, candidate: date) -> bool:
    if rule.days_of_week and day_of_week(candidate) not in rule.days_of_week:
        return False
    return weeks_between(start_date, candidate) % rule.interval == 0


def _is_monthly_occurrence(rule: RecurrenceRule, start_date: date, candidate: date) -> bool:
    # Exact day-of-month only; no last-day-of-month fallback.
    if candidate.day != start_date.day:
        return False
    return months_between(start_date, candidate) % rule.interval == 0


_MATCHERS: Dict[RecurrenceType, Callable[[RecurrenceRule, date, date], bool]] = {
    RecurrenceType.DAILY: _is_daily_occurrence,
    RecurrenceType.WEEKLY: _is_weekly_occurrence,
    RecurrenceType.MONTHLY: _is_monthly_occurrence,
}


def is_occurrence_date(rule: RecurrenceRule, start_date: date, candidate: date) -> bool:
    """Return True if `candidate` is an occurrence of `rule` anchored at `start_date`.

    Args:
        rule: Recurrence rule
        start_date: Series anchor (first possible occurrence)
        candidate: Date to test

    Returns:
        True if the date belongs to the series (end date respected, occurrence
        cap not considered)
    """
    if candidate < start_date:
        return False
    if rule.end_date is not None and candidate > rule.end_date:
        return False

    matcher = _MATCHERS.get(rule.type)
    if matcher is None or rule.interval < 1:
        return False
    return matcher(rule, start_date, candidate)


def next_date(rule: RecurrenceRule, current: date) -> date:
    """Next candidate date after `current` for the rule's stride.

    Monthly steps clamp at month end (Jan 31 -> Feb 28) and the walk continues
    from the clamped date. Unknown types and intervals below 1 step one day.
    """
    if rule.interval < 1:
        return current + timedelta(days=1)
    if rule.type == RecurrenceType.DAILY:
        return current + timedelta(days=rule.interval)
    if rule.type == RecurrenceType.WEEKLY:
        return current + timedelta(days=7 * rule.interval)
    if rule.type == RecurrenceType.MONTHLY:
        return add_months(current, rule.interval)
    return current + timedelta(days=1)


def _cap_reached(rule: RecurrenceRule, current: date, occurrence_count: int) -> bool:
    if rule.max_occurrences is not None and occurrence_count >= rule.max_occurrences:
        return True
    if rule.end_date is not None and current > rule.end_date:
        return True
    return False


def generate_occurrences(
    rule: RecurrenceRule,
    start_date: date,
    from_date: date,
    to_date: date,
    *,
    today: Optional[date] = None,
) -> List[date]:
    """Generate occurrence dates within [from_date, to_date] (both inclusive).

    Candidates are walked from `start_date` using the rule's stride. Dates
    before `from_date` are stepped over without counting toward
    `max_occurrences`. `to_date` is clamped to today + GENERATION_HORIZON_YEARS.

    Args:
        rule: Recurrence rule
        start_date: Series anchor
        from_date: First date of the window
        to_date: Last date of the window
        today: Reference day for the horizon clamp (defaults to current UTC date)

    Returns:
        Ascending list of occurrence dates
    """
    horizon = add_years(today or utc_today(), GENERATION_HORIZON_YEARS)
    if to_date > horizon:
        logger.debug(f"Clamping occurrence window end {to_date} to horizon {horizon}")
        to_date = horizon

    occurrences: List[date] = []
    occurrence_count = 0
    current = start_date

    while current <= to_date:
        if _cap_reached(rule, current, occurrence_count):
            break

        if current >= from_date and is_occurrence_date(rule, start_date, current):
            occurrences.append(current)
            occurrence_count += 1

        current = next_date(rule, current)

    return occurrences


def generate_next_occurrences(rule: RecurrenceRule, start_date: date, count: int) -> List[date]:
    """Generate up to `count` occurrences starting at `start_date`.

    Not bounded by the horizon clamp; at most MAX_NEXT_OCCURRENCE_ITERATIONS
    candidates are examined.
    """
    occurrences: List[date] = []
    current = start_date
    iterations = 0

    while len(occurrences) < count and iterations < MAX_NEXT_OCCURRENCE_ITERATIONS:
        iterations += 1

        if _cap_reached(rule, current, len(occurrences)):
            break

        if is_occurrence_date(rule, start_date, current):
            occurrences.append(current)

        current = next_date(rule, current)

    if iterations >= MAX_NEXT_OCCURRENCE_ITERATIONS and len(occurrences) < count:
        logger.debug(
            f"Stopped after {iterations} iterations with {len(occurrences)}/{count} occurrences"
        )
    return occurrences
