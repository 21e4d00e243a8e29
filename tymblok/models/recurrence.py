"""Recurrence rule model for Tymblok.

A rule describes how a block repeats: every N days, weeks or months, optionally
restricted to some weekdays and bounded by an end date and/or an occurrence cap.
The series anchor (start date) lives on the block, not on the rule.
"""

from __future__ import annotations

import re
from datetime import date
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tymblok.models.constants import DEFAULT_RECURRENCE_INTERVAL

_INT_RE = re.compile(r"-?\d+")


class RecurrenceType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def parse_recurrence_type(value) -> Union[RecurrenceType, str]:
    """Map a stored/serialized type name to RecurrenceType.

    Names are matched case-insensitively ("Weekly", "WEEKLY"). Unrecognized
    names are returned unchanged so rules persisted before validation existed
    can still be loaded; the engine treats them as never matching.
    """
    if isinstance(value, RecurrenceType):
        return value
    if isinstance(value, Enum):
        value = value.value
    text = str(value).strip().lower()
    try:
        return RecurrenceType(text)
    except ValueError:
        return str(value)


def parse_days_of_week(value) -> FrozenSet[int]:
    """Parse weekday numbers (0=Sunday ... 6=Saturday).

    Accepts the storage form ("1,3,5"), an iterable of ints, or None.
    Blank and non-numeric entries ("mon") are ignored so stored rules always load.
    """
    if value is None:
        return frozenset()
    if isinstance(value, str):
        parts = [p.strip() for p in value.split(",")]
        return frozenset(int(p) for p in parts if _INT_RE.fullmatch(p))
    return frozenset(int(v) for v in value)


def format_days_of_week(days: Optional[Iterable[int]]) -> Optional[str]:
    """Render weekday numbers back to the comma-separated storage form."""
    if not days:
        return None
    return ",".join(str(d) for d in sorted(set(days)))


class RecurrenceRule(BaseModel):
    """Immutable repetition policy for a recurring block.

    `end_date` and `max_occurrences` are independent: whichever is reached
    first ends the series. Bounds on `interval` and `max_occurrences` are
    enforced on API input only; rules read back from storage load as-is.
    """

    model_config = ConfigDict(frozen=True)

    type: Union[RecurrenceType, str]
    interval: int = Field(DEFAULT_RECURRENCE_INTERVAL, description="Every N days/weeks/months")
    days_of_week: FrozenSet[int] = Field(
        default_factory=frozenset,
        description="Weekly only: weekdays on which it occurs (0=Sunday). Empty means any day.",
    )
    end_date: Optional[date] = Field(None, description="Inclusive last possible occurrence date")
    max_occurrences: Optional[int] = Field(None, description="Inclusive cap on total occurrences")

    @field_validator("type", mode="before")
    @classmethod
    def _validate_type(cls, v):
        return parse_recurrence_type(v)

    @field_validator("days_of_week", mode="before")
    @classmethod
    def _validate_days_of_week(cls, v):
        return parse_days_of_week(v)

    @property
    def days_of_week_csv(self) -> Optional[str]:
        return format_days_of_week(self.days_of_week)
