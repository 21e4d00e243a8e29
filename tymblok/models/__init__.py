"""Data models for Tymblok."""

from tymblok.models.inbox_item import InboxItem, InboxPriority
from tymblok.models.recurrence import (
    RecurrenceRule,
    RecurrenceType,
    format_days_of_week,
    parse_days_of_week,
)
from tymblok.models.time_block import TimeBlock

__all__ = [
    "InboxItem",
    "InboxPriority",
    "RecurrenceRule",
    "RecurrenceType",
    "format_days_of_week",
    "parse_days_of_week",
    "TimeBlock",
]
