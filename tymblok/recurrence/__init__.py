"""Recurrence engine for Tymblok."""

from tymblok.recurrence.engine import (
    generate_next_occurrences,
    generate_occurrences,
    is_occurrence_date,
    next_date,
)

__all__ = [
    "generate_next_occurrences",
    "generate_occurrences",
    "is_occurrence_date",
    "next_date",
]
