"""Inbox item model for Tymblok.

Inbox items are unscheduled to-dos. A recurring inbox item turns into a block
on each day its rule matches, anchored on the day the item was created.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class InboxPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


def parse_inbox_priority(value) -> InboxPriority:
    """Map a stored priority name to InboxPriority, case-insensitively.

    Unrecognized or missing names read as MEDIUM.
    """
    if isinstance(value, InboxPriority):
        return value
    try:
        return InboxPriority(str(value or "").strip().lower())
    except ValueError:
        return InboxPriority.MEDIUM


class InboxItem(BaseModel):
    """An inbox item, optionally repeating through a RecurrenceRule."""

    id: str = Field(..., description="Unique inbox item identifier")
    user_id: str = Field(..., description="Owner of the item")
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    priority: InboxPriority = InboxPriority.MEDIUM

    is_dismissed: bool = False
    dismissed_at: Optional[dt.datetime] = None

    is_recurring: bool = False
    recurrence_rule_id: Optional[str] = None

    created_at: dt.datetime
    updated_at: dt.datetime

    @property
    def is_urgent(self) -> bool:
        return self.priority in (InboxPriority.HIGH, InboxPriority.CRITICAL)

    @property
    def anchor_date(self) -> dt.date:
        """Series anchor for a recurring item: the day it was created."""
        return self.created_at.date()
