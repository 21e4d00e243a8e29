"""TimeBlock data model for Tymblok."""

import datetime as dt
from typing import Optional
from pydantic import BaseModel, Field


class TimeBlock(BaseModel):
    """A block of time placed on a specific day.

    Recurring series are stored as one parent block (is_recurring=True, no
    recurrence_parent_id) plus one generated block per materialized occurrence.
    """
    
    id: str = Field(..., description="Unique block identifier (UUID v4)")
    user_id: str = Field(..., description="User ID who owns this block")
    title: str = Field(..., description="Block title")
    subtitle: Optional[str] = Field(None, description="Secondary line shown under the title")
    date: dt.date = Field(..., description="Day the block is placed on")
    start_time: dt.time = Field(..., description="Local start time")
    end_time: dt.time = Field(..., description="Local end time")
    duration_minutes: int = Field(..., ge=1, description="Block duration in minutes")
    is_urgent: bool = Field(False, description="Whether the block is flagged urgent")
    is_completed: bool = Field(False, description="Whether the block has been completed")
    sort_order: int = Field(0, description="Ordering among blocks with the same start time")
    is_recurring: bool = Field(False, description="Whether the block belongs to a recurring series")
    recurrence_rule_id: Optional[str] = Field(None, description="Rule shared by every block of the series")
    recurrence_parent_id: Optional[str] = Field(
        None, description="For generated occurrences, the id of the series parent block"
    )
    created_at: dt.datetime = Field(..., description="Block creation timestamp")
    updated_at: dt.datetime = Field(..., description="Block last update timestamp")

    @property
    def is_recurrence_parent(self) -> bool:
        return self.is_recurring and self.recurrence_parent_id is None
