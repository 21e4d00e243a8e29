"""Request/response models for the Tymblok API."""

from datetime import date, time
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from tymblok.models.constants import DEFAULT_DURATION_MINUTES, DEFAULT_NEXT_OCCURRENCE_COUNT, DEFAULT_RECURRENCE_INTERVAL
from tymblok.models.inbox_item import InboxItem, InboxPriority
from tymblok.models.recurrence import RecurrenceRule, RecurrenceType, format_days_of_week, parse_recurrence_type
from tymblok.models.time_block import TimeBlock


class RecurrencePayload(BaseModel):
    """Recurrence fields as exchanged over HTTP (days_of_week is comma-separated, 0=Sunday)."""

    type: RecurrenceType
    interval: int = Field(DEFAULT_RECURRENCE_INTERVAL, ge=1)
    days_of_week: Optional[str] = Field(None, pattern=r"^\s*[0-6]?(\s*,\s*[0-6]?)*\s*$", examples=["1,3,5"])
    end_date: Optional[date] = None
    max_occurrences: Optional[int] = Field(None, ge=1)

    @field_validator("type", mode="before")
    @classmethod
    def _validate_type(cls, v):
        # "Daily", "WEEKLY" accepted; unknown names still fail enum validation.
        return parse_recurrence_type(v)

    def to_rule(self) -> RecurrenceRule:
        return RecurrenceRule(
            type=self.type,
            interval=self.interval,
            days_of_week=self.days_of_week,
            end_date=self.end_date,
            max_occurrences=self.max_occurrences,
        )

    @classmethod
    def from_rule(cls, rule: RecurrenceRule) -> "RecurrencePayload":
        return cls(
            type=rule.type,
            interval=rule.interval,
            days_of_week=format_days_of_week(rule.days_of_week),
            end_date=rule.end_date,
            max_occurrences=rule.max_occurrences,
        )


class BlockCreateRequest(BaseModel):
    title: str = Field(..., min_length=1)
    subtitle: Optional[str] = None
    date: date
    start_time: time
    duration_minutes: int = Field(DEFAULT_DURATION_MINUTES, ge=1)
    is_urgent: bool = False
    is_recurring: bool = False
    recurrence: Optional[RecurrencePayload] = None


class InboxItemCreateRequest(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    priority: InboxPriority = InboxPriority.MEDIUM
    is_recurring: bool = False
    recurrence: Optional[RecurrencePayload] = None


class InboxItemResponse(BaseModel):
    item: InboxItem
    recurrence: Optional[RecurrencePayload] = None


class BlockResponse(BaseModel):
    block: TimeBlock
    recurrence: Optional[RecurrencePayload] = None


class BlockListResponse(BaseModel):
    blocks: List[TimeBlock]


class OccurrenceWindowRequest(BaseModel):
    rule: RecurrencePayload
    start_date: date
    from_date: date
    to_date: date


class NextOccurrencesRequest(BaseModel):
    rule: RecurrencePayload
    start_date: date
    count: int = Field(DEFAULT_NEXT_OCCURRENCE_COUNT, ge=0)


class OccurrenceCheckRequest(BaseModel):
    rule: RecurrencePayload
    start_date: date
    date: date


class OccurrencesResponse(BaseModel):
    dates: List[date]


class OccurrenceCheckResponse(BaseModel):
    is_occurrence: bool
