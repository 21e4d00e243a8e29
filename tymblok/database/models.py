"""SQLAlchemy database models for Tymblok."""

from datetime import datetime
import uuid
from sqlalchemy import Column, String, Integer, Boolean, Date, Time, DateTime, ForeignKey

from typing import Union, TypeVar
from tymblok.database.database import Base
from tymblok.models.recurrence import parse_recurrence_type

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string).

    Args:
        enum_obj: Enum instance or string value

    Returns:
        String value of the enum, or the string itself if already a string
    """
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


class RecurrenceRuleDB(Base):
    """Database model for RecurrenceRule."""

    __tablename__ = "recurrence_rules"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    type = Column(String, nullable=False)
    interval = Column(Integer, nullable=False, default=1)

    # Weekly only: comma-separated weekday numbers, 0=Sunday ("1,3,5")
    days_of_week = Column(String, nullable=True)

    end_date = Column(Date, nullable=True)
    max_occurrences = Column(Integer, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model.

        Unknown stored types are kept as raw strings (the engine never matches them).
        """
        from tymblok.models.recurrence import RecurrenceRule
        return RecurrenceRule(
            type=parse_recurrence_type(self.type),
            interval=self.interval,
            days_of_week=self.days_of_week,
            end_date=self.end_date,
            max_occurrences=self.max_occurrences,
        )

    @classmethod
    def from_pydantic(cls, rule, rule_id: str = None):
        """Create database model from Pydantic model."""
        return cls(
            id=rule_id or str(uuid.uuid4()),
            type=enum_to_value(rule.type),
            interval=rule.interval,
            days_of_week=rule.days_of_week_csv,
            end_date=rule.end_date,
            max_occurrences=rule.max_occurrences,
        )


class TimeBlockDB(Base):
    """Database model for TimeBlock."""

    __tablename__ = "time_blocks"

    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # User association
    user_id = Column(String, nullable=False, index=True)

    # Basic fields
    title = Column(String, nullable=False)
    subtitle = Column(String, nullable=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    duration_minutes = Column(Integer, nullable=False, default=30)
    is_urgent = Column(Boolean, nullable=False, default=False)
    is_completed = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, nullable=False, default=0)

    # Recurrence linkage (optional)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurrence_rule_id = Column(String, ForeignKey("recurrence_rules.id", ondelete="SET NULL"), nullable=True, index=True)
    recurrence_parent_id = Column(String, nullable=True, index=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from tymblok.models.time_block import TimeBlock
        return TimeBlock(
            id=self.id,
            user_id=self.user_id,
            title=self.title,
            subtitle=self.subtitle,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
            duration_minutes=self.duration_minutes,
            is_urgent=self.is_urgent,
            is_completed=self.is_completed,
            sort_order=self.sort_order,
            is_recurring=self.is_recurring,
            recurrence_rule_id=self.recurrence_rule_id,
            recurrence_parent_id=self.recurrence_parent_id,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, block):
        """Create database model from Pydantic model."""
        return cls(
            id=block.id,
            user_id=block.user_id,
            title=block.title,
            subtitle=block.subtitle,
            date=block.date,
            start_time=block.start_time,
            end_time=block.end_time,
            duration_minutes=block.duration_minutes,
            is_urgent=block.is_urgent,
            is_completed=block.is_completed,
            sort_order=block.sort_order,
            is_recurring=block.is_recurring,
            recurrence_rule_id=block.recurrence_rule_id,
            recurrence_parent_id=block.recurrence_parent_id,
            created_at=block.created_at,
            updated_at=block.updated_at,
        )


class InboxItemDB(Base):
    """Database model for InboxItem."""

    __tablename__ = "inbox_items"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    priority = Column(String, nullable=False, default="medium")

    is_dismissed = Column(Boolean, nullable=False, default=False)
    dismissed_at = Column(DateTime, nullable=True)

    is_recurring = Column(Boolean, nullable=False, default=False)
    recurrence_rule_id = Column(String, ForeignKey("recurrence_rules.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from tymblok.models.inbox_item import InboxItem, parse_inbox_priority
        return InboxItem(
            id=self.id,
            user_id=self.user_id,
            title=self.title,
            description=self.description,
            priority=parse_inbox_priority(self.priority),
            is_dismissed=self.is_dismissed,
            dismissed_at=self.dismissed_at,
            is_recurring=self.is_recurring,
            recurrence_rule_id=self.recurrence_rule_id,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, item):
        """Create database model from Pydantic model."""
        return cls(
            id=item.id,
            user_id=item.user_id,
            title=item.title,
            description=item.description,
            priority=enum_to_value(item.priority),
            is_dismissed=item.is_dismissed,
            dismissed_at=item.dismissed_at,
            is_recurring=item.is_recurring,
            recurrence_rule_id=item.recurrence_rule_id,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )
