"""Repository for TimeBlock database operations."""

import logging
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import func

from tymblok.models.time_block import TimeBlock
from tymblok.database.models import TimeBlockDB, RecurrenceRuleDB

logger = logging.getLogger(__name__)


class TimeBlockRepository:
    """Repository for TimeBlock database operations."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, block: TimeBlock) -> TimeBlock:
        """Create a new time block."""
        try:
            block_db = TimeBlockDB.from_pydantic(block)
            self.db.add(block_db)
            self.db.commit()
            self.db.refresh(block_db)
            logger.debug(f"Created time block {block.id} on {block.date}")
            return block_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create time block {block.id}: {type(e).__name__}: {str(e)}")
            raise

    def create_many(self, blocks: List[TimeBlock]) -> List[TimeBlock]:
        """Create several blocks in one commit."""
        if not blocks:
            return []
        try:
            rows = [TimeBlockDB.from_pydantic(b) for b in blocks]
            self.db.add_all(rows)
            self.db.commit()
            for row in rows:
                self.db.refresh(row)
            logger.debug(f"Created {len(rows)} time blocks")
            return [row.to_pydantic() for row in rows]
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create {len(blocks)} time blocks: {type(e).__name__}: {str(e)}")
            raise

    def get(self, user_id: str, block_id: str) -> Optional[TimeBlock]:
        """Get a block by ID (user-scoped)."""
        row = (
            self.db.query(TimeBlockDB)
            .filter(TimeBlockDB.user_id == user_id, TimeBlockDB.id == block_id)
            .first()
        )
        return row.to_pydantic() if row else None

    def get_by_date(self, user_id: str, day: date) -> List[TimeBlock]:
        """Get all blocks for a user on one day."""
        rows = (
            self.db.query(TimeBlockDB)
            .filter(TimeBlockDB.user_id == user_id, TimeBlockDB.date == day)
            .order_by(TimeBlockDB.start_time, TimeBlockDB.sort_order)
            .all()
        )
        return [row.to_pydantic() for row in rows]

    def get_by_date_range(self, user_id: str, start_date: date, end_date: date) -> List[TimeBlock]:
        """Get all blocks for a user within [start_date, end_date]."""
        rows = (
            self.db.query(TimeBlockDB)
            .filter(
                TimeBlockDB.user_id == user_id,
                TimeBlockDB.date >= start_date,
                TimeBlockDB.date <= end_date,
            )
            .order_by(TimeBlockDB.date, TimeBlockDB.start_time, TimeBlockDB.sort_order)
            .all()
        )
        return [row.to_pydantic() for row in rows]

    def get_recurring_parents(self, user_id: str) -> List[TimeBlock]:
        """Get the parent block of every recurring series owned by the user."""
        rows = (
            self.db.query(TimeBlockDB)
            .filter(
                TimeBlockDB.user_id == user_id,
                TimeBlockDB.is_recurring.is_(True),
                TimeBlockDB.recurrence_parent_id.is_(None),
                TimeBlockDB.recurrence_rule_id.isnot(None),
            )
            .order_by(TimeBlockDB.created_at)
            .all()
        )
        return [row.to_pydantic() for row in rows]

    def next_sort_order(self, user_id: str, day: date) -> int:
        """Sort order for a new block appended to a day."""
        current = (
            self.db.query(func.max(TimeBlockDB.sort_order))
            .filter(TimeBlockDB.user_id == user_id, TimeBlockDB.date == day)
            .scalar()
        )
        return (current or 0) + 1

    def clear_recurrence(self, user_id: str, block_id: str) -> Optional[TimeBlock]:
        """Stop a series: unlink its rule and delete the rule row.

        Blocks already generated for the series stay in place.
        """
        row = (
            self.db.query(TimeBlockDB)
            .filter(TimeBlockDB.user_id == user_id, TimeBlockDB.id == block_id)
            .first()
        )
        if row is None:
            return None
        rule_id = row.recurrence_rule_id
        try:
            if rule_id is not None:
                (
                    self.db.query(TimeBlockDB)
                    .filter(TimeBlockDB.user_id == user_id, TimeBlockDB.recurrence_rule_id == rule_id)
                    .update({TimeBlockDB.recurrence_rule_id: None}, synchronize_session="fetch")
                )
                self.db.query(RecurrenceRuleDB).filter(RecurrenceRuleDB.id == rule_id).delete(
                    synchronize_session="fetch"
                )
            row.is_recurring = False
            row.recurrence_rule_id = None
            row.updated_at = datetime.utcnow()
            self.db.commit()
            self.db.refresh(row)
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to clear recurrence for block {block_id}: {type(e).__name__}: {str(e)}")
            raise
