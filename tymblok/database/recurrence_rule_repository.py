"""Repository for RecurrenceRule database operations."""

import logging
from typing import Dict, Iterable, Optional

from sqlalchemy.orm import Session

from tymblok.database.models import RecurrenceRuleDB
from tymblok.models.recurrence import RecurrenceRule

logger = logging.getLogger(__name__)


class RecurrenceRuleRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, rule: RecurrenceRule, *, rule_id: Optional[str] = None) -> RecurrenceRuleDB:
        row = RecurrenceRuleDB.from_pydantic(rule, rule_id=rule_id)
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Created recurrence rule {row.id} ({row.type}, every {row.interval})")
            return row
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create recurrence rule: {type(e).__name__}: {str(e)}")
            raise

    def get(self, rule_id: str) -> Optional[RecurrenceRule]:
        row = self.db.query(RecurrenceRuleDB).filter(RecurrenceRuleDB.id == rule_id).first()
        return row.to_pydantic() if row else None

    def get_many(self, rule_ids: Iterable[str]) -> Dict[str, RecurrenceRule]:
        """Load several rules at once, keyed by id. Missing ids are absent from the result."""
        ids = {rid for rid in rule_ids if rid}
        if not ids:
            return {}
        rows = self.db.query(RecurrenceRuleDB).filter(RecurrenceRuleDB.id.in_(ids)).all()
        return {row.id: row.to_pydantic() for row in rows}

    def delete(self, rule_id: str) -> bool:
        row = self.db.query(RecurrenceRuleDB).filter(RecurrenceRuleDB.id == rule_id).first()
        if row is None:
            return False
        try:
            self.db.delete(row)
            self.db.commit()
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete recurrence rule {rule_id}: {type(e).__name__}: {str(e)}")
            raise
