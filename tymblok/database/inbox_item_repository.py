"""Repository for InboxItem database operations."""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from tymblok.database.models import InboxItemDB
from tymblok.models.inbox_item import InboxItem

logger = logging.getLogger(__name__)


class InboxItemRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, item: InboxItem) -> InboxItem:
        row = InboxItemDB.from_pydantic(item)
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Created inbox item {row.id} for user {row.user_id}")
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create inbox item: {type(e).__name__}: {str(e)}")
            raise

    def get(self, user_id: str, item_id: str) -> Optional[InboxItem]:
        row = (
            self.db.query(InboxItemDB)
            .filter(InboxItemDB.user_id == user_id, InboxItemDB.id == item_id)
            .first()
        )
        return row.to_pydantic() if row else None

    def get_recurring(self, user_id: str) -> List[InboxItem]:
        """Recurring, not dismissed items that still have a rule."""
        rows = (
            self.db.query(InboxItemDB)
            .filter(
                InboxItemDB.user_id == user_id,
                InboxItemDB.is_recurring.is_(True),
                InboxItemDB.recurrence_rule_id.isnot(None),
                InboxItemDB.is_dismissed.is_(False),
            )
            .order_by(InboxItemDB.created_at)
            .all()
        )
        return [row.to_pydantic() for row in rows]

    def dismiss(self, user_id: str, item_id: str) -> Optional[InboxItem]:
        """Mark an item dismissed; a dismissed recurring item stops producing blocks."""
        row = (
            self.db.query(InboxItemDB)
            .filter(InboxItemDB.user_id == user_id, InboxItemDB.id == item_id)
            .first()
        )
        if row is None:
            return None
        try:
            now = datetime.utcnow()
            row.is_dismissed = True
            row.dismissed_at = now
            row.updated_at = now
            self.db.commit()
            self.db.refresh(row)
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to dismiss inbox item {item_id}: {type(e).__name__}: {str(e)}")
            raise
