"""Materialize recurring time blocks and recurring inbox items into concrete per-day blocks."""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from tymblok.database.inbox_item_repository import InboxItemRepository
from tymblok.database.recurrence_rule_repository import RecurrenceRuleRepository
from tymblok.database.time_block_repository import TimeBlockRepository
from tymblok.models.constants import INBOX_BLOCK_DURATION_MINUTES, INBOX_BLOCK_START_TIME
from tymblok.models.inbox_item import InboxItem
from tymblok.models.recurrence import RecurrenceRule
from tymblok.models.time_block import TimeBlock
from tymblok.recurrence.engine import generate_occurrences, is_occurrence_date

logger = logging.getLogger(__name__)


def _occurrence_key(block: TimeBlock) -> Tuple[str, date]:
    return (block.recurrence_rule_id, block.date)


def create_occurrence_block(parent: TimeBlock, day: date, *, now: Optional[datetime] = None) -> TimeBlock:
    """Copy a series parent onto `day` as a fresh, not-completed occurrence."""
    now = now or datetime.utcnow()
    return parent.model_copy(
        update={
            "id": str(uuid.uuid4()),
            "date": day,
            "is_completed": False,
            "sort_order": 0,
            "is_recurring": True,
            "recurrence_parent_id": parent.id,
            "created_at": now,
            "updated_at": now,
        }
    )


def create_block_from_inbox_item(item: InboxItem, day: date, *, now: Optional[datetime] = None) -> TimeBlock:
    """Turn a recurring inbox item into a block on `day` at the default slot.

    The block carries the item's rule id but is not itself a series parent.
    """
    now = now or datetime.utcnow()
    start_time = INBOX_BLOCK_START_TIME
    end_time = (datetime.combine(day, start_time) + timedelta(minutes=INBOX_BLOCK_DURATION_MINUTES)).time()
    return TimeBlock(
        id=str(uuid.uuid4()),
        user_id=item.user_id,
        title=item.title,
        subtitle=item.description,
        date=day,
        start_time=start_time,
        end_time=end_time,
        duration_minutes=INBOX_BLOCK_DURATION_MINUTES,
        is_urgent=item.is_urgent,
        is_completed=False,
        sort_order=0,
        is_recurring=False,
        recurrence_rule_id=item.recurrence_rule_id,
        recurrence_parent_id=None,
        created_at=now,
        updated_at=now,
    )


def _dedupe(blocks: Iterable[TimeBlock]) -> List[TimeBlock]:
    """Keep the first block per (rule, day) for recurring blocks and per id otherwise.

    Guards against duplicates already persisted by earlier concurrent runs.
    """
    seen: Set[tuple] = set()
    out: List[TimeBlock] = []
    for b in blocks:
        key = ("rule",) + _occurrence_key(b) if b.recurrence_rule_id else ("id", b.id)
        if key in seen:
            continue
        seen.add(key)
        out.append(b)
    return out


_BlockSeries = List[Tuple[TimeBlock, RecurrenceRule]]
_InboxSeries = List[Tuple[InboxItem, RecurrenceRule]]


def _load_series(db: Session, user_id: str) -> Tuple[_BlockSeries, _InboxSeries]:
    """Recurring parent blocks and recurring inbox items, each paired with its rule.

    Sources whose rule row is gone are skipped.
    """
    parents = TimeBlockRepository(db).get_recurring_parents(user_id)
    items = InboxItemRepository(db).get_recurring(user_id)
    rules: Dict[str, RecurrenceRule] = RecurrenceRuleRepository(db).get_many(
        [p.recurrence_rule_id for p in parents] + [i.recurrence_rule_id for i in items]
    )
    block_series = [(p, rules[p.recurrence_rule_id]) for p in parents if p.recurrence_rule_id in rules]
    inbox_series = [(i, rules[i.recurrence_rule_id]) for i in items if i.recurrence_rule_id in rules]
    return block_series, inbox_series


class _PendingBlocks:
    """Occurrences queued for creation, checked against what is already on the calendar."""

    def __init__(self, existing: List[TimeBlock]):
        self.taken: Set[Tuple[str, date]] = {_occurrence_key(b) for b in existing if b.recurrence_rule_id}
        self.titles: Set[Tuple[date, str]] = {(b.date, b.title) for b in existing}
        self.blocks: List[TimeBlock] = []

    def add_series_occurrence(self, parent: TimeBlock, day: date) -> None:
        key = (parent.recurrence_rule_id, day)
        if key in self.taken:
            return
        self._add(create_occurrence_block(parent, day))

    def add_inbox_occurrence(self, item: InboxItem, day: date) -> None:
        # Same-title check keeps an inbox item from doubling a block series on the same day.
        if (item.recurrence_rule_id, day) in self.taken or (day, item.title) in self.titles:
            return
        self._add(create_block_from_inbox_item(item, day))

    def _add(self, block: TimeBlock) -> None:
        self.taken.add(_occurrence_key(block))
        self.titles.add((block.date, block.title))
        self.blocks.append(block)


def materialize_blocks_for_range(
    db: Session,
    *,
    user_id: str,
    start_date: date,
    end_date: date,
    today: Optional[date] = None,
) -> List[TimeBlock]:
    """Return the user's blocks in [start_date, end_date], creating missing recurring occurrences.

    Idempotent: an occurrence already stored for (rule, day) is never created twice.
    Returns existing + generated blocks ordered by (date, start_time, sort_order).
    """
    block_repo = TimeBlockRepository(db)
    existing = block_repo.get_by_date_range(user_id, start_date, end_date)
    pending = _PendingBlocks(existing)

    block_series, inbox_series = _load_series(db, user_id)
    for parent, rule in block_series:
        for day in generate_occurrences(rule, parent.date, start_date, end_date, today=today):
            pending.add_series_occurrence(parent, day)
    for item, rule in inbox_series:
        for day in generate_occurrences(rule, item.anchor_date, start_date, end_date, today=today):
            pending.add_inbox_occurrence(item, day)

    generated = block_repo.create_many(pending.blocks)
    if generated:
        logger.info(f"Generated {len(generated)} recurring blocks for user {user_id} in {start_date}..{end_date}")

    blocks = _dedupe(existing + generated)
    return sorted(blocks, key=lambda b: (b.date, b.start_time, b.sort_order))


def materialize_blocks_for_date(db: Session, *, user_id: str, day: date) -> List[TimeBlock]:
    """Return the user's blocks on `day`, creating missing recurring occurrences.

    Uses the per-date membership test, so weekdays that a weekly stride walk
    would step over are still produced here. Ordered by (start_time, sort_order).
    """
    block_repo = TimeBlockRepository(db)
    existing = block_repo.get_by_date(user_id, day)
    pending = _PendingBlocks(existing)

    block_series, inbox_series = _load_series(db, user_id)
    for parent, rule in block_series:
        if is_occurrence_date(rule, parent.date, day):
            pending.add_series_occurrence(parent, day)
    for item, rule in inbox_series:
        if is_occurrence_date(rule, item.anchor_date, day):
            pending.add_inbox_occurrence(item, day)

    generated = block_repo.create_many(pending.blocks)
    if generated:
        logger.info(f"Generated {len(generated)} recurring blocks for user {user_id} on {day}")

    blocks = _dedupe(existing + generated)
    return sorted(blocks, key=lambda b: (b.start_time, b.sort_order))
