"""Tests for materializing recurring time blocks into per-day blocks."""

import uuid
from datetime import date, time

from tymblok.database.models import RecurrenceRuleDB, TimeBlockDB
from tymblok.models.inbox_item import InboxPriority
from tymblok.models.recurrence import RecurrenceRule, RecurrenceType
from tymblok.models.time_block import TimeBlock
from tymblok.recurrence.materialize import (
    create_occurrence_block,
    materialize_blocks_for_date,
    materialize_blocks_for_range,
)


START = date(2026, 2, 16)  # Monday


class TestMaterializeForDate:
    """Per-day materialization driven by is_occurrence_date."""

    def test_daily_series_generates_occurrence(self, db_session, make_series, test_user_id):
        parent = make_series(RecurrenceRule(type=RecurrenceType.DAILY))

        blocks = materialize_blocks_for_date(db_session, user_id=test_user_id, day=date(2026, 2, 17))

        assert len(blocks) == 1
        block = blocks[0]
        assert block.title == "Daily Standup"
        assert block.date == date(2026, 2, 17)
        assert block.is_recurring is True
        assert block.recurrence_parent_id == parent.id
        assert block.recurrence_rule_id == parent.recurrence_rule_id
        assert block.sort_order == 0

    def test_repeated_query_does_not_duplicate(self, db_session, make_series, test_user_id):
        make_series(RecurrenceRule(type=RecurrenceType.DAILY))
        day = date(2026, 2, 17)

        materialize_blocks_for_date(db_session, user_id=test_user_id, day=day)
        second = materialize_blocks_for_date(db_session, user_id=test_user_id, day=day)

        assert len(second) == 1
        assert db_session.query(TimeBlockDB).filter(TimeBlockDB.date == day).count() == 1

    def test_anchor_day_returns_parent_only(self, db_session, make_series, test_user_id):
        parent = make_series(RecurrenceRule(type=RecurrenceType.DAILY))

        blocks = materialize_blocks_for_date(db_session, user_id=test_user_id, day=START)

        assert [b.id for b in blocks] == [parent.id]

    def test_stops_after_end_date(self, db_session, make_series, test_user_id):
        make_series(RecurrenceRule(type=RecurrenceType.DAILY, end_date=date(2026, 2, 18)))

        assert materialize_blocks_for_date(db_session, user_id=test_user_id, day=date(2026, 2, 19)) == []

    def test_weekly_only_on_matching_day(self, db_session, make_series, test_user_id):
        make_series(RecurrenceRule(type=RecurrenceType.WEEKLY, days_of_week="1"))

        assert materialize_blocks_for_date(db_session, user_id=test_user_id, day=date(2026, 2, 17)) == []
        assert len(materialize_blocks_for_date(db_session, user_id=test_user_id, day=date(2026, 2, 23))) == 1

    def test_weekly_extra_weekday_is_generated_per_date(self, db_session, make_series, test_user_id):
        make_series(RecurrenceRule(type=RecurrenceType.WEEKLY, days_of_week="1,3"))

        blocks = materialize_blocks_for_date(db_session, user_id=test_user_id, day=date(2026, 2, 18))

        assert len(blocks) == 1

    def test_other_users_series_are_ignored(self, db_session, make_series):
        make_series(RecurrenceRule(type=RecurrenceType.DAILY))

        assert materialize_blocks_for_date(db_session, user_id="someone-else", day=date(2026, 2, 17)) == []

    def test_blocks_ordered_by_start_time(self, db_session, make_series, block_repo, sample_block_base, test_user_id):
        make_series(RecurrenceRule(type=RecurrenceType.DAILY))
        day = date(2026, 2, 17)
        early = TimeBlock(
            **{**sample_block_base, "id": str(uuid.uuid4()), "title": "Gym", "date": day, "start_time": time(7, 0)}
        )
        block_repo.create(early)

        blocks = materialize_blocks_for_date(db_session, user_id=test_user_id, day=day)

        assert [b.title for b in blocks] == ["Gym", "Daily Standup"]


class TestMaterializeForRange:
    """Range materialization driven by generate_occurrences."""

    def test_daily_series_fills_week(self, db_session, make_series, test_user_id):
        make_series(RecurrenceRule(type=RecurrenceType.DAILY))

        blocks = materialize_blocks_for_range(
            db_session, user_id=test_user_id, start_date=START, end_date=date(2026, 2, 22)
        )

        assert len(blocks) == 7
        assert all(b.title == "Daily Standup" for b in blocks)
        assert [b.date for b in blocks] == [date(2026, 2, d) for d in range(16, 23)]

    def test_range_is_idempotent(self, db_session, make_series, test_user_id):
        make_series(RecurrenceRule(type=RecurrenceType.DAILY))
        kwargs = dict(user_id=test_user_id, start_date=START, end_date=date(2026, 2, 22))

        materialize_blocks_for_range(db_session, **kwargs)
        materialize_blocks_for_range(db_session, **kwargs)

        assert db_session.query(TimeBlockDB).count() == 7

    def test_range_then_date_does_not_duplicate(self, db_session, make_series, test_user_id):
        make_series(RecurrenceRule(type=RecurrenceType.DAILY))

        materialize_blocks_for_range(db_session, user_id=test_user_id, start_date=START, end_date=date(2026, 2, 20))
        blocks = materialize_blocks_for_date(db_session, user_id=test_user_id, day=date(2026, 2, 18))

        assert len(blocks) == 1
        assert db_session.query(TimeBlockDB).count() == 5

    def test_max_occurrences_caps_series(self, db_session, make_series, test_user_id):
        make_series(RecurrenceRule(type=RecurrenceType.DAILY, max_occurrences=3))

        blocks = materialize_blocks_for_range(
            db_session, user_id=test_user_id, start_date=START, end_date=date(2026, 2, 28)
        )

        assert [b.date for b in blocks] == [date(2026, 2, 16), date(2026, 2, 17), date(2026, 2, 18)]

    def test_weekly_monday_series(self, db_session, make_series, test_user_id):
        make_series(RecurrenceRule(type=RecurrenceType.WEEKLY, days_of_week="1"), title="Weekly Meeting")

        blocks = materialize_blocks_for_range(
            db_session, user_id=test_user_id, start_date=START, end_date=date(2026, 3, 15)
        )

        assert [b.date for b in blocks] == [date(2026, 2, 16), date(2026, 2, 23), date(2026, 3, 2), date(2026, 3, 9)]

    def test_existing_duplicates_are_collapsed(self, db_session, make_series, block_repo, test_user_id):
        parent = make_series(RecurrenceRule(type=RecurrenceType.DAILY))
        day = date(2026, 2, 17)
        block_repo.create(create_occurrence_block(parent, day))
        block_repo.create(create_occurrence_block(parent, day))

        blocks = materialize_blocks_for_range(db_session, user_id=test_user_id, start_date=day, end_date=day)

        assert len(blocks) == 1

    def test_series_with_missing_rule_is_skipped(self, db_session, make_series, rule_repo, test_user_id):
        parent = make_series(RecurrenceRule(type=RecurrenceType.DAILY))
        rule_repo.delete(parent.recurrence_rule_id)

        blocks = materialize_blocks_for_range(
            db_session, user_id=test_user_id, start_date=START, end_date=date(2026, 2, 20)
        )

        assert [b.id for b in blocks] == [parent.id]


class TestStoredRuleLeniency:
    """Rules read back from storage never make materialization fail."""

    def _stored_series(self, db_session, block_repo, sample_block_base, **rule_columns):
        db_session.add(RecurrenceRuleDB(id="stored-rule", **rule_columns))
        db_session.commit()
        return block_repo.create(
            TimeBlock(**{**sample_block_base, "is_recurring": True, "recurrence_rule_id": "stored-rule"})
        )

    def test_zero_max_occurrences_yields_nothing_in_range(
        self, db_session, block_repo, sample_block_base, test_user_id
    ):
        parent = self._stored_series(
            db_session, block_repo, sample_block_base, type="daily", interval=1, max_occurrences=0
        )

        in_range = materialize_blocks_for_range(
            db_session, user_id=test_user_id, start_date=START, end_date=date(2026, 2, 20)
        )

        assert [b.id for b in in_range] == [parent.id]

    def test_zero_max_occurrences_loads_for_single_date(
        self, db_session, block_repo, sample_block_base, test_user_id
    ):
        self._stored_series(
            db_session, block_repo, sample_block_base, type="daily", interval=1, max_occurrences=0
        )

        # Per-date membership does not apply the occurrence cap.
        blocks = materialize_blocks_for_date(db_session, user_id=test_user_id, day=date(2026, 2, 17))

        assert [b.date for b in blocks] == [date(2026, 2, 17)]

    def test_zero_interval_yields_nothing(self, db_session, block_repo, sample_block_base, test_user_id):
        parent = self._stored_series(db_session, block_repo, sample_block_base, type="daily", interval=0)

        in_range = materialize_blocks_for_range(
            db_session, user_id=test_user_id, start_date=START, end_date=date(2026, 2, 20)
        )

        assert [b.id for b in in_range] == [parent.id]

    def test_daily_rule_with_junk_weekdays_still_generates(
        self, db_session, block_repo, sample_block_base, test_user_id
    ):
        self._stored_series(
            db_session, block_repo, sample_block_base, type="daily", interval=1, days_of_week="mon"
        )

        blocks = materialize_blocks_for_date(db_session, user_id=test_user_id, day=date(2026, 2, 17))

        assert len(blocks) == 1
        assert blocks[0].date == date(2026, 2, 17)


class TestRecurringInboxItems:
    """Recurring inbox items produce blocks anchored on their creation day."""

    def test_daily_item_generates_default_slot_block(self, db_session, make_inbox_series, test_user_id):
        item = make_inbox_series(
            RecurrenceRule(type=RecurrenceType.DAILY),
            title="Daily Standup",
            description="Team sync",
            priority=InboxPriority.HIGH,
        )

        blocks = materialize_blocks_for_date(db_session, user_id=test_user_id, day=START)

        assert len(blocks) == 1
        block = blocks[0]
        assert block.title == "Daily Standup"
        assert block.subtitle == "Team sync"
        assert block.start_time == time(9, 0)
        assert block.end_time == time(9, 30)
        assert block.duration_minutes == 30
        assert block.is_urgent is True
        assert block.is_recurring is False
        assert block.recurrence_rule_id == item.recurrence_rule_id
        assert block.recurrence_parent_id is None

    def test_medium_priority_is_not_urgent(self, db_session, make_inbox_series, test_user_id):
        make_inbox_series(RecurrenceRule(type=RecurrenceType.DAILY))

        blocks = materialize_blocks_for_date(db_session, user_id=test_user_id, day=START)

        assert blocks[0].is_urgent is False

    def test_repeated_query_does_not_duplicate(self, db_session, make_inbox_series, test_user_id):
        make_inbox_series(RecurrenceRule(type=RecurrenceType.DAILY))

        materialize_blocks_for_date(db_session, user_id=test_user_id, day=START)
        blocks = materialize_blocks_for_date(db_session, user_id=test_user_id, day=START)

        assert len(blocks) == 1
        assert db_session.query(TimeBlockDB).count() == 1

    def test_nothing_before_creation_day(self, db_session, make_inbox_series, test_user_id):
        make_inbox_series(RecurrenceRule(type=RecurrenceType.DAILY))

        assert materialize_blocks_for_date(db_session, user_id=test_user_id, day=date(2026, 2, 15)) == []

    def test_weekly_item_only_on_matching_day(self, db_session, make_inbox_series, test_user_id):
        make_inbox_series(RecurrenceRule(type=RecurrenceType.WEEKLY, days_of_week="1"), title="Weekly Planning")

        assert len(materialize_blocks_for_date(db_session, user_id=test_user_id, day=date(2026, 2, 23))) == 1
        assert materialize_blocks_for_date(db_session, user_id=test_user_id, day=date(2026, 2, 24)) == []

    def test_stops_after_end_date(self, db_session, make_inbox_series, test_user_id):
        make_inbox_series(RecurrenceRule(type=RecurrenceType.DAILY, end_date=date(2026, 2, 18)))

        assert len(materialize_blocks_for_date(db_session, user_id=test_user_id, day=date(2026, 2, 18))) == 1
        assert materialize_blocks_for_date(db_session, user_id=test_user_id, day=date(2026, 2, 19)) == []

    def test_dismissed_item_generates_nothing(self, db_session, make_inbox_series, inbox_repo, test_user_id):
        item = make_inbox_series(RecurrenceRule(type=RecurrenceType.DAILY))
        inbox_repo.dismiss(test_user_id, item.id)

        assert materialize_blocks_for_date(db_session, user_id=test_user_id, day=START) == []

    def test_range_fills_week(self, db_session, make_inbox_series, test_user_id):
        make_inbox_series(RecurrenceRule(type=RecurrenceType.DAILY))

        blocks = materialize_blocks_for_range(
            db_session, user_id=test_user_id, start_date=START, end_date=date(2026, 2, 22)
        )

        assert len(blocks) == 7
        assert all(b.title == "Review inbox" for b in blocks)

    def test_same_title_as_block_series_is_not_doubled(
        self, db_session, make_series, make_inbox_series, test_user_id
    ):
        parent = make_series(RecurrenceRule(type=RecurrenceType.DAILY))
        make_inbox_series(RecurrenceRule(type=RecurrenceType.DAILY), title=parent.title)

        on_date = materialize_blocks_for_date(db_session, user_id=test_user_id, day=date(2026, 2, 17))
        in_range = materialize_blocks_for_range(
            db_session, user_id=test_user_id, start_date=START, end_date=date(2026, 2, 22)
        )

        assert len(on_date) == 1
        assert on_date[0].recurrence_parent_id == parent.id
        assert len(in_range) == 7
        assert all(b.recurrence_rule_id == parent.recurrence_rule_id for b in in_range)
