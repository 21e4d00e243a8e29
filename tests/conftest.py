"""Pytest fixtures and configuration for Tymblok tests."""

import pytest
import uuid
from datetime import date, datetime, time
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from unittest.mock import patch

from tymblok.database.database import Base, get_db
from tymblok.database import models  # noqa: F401
from tymblok.database.inbox_item_repository import InboxItemRepository
from tymblok.database.recurrence_rule_repository import RecurrenceRuleRepository
from tymblok.database.time_block_repository import TimeBlockRepository
from tymblok.models.inbox_item import InboxItem
from tymblok.models.time_block import TimeBlock


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def test_user_id():
    """Test user ID for multi-user testing."""
    return "test-user-123"


@pytest.fixture
def block_repo(db_session: Session):
    return TimeBlockRepository(db_session)


@pytest.fixture
def rule_repo(db_session: Session):
    return RecurrenceRuleRepository(db_session)


@pytest.fixture
def inbox_repo(db_session: Session):
    return InboxItemRepository(db_session)


@pytest.fixture
def sample_block_base(test_user_id):
    """Base block data for creating test blocks.

    Returns a dict with default block attributes that can be overridden.
    """
    now = datetime.utcnow()
    return {
        "id": str(uuid.uuid4()),
        "user_id": test_user_id,
        "title": "Daily Standup",
        "subtitle": None,
        "date": date(2026, 2, 16),
        "start_time": time(9, 0),
        "end_time": time(9, 15),
        "duration_minutes": 15,
        "is_urgent": False,
        "is_completed": False,
        "sort_order": 1,
        "is_recurring": False,
        "recurrence_rule_id": None,
        "recurrence_parent_id": None,
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def make_series(block_repo, rule_repo, sample_block_base):
    """Persist a recurring parent block with the given rule; returns the parent."""

    def _make(rule, **overrides):
        rule_row = rule_repo.create(rule)
        block = TimeBlock(
            **{
                **sample_block_base,
                "id": str(uuid.uuid4()),
                "is_recurring": True,
                "recurrence_rule_id": rule_row.id,
                **overrides,
            }
        )
        return block_repo.create(block)

    return _make


@pytest.fixture
def make_inbox_series(inbox_repo, rule_repo, test_user_id):
    """Persist a recurring inbox item created at `created_at`; returns the item."""

    def _make(rule, created_at=datetime(2026, 2, 16, 8, 30), **overrides):
        rule_row = rule_repo.create(rule)
        item = InboxItem(
            **{
                "id": str(uuid.uuid4()),
                "user_id": test_user_id,
                "title": "Review inbox",
                "is_recurring": True,
                "recurrence_rule_id": rule_row.id,
                "created_at": created_at,
                "updated_at": created_at,
                **overrides,
            }
        )
        return inbox_repo.create(item)

    return _make


@pytest.fixture
def test_client(db_session: Session, test_user_id):
    """Create a FastAPI test client with overridden database dependency."""
    from tymblok.api.app import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db

    with patch("tymblok.api.app.init_db"), TestClient(app, headers={"X-User-Id": test_user_id}) as client:
        yield client

    app.dependency_overrides.clear()
