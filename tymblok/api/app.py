"""FastAPI web application for Tymblok."""

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import date, datetime, timedelta

from fastapi import Depends, FastAPI, HTTPException, Query, status
from sqlalchemy.orm import Session

from tymblok.api.dependencies import get_current_user_id
from tymblok.api.schemas import (
    BlockCreateRequest,
    BlockListResponse,
    BlockResponse,
    InboxItemCreateRequest,
    InboxItemResponse,
    NextOccurrencesRequest,
    OccurrenceCheckRequest,
    OccurrenceCheckResponse,
    OccurrencesResponse,
    OccurrenceWindowRequest,
    RecurrencePayload,
)
from tymblok.database.database import get_db, init_db
from tymblok.database.inbox_item_repository import InboxItemRepository
from tymblok.database.recurrence_rule_repository import RecurrenceRuleRepository
from tymblok.database.time_block_repository import TimeBlockRepository
from tymblok.models.inbox_item import InboxItem
from tymblok.models.time_block import TimeBlock
from tymblok.recurrence.engine import generate_next_occurrences, generate_occurrences, is_occurrence_date
from tymblok.recurrence.materialize import materialize_blocks_for_date, materialize_blocks_for_range

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


# Initialize FastAPI app
app = FastAPI(
    title="Tymblok API",
    description="Time blocks with daily, weekly and monthly recurrence",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


@app.post("/blocks", response_model=BlockResponse, status_code=status.HTTP_201_CREATED)
def create_block(
    request: BlockCreateRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create a block. With `is_recurring` and a recurrence, the block becomes a series parent."""
    block_repo = TimeBlockRepository(db)

    rule_id = None
    recurrence = None
    if request.is_recurring and request.recurrence is not None:
        rule = request.recurrence.to_rule()
        rule_id = RecurrenceRuleRepository(db).create(rule).id
        recurrence = RecurrencePayload.from_rule(rule)

    # Wraps past midnight like a wall clock.
    end_time = (datetime.combine(request.date, request.start_time) + timedelta(minutes=request.duration_minutes)).time()
    now = datetime.utcnow()
    block = TimeBlock(
        id=str(uuid.uuid4()),
        user_id=user_id,
        title=request.title,
        subtitle=request.subtitle,
        date=request.date,
        start_time=request.start_time,
        end_time=end_time,
        duration_minutes=request.duration_minutes,
        is_urgent=request.is_urgent,
        sort_order=block_repo.next_sort_order(user_id, request.date),
        is_recurring=request.is_recurring,
        recurrence_rule_id=rule_id,
        recurrence_parent_id=None,
        created_at=now,
        updated_at=now,
    )
    created = block_repo.create(block)
    return BlockResponse(block=created, recurrence=recurrence)


@app.get("/blocks", response_model=BlockListResponse)
def list_blocks_for_date(
    day: date = Query(..., alias="date"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """List blocks on a day, generating recurring occurrences that are due."""
    return BlockListResponse(blocks=materialize_blocks_for_date(db, user_id=user_id, day=day))


@app.get("/blocks/range", response_model=BlockListResponse)
def list_blocks_for_range(
    start: date,
    end: date,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """List blocks in [start, end], generating recurring occurrences that are due."""
    if end < start:
        raise HTTPException(status_code=400, detail="end must be on or after start")
    blocks = materialize_blocks_for_range(db, user_id=user_id, start_date=start, end_date=end)
    return BlockListResponse(blocks=blocks)


@app.delete("/blocks/{block_id}/recurrence", response_model=BlockResponse)
def remove_recurrence(
    block_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Stop a recurring series. Accepts the parent block or any of its occurrences."""
    block_repo = TimeBlockRepository(db)
    block = block_repo.get(user_id, block_id)
    if block is None:
        raise HTTPException(status_code=404, detail="Block not found")

    parent_id = block.recurrence_parent_id or block.id
    updated = block_repo.clear_recurrence(user_id, parent_id)
    if updated is None:
        raise HTTPException(status_code=404, detail="Recurring series not found")
    logger.info(f"Removed recurrence from series {parent_id}")
    return BlockResponse(block=updated, recurrence=None)


@app.post("/inbox", response_model=InboxItemResponse, status_code=status.HTTP_201_CREATED)
def create_inbox_item(
    request: InboxItemCreateRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create an inbox item. A recurring item produces a block on each matching day from today."""
    rule_id = None
    recurrence = None
    if request.is_recurring and request.recurrence is not None:
        rule = request.recurrence.to_rule()
        rule_id = RecurrenceRuleRepository(db).create(rule).id
        recurrence = RecurrencePayload.from_rule(rule)

    now = datetime.utcnow()
    item = InboxItem(
        id=str(uuid.uuid4()),
        user_id=user_id,
        title=request.title,
        description=request.description,
        priority=request.priority,
        is_recurring=request.is_recurring,
        recurrence_rule_id=rule_id,
        created_at=now,
        updated_at=now,
    )
    created = InboxItemRepository(db).create(item)
    return InboxItemResponse(item=created, recurrence=recurrence)


@app.post("/inbox/{item_id}/dismiss", response_model=InboxItemResponse)
def dismiss_inbox_item(
    item_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Dismiss an inbox item. A dismissed recurring item stops producing blocks."""
    item = InboxItemRepository(db).dismiss(user_id, item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Inbox item not found")
    return InboxItemResponse(item=item)


@app.post("/recurrence/occurrences", response_model=OccurrencesResponse)
def preview_occurrences(request: OccurrenceWindowRequest):
    """Occurrence dates of a rule within a window (nothing is stored)."""
    dates = generate_occurrences(
        request.rule.to_rule(),
        request.start_date,
        request.from_date,
        request.to_date,
    )
    return OccurrencesResponse(dates=dates)


@app.post("/recurrence/next", response_model=OccurrencesResponse)
def preview_next_occurrences(request: NextOccurrencesRequest):
    """The next `count` occurrence dates of a rule from its start date."""
    dates = generate_next_occurrences(request.rule.to_rule(), request.start_date, request.count)
    return OccurrencesResponse(dates=dates)


@app.post("/recurrence/check", response_model=OccurrenceCheckResponse)
def check_occurrence(request: OccurrenceCheckRequest):
    """Whether a single date belongs to a rule's series."""
    return OccurrenceCheckResponse(
        is_occurrence=is_occurrence_date(request.rule.to_rule(), request.start_date, request.date)
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
