"""Create, list and fetch brain dumps on behalf of a caller."""
from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from braindump.core.errors import AuthenticationRequired
from braindump.db.models.brain_dump import BrainDump
from braindump.services.task_queue import PROCESS_BRAIN_DUMP_TASK, TaskQueue

logger = logging.getLogger(__name__)

RECENT_LIMIT = 10


def create_brain_dump(db: Session, queue: TaskQueue, *, user_id: Optional[UUID], original_text: str) -> UUID:
    """Persist an unprocessed brain dump and schedule its analysis."""
    if user_id is None:
        raise AuthenticationRequired()

    brain_dump = BrainDump(
        user_id=user_id,
        original_text=original_text,
        summary="",
        what_matters=[],
        what_doesnt=[],
        actionable_focus="",
        processed=False,
    )
    db.add(brain_dump)
    try:
        db.flush()
        brain_dump_id = brain_dump.id
        db.commit()
    except IntegrityError:
        db.rollback()
        raise

    # Enqueue only after commit so the worker can always see the row.
    queue.enqueue(PROCESS_BRAIN_DUMP_TASK, {"brain_dump_id": str(brain_dump_id)})
    logger.info("Brain dump %s created; processing scheduled", brain_dump_id)
    return brain_dump_id


def list_recent_brain_dumps(db: Session, *, user_id: Optional[UUID], limit: int = RECENT_LIMIT) -> List[BrainDump]:
    """Newest-first brain dumps owned by the caller; anonymous callers see none."""
    if user_id is None:
        return []
    return (
        db.query(BrainDump)
        .filter(BrainDump.user_id == user_id)
        .order_by(BrainDump.created_at.desc(), BrainDump.id.desc())
        .limit(limit)
        .all()
    )


def get_brain_dump(db: Session, *, user_id: Optional[UUID], brain_dump_id: UUID | str) -> Optional[BrainDump]:
    """Return the record only to its owner.

    Unknown ids, malformed ids, anonymous callers and other users' records all
    yield None so a caller cannot probe for records it does not own.
    """
    if user_id is None:
        return None
    try:
        key = brain_dump_id if isinstance(brain_dump_id, UUID) else UUID(str(brain_dump_id))
    except ValueError:
        return None
    brain_dump = db.get(BrainDump, key)
    if brain_dump is None or brain_dump.user_id != user_id:
        return None
    return brain_dump


def requeue_unprocessed_brain_dumps(db: Session, queue: TaskQueue) -> int:
    """Schedule processing again for every record still waiting on it."""
    rows = (
        db.query(BrainDump.id)
        .filter(BrainDump.processed.is_(False))
        .order_by(BrainDump.created_at.asc())
        .all()
    )
    for (brain_dump_id,) in rows:
        queue.enqueue(PROCESS_BRAIN_DUMP_TASK, {"brain_dump_id": str(brain_dump_id)})
    if rows:
        logger.info("Re-enqueued %s unprocessed brain dump(s)", len(rows))
    return len(rows)
