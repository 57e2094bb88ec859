"""Task handlers executed by the background worker."""
from __future__ import annotations

import logging

from braindump.core.context import bound_request_id
from braindump.core.errors import BrainDumpNotFound
from braindump.db.session import SessionLocal
from braindump.services.brain_dump_processor import process_brain_dump
from braindump.services.brain_dump_service import requeue_unprocessed_brain_dumps
from braindump.services.task_queue import PROCESS_BRAIN_DUMP_TASK, TaskQueue

logger = logging.getLogger(__name__)


def process_brain_dump_task(brain_dump_id: str) -> None:
    with bound_request_id(f"task:{PROCESS_BRAIN_DUMP_TASK}:{brain_dump_id}"):
        session = SessionLocal()
        try:
            result = process_brain_dump(session, brain_dump_id)
            logger.info("Brain dump %s processed (fallback=%s)", result.brain_dump_id, result.used_fallback)
        except BrainDumpNotFound:
            # Not retried: the record stays unprocessed.
            logger.exception("Brain dump %s vanished before processing", brain_dump_id)
            raise
        finally:
            session.close()


def recover_pending_brain_dumps(queue: TaskQueue) -> int:
    """Startup sweep re-enqueueing records that never reached processed."""
    with bound_request_id("task:recover"):
        session = SessionLocal()
        try:
            return requeue_unprocessed_brain_dumps(session, queue)
        finally:
            session.close()
