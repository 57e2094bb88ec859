"""Start and stop the in-process task worker."""
from __future__ import annotations

import logging
from typing import Optional

from apscheduler.schedulers.base import BaseScheduler

from braindump.core.config import settings
from braindump.services.task_queue import SchedulerTaskQueue
from braindump.worker.scheduler import get_scheduler
from braindump.worker.tasks import recover_pending_brain_dumps

logger = logging.getLogger(__name__)


def start_worker(scheduler: Optional[BaseScheduler] = None) -> bool:
    """Start consuming queued tasks. Returns False when disabled via config."""
    scheduler = scheduler or get_scheduler()
    if not settings.scheduler_enabled:
        logger.warning("Scheduler disabled via config; queued tasks will not run")
        return False
    if scheduler.running:
        return True

    scheduler.start()
    logger.info(
        "Task worker started (workers=%s, jobstore=%s)",
        settings.task_workers,
        "sqlalchemy" if settings.task_jobstore_url else "memory",
    )

    if settings.task_recover_on_startup:
        try:
            recover_pending_brain_dumps(SchedulerTaskQueue(scheduler))
        except Exception:  # pragma: no cover - depends on database availability
            logger.exception("Startup recovery of unprocessed brain dumps failed")
    return True


def stop_worker(scheduler: Optional[BaseScheduler] = None) -> None:
    scheduler = scheduler or get_scheduler()
    if scheduler.running:
        logger.info("Task worker shutting down")
        scheduler.shutdown(wait=False)
