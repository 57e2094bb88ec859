"""APScheduler instance that executes queued tasks."""
from __future__ import annotations

from functools import lru_cache

from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.jobstores.sqlalchemy import SQLAlchemyJobStore
from apscheduler.schedulers.background import BackgroundScheduler

from braindump.core.config import settings


def build_scheduler() -> BackgroundScheduler:
    if settings.task_jobstore_url:
        jobstore = SQLAlchemyJobStore(url=settings.task_jobstore_url, tablename="task_jobs")
    else:
        jobstore = MemoryJobStore()
    return BackgroundScheduler(
        jobstores={"default": jobstore},
        executors={"default": ThreadPoolExecutor(max_workers=settings.task_workers)},
        job_defaults={"coalesce": False, "max_instances": 1, "misfire_grace_time": None},
        timezone=settings.scheduler_timezone,
    )


@lru_cache
def get_scheduler() -> BackgroundScheduler:
    """Return the process-wide scheduler (not started until the worker starts)."""
    return build_scheduler()
