"""Task queue abstraction between request handlers and the background worker.

Producers call ``enqueue``; the worker side resolves the task name to a handler
and calls it with the payload as keyword arguments. Handlers are referenced by
``module:function`` strings so that persistent job stores can serialize them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from apscheduler.schedulers.base import BaseScheduler
from apscheduler.util import ref_to_obj

from braindump.worker.scheduler import get_scheduler

logger = logging.getLogger(__name__)

PROCESS_BRAIN_DUMP_TASK = "process_brain_dump"

TASK_HANDLERS: Dict[str, str] = {
    PROCESS_BRAIN_DUMP_TASK: "braindump.worker.tasks:process_brain_dump_task",
}


class UnknownTask(KeyError):
    """Raised when a message names a task with no registered handler."""


@dataclass(frozen=True)
class TaskMessage:
    task: str
    payload: Dict[str, Any] = field(default_factory=dict)
    delay_seconds: float = 0.0

    @property
    def job_id(self) -> str:
        """Stable id: one pending job per task and payload."""
        args = ",".join(f"{key}={self.payload[key]}" for key in sorted(self.payload))
        return f"{self.task}:{args}"

    @property
    def handler_ref(self) -> str:
        try:
            return TASK_HANDLERS[self.task]
        except KeyError:
            raise UnknownTask(self.task) from None


class TaskQueue:
    """Base interface for task queue backends."""

    def enqueue(self, task: str, payload: Dict[str, Any], *, delay_seconds: float = 0.0) -> TaskMessage:
        raise NotImplementedError


class SchedulerTaskQueue(TaskQueue):
    """Queue backed by an APScheduler scheduler; its executor pool is the worker."""

    def __init__(self, scheduler: BaseScheduler) -> None:
        self._scheduler = scheduler

    def enqueue(self, task: str, payload: Dict[str, Any], *, delay_seconds: float = 0.0) -> TaskMessage:
        message = TaskMessage(task=task, payload=dict(payload), delay_seconds=delay_seconds)
        run_date = datetime.now(timezone.utc) + timedelta(seconds=max(delay_seconds, 0.0))
        self._scheduler.add_job(
            message.handler_ref,
            trigger="date",
            run_date=run_date,
            kwargs=message.payload,
            id=message.job_id,
            name=task,
            replace_existing=True,
            misfire_grace_time=None,
        )
        if not self._scheduler.running:
            logger.warning("Scheduler is not running; %s will wait until the worker starts", message.job_id)
        else:
            logger.debug("Enqueued %s (delay=%ss)", message.job_id, delay_seconds)
        return message


class InMemoryTaskQueue(TaskQueue):
    """Queue that holds messages until ``drain`` runs them in the calling thread."""

    def __init__(self) -> None:
        self.messages: List[TaskMessage] = []

    def enqueue(self, task: str, payload: Dict[str, Any], *, delay_seconds: float = 0.0) -> TaskMessage:
        message = TaskMessage(task=task, payload=dict(payload), delay_seconds=delay_seconds)
        if task not in TASK_HANDLERS:
            raise UnknownTask(task)
        self.messages.append(message)
        return message

    def drain(self) -> int:
        """Run every queued message in FIFO order; handler errors propagate."""
        ran = 0
        while self.messages:
            message = self.messages.pop(0)
            handler = ref_to_obj(message.handler_ref)
            handler(**message.payload)
            ran += 1
        return ran


def get_task_queue() -> TaskQueue:
    """FastAPI dependency returning the process-wide queue."""
    return SchedulerTaskQueue(get_scheduler())
