from __future__ import annotations

from datetime import datetime, timezone

import pytest
from apscheduler.schedulers.background import BackgroundScheduler

from braindump.services.task_queue import (
    PROCESS_BRAIN_DUMP_TASK,
    TASK_HANDLERS,
    InMemoryTaskQueue,
    SchedulerTaskQueue,
    TaskMessage,
    UnknownTask,
)


@pytest.fixture()
def paused_scheduler():
    scheduler = BackgroundScheduler(timezone="UTC")
    scheduler.start(paused=True)
    yield scheduler
    scheduler.shutdown(wait=False)


def test_job_id_is_stable_per_payload():
    first = TaskMessage(task=PROCESS_BRAIN_DUMP_TASK, payload={"brain_dump_id": "abc"})
    second = TaskMessage(task=PROCESS_BRAIN_DUMP_TASK, payload={"brain_dump_id": "abc"}, delay_seconds=5)

    assert first.job_id == second.job_id == "process_brain_dump:brain_dump_id=abc"


def test_scheduler_queue_adds_one_job_per_record(paused_scheduler):
    queue = SchedulerTaskQueue(paused_scheduler)

    queue.enqueue(PROCESS_BRAIN_DUMP_TASK, {"brain_dump_id": "abc"})
    queue.enqueue(PROCESS_BRAIN_DUMP_TASK, {"brain_dump_id": "abc"})
    queue.enqueue(PROCESS_BRAIN_DUMP_TASK, {"brain_dump_id": "def"})

    jobs = paused_scheduler.get_jobs()
    assert sorted(job.id for job in jobs) == [
        "process_brain_dump:brain_dump_id=abc",
        "process_brain_dump:brain_dump_id=def",
    ]
    job = paused_scheduler.get_job("process_brain_dump:brain_dump_id=abc")
    assert job.kwargs == {"brain_dump_id": "abc"}
    assert job.func_ref == TASK_HANDLERS[PROCESS_BRAIN_DUMP_TASK]


def test_unknown_task_is_rejected(paused_scheduler):
    with pytest.raises(UnknownTask):
        InMemoryTaskQueue().enqueue("reticulate_splines", {})
    with pytest.raises(UnknownTask):
        SchedulerTaskQueue(paused_scheduler).enqueue("reticulate_splines", {})


def test_in_memory_drain_runs_handlers_in_order(monkeypatch):
    calls = []
    import braindump.worker.tasks as tasks

    monkeypatch.setattr(tasks, "process_brain_dump_task", lambda brain_dump_id: calls.append(brain_dump_id))
    queue = InMemoryTaskQueue()
    queue.enqueue(PROCESS_BRAIN_DUMP_TASK, {"brain_dump_id": "1"})
    queue.enqueue(PROCESS_BRAIN_DUMP_TASK, {"brain_dump_id": "2"})

    assert queue.drain() == 2
    assert calls == ["1", "2"]
    assert queue.messages == []


def test_scheduler_queue_runs_without_delay(paused_scheduler):
    SchedulerTaskQueue(paused_scheduler).enqueue(PROCESS_BRAIN_DUMP_TASK, {"brain_dump_id": "abc"})

    job = paused_scheduler.get_job("process_brain_dump:brain_dump_id=abc")
    assert job.next_run_time <= datetime.now(timezone.utc)


def test_enqueue_warns_when_scheduler_not_started(caplog):
    scheduler = BackgroundScheduler(timezone="UTC")

    with caplog.at_level("WARNING", logger="braindump.services.task_queue"):
        SchedulerTaskQueue(scheduler).enqueue(PROCESS_BRAIN_DUMP_TASK, {"brain_dump_id": "abc"})

    assert "Scheduler is not running" in caplog.text
    assert len(scheduler.get_jobs()) == 1


def test_enqueue_on_running_scheduler_does_not_warn(paused_scheduler, caplog):
    with caplog.at_level("WARNING", logger="braindump.services.task_queue"):
        SchedulerTaskQueue(paused_scheduler).enqueue(PROCESS_BRAIN_DUMP_TASK, {"brain_dump_id": "abc"})

    assert "Scheduler is not running" not in caplog.text
