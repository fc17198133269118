# tests/test_task_scheduler.py

from __future__ import annotations

import asyncio

import pytest

from syskit.errors import InvalidIntervalError
from syskit.tasks.task_models import RunOutcome
from syskit.tasks.task_scheduler import TaskScheduler, run_task_scheduler
from syskit.tasks.task_store import TaskStateStore

from .fakes import FakeClock


def test_tick_runs_due_jobs_and_isolates_failures(store: TaskStateStore, clock: FakeClock) -> None:
    scheduler = TaskScheduler(store, now=clock)
    calls: list[str] = []

    def broken() -> None:
        raise RuntimeError("disk full")

    scheduler.register("report", "1 hour", lambda: calls.append("report"))
    scheduler.register("broken", "1 minute", broken)
    scheduler.register("cleanup", "1 minute", lambda: calls.append("cleanup"))

    results = scheduler.tick()

    assert results == {"report": RunOutcome.RAN, "broken": None, "cleanup": RunOutcome.RAN}
    assert calls == ["report", "cleanup"]

    clock.advance(minutes=1)
    results = scheduler.tick()
    assert results["report"] == RunOutcome.NOT_DUE
    assert results["cleanup"] == RunOutcome.RAN


def test_register_validates_interval(store: TaskStateStore) -> None:
    scheduler = TaskScheduler(store)
    with pytest.raises(InvalidIntervalError):
        scheduler.register("bad", "3 fortnights", lambda: None)
    assert scheduler.jobs == []


def test_unregister(store: TaskStateStore) -> None:
    scheduler = TaskScheduler(store)
    scheduler.register("a", "1 minute", lambda: None)
    assert scheduler.unregister("a") is True
    assert scheduler.unregister("a") is False


@pytest.mark.asyncio
async def test_scheduler_loop_respects_max_runs(store: TaskStateStore) -> None:
    scheduler = TaskScheduler(store)
    calls: list[int] = []
    scheduler.register("ping", "0 seconds", lambda: calls.append(1), max_runs=3)

    runner = asyncio.create_task(run_task_scheduler(scheduler, interval_seconds=0.01))

    await asyncio.sleep(0.1)
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    assert len(calls) == 3, "Scheduler should stop after max_runs"
    assert store.get("ping").count == 3
