# src/syskit/tasks/task_scheduler.py

from __future__ import annotations

"""
Task scheduler.

A small polling loop that:
- walks the registered jobs one after another,
- lets run_every decide (from the shared state file) whether each job is due,
- logs and skips jobs that fail, so one broken job does not starve the others.

Jobs never run concurrently; a slow job delays the next ones.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..ports import Clock, TaskStateRepo
from .interval import parse_interval
from .task_models import RunOutcome
from .task_runner import run_every

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ScheduledJob:
    key: str
    interval: str
    callback: Callable[[], Any]
    max_runs: int = 0


class TaskScheduler:
    """Registry of periodic jobs sharing one state store."""

    def __init__(self, store: TaskStateRepo, *, now: Clock | None = None) -> None:
        self._store = store
        self._now = now
        self._jobs: dict[str, ScheduledJob] = {}

    @property
    def jobs(self) -> list[ScheduledJob]:
        return list(self._jobs.values())

    def register(
            self,
            key: str,
            interval: str,
            callback: Callable[[], Any],
            *,
            max_runs: int = 0,
    ) -> ScheduledJob:
        # Fail at registration time rather than on every tick.
        parse_interval(interval)
        job = ScheduledJob(key=key, interval=interval, callback=callback, max_runs=int(max_runs))
        if key in self._jobs:
            logger.warning("Job '%s' re-registered; replacing previous definition", key)
        self._jobs[key] = job
        return job

    def unregister(self, key: str) -> bool:
        return self._jobs.pop(key, None) is not None

    def tick(self) -> dict[str, RunOutcome | None]:
        """
        Evaluate every job once.

        Returns key -> outcome; None marks a job whose callback (or state access) failed.
        """
        results: dict[str, RunOutcome | None] = {}
        for job in list(self._jobs.values()):
            try:
                results[job.key] = run_every(
                    job.interval,
                    job.callback,
                    job.key,
                    job.max_runs,
                    store=self._store,
                    now=self._now,
                )
            except Exception:
                logger.exception("Job '%s' failed", job.key)
                results[job.key] = None
        return results


async def run_task_scheduler(
        scheduler: TaskScheduler,
        *,
        interval_seconds: float = 30.0,
) -> None:
    """
    Simple polling loop: tick(), then sleep interval_seconds.

    The poll interval only bounds how late a job may start; each job's own
    interval is enforced by run_every. To stop the scheduler, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        results = scheduler.tick()
        ran = [key for key, outcome in results.items() if outcome == RunOutcome.RAN]
        if ran:
            logger.debug("Scheduler tick ran jobs: %s", ", ".join(ran))

        await asyncio.sleep(sleep_s)
