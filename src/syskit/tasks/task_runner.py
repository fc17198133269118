# src/syskit/tasks/task_runner.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from ..ports import Clock, LogSink, TaskStateRepo
from .interval import parse_interval
from .task_models import RunOutcome, TaskRecord
from .task_store import TaskStateStore

logger = logging.getLogger(__name__)


def _report(sink: LogSink | None, level: str, message: str) -> None:
    if sink is not None:
        sink.write(message, level)
    else:
        getattr(logger, level)(message)


def run_every(
        interval: str,
        callback: Callable[[], Any],
        key: str = "default",
        max_runs: int = 0,
        *,
        store: TaskStateRepo | None = None,
        now: Clock | None = None,
        sink: LogSink | None = None,
) -> RunOutcome:
    """
    Run `callback` at most once per `interval` for the given task key.

    Gate, evaluated against the persisted record of `key`:
    - max_runs > 0 and count >= max_runs -> skip (warning logged)
    - now - last_run >= interval           -> run, then persist {finish time, count + 1}
    - otherwise                            -> not due, nothing written

    last_run is read from the clock after the callback returns, so a slow callback
    pushes the next due time back.

    If the callback raises, the exception propagates and the record is left untouched,
    so the next invocation retries.

    Outcomes go to `sink` when given, otherwise to this module's logger.
    """
    seconds = parse_interval(interval)
    store = store if store is not None else TaskStateStore()
    clock = now or datetime.now

    record: TaskRecord = store.get(key)

    if max_runs > 0 and record.count >= max_runs:
        _report(sink, "warning", f"Task '{key}' reached its maximum number of runs ({max_runs})")
        return RunOutcome.MAX_RUNS_REACHED

    current = clock().replace(microsecond=0)
    if record.last_run is not None and (current - record.last_run).total_seconds() < seconds:
        logger.debug("Task '%s' not due yet (every %s)", key, interval)
        return RunOutcome.NOT_DUE

    callback()

    finished = clock().replace(microsecond=0)
    store.put(key, TaskRecord(last_run=finished, count=record.count + 1))
    _report(sink, "info", f"Task '{key}' executed automatically (every {interval})")
    return RunOutcome.RAN
