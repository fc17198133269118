# src/syskit/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

# Wall-clock format used in the shared state file.
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class RunOutcome(StrEnum):
    """What run_every decided for a single invocation."""

    RAN = "ran"
    NOT_DUE = "not_due"
    MAX_RUNS_REACHED = "max_runs_reached"


@dataclass(frozen=True, slots=True)
class TaskRecord:
    """
    Persisted state of one task key.

    last_run is None when the task never ran (or the stored value is unreadable).
    """

    last_run: datetime | None = None
    count: int = 0

    def to_json(self) -> dict[str, Any]:
        return {
            "lastRun": self.last_run.strftime(TIMESTAMP_FORMAT) if self.last_run else None,
            "count": int(self.count),
        }

    @classmethod
    def from_json(cls, raw: Any) -> TaskRecord:
        if not isinstance(raw, dict):
            return cls()

        last_run: datetime | None = None
        raw_last = raw.get("lastRun")
        if isinstance(raw_last, str):
            try:
                last_run = datetime.strptime(raw_last, TIMESTAMP_FORMAT)
            except ValueError:
                last_run = None

        try:
            count = max(0, int(raw.get("count") or 0))
        except (TypeError, ValueError):
            count = 0

        return cls(last_run=last_run, count=count)
