# src/syskit/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the helpers.

Helpers depend on Protocols instead of concrete implementations, which keeps
the state file, the clock and the metrics provider swappable in tests.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any, Protocol

Clock = Callable[[], datetime]
# Returns local wall-clock time (naive), matching the task state file format.


class TaskStateRepo(Protocol):
    def get(self, key: str) -> Any: ...
    def put(self, key: str, record: Any) -> None: ...
    def reset(self, key: str) -> bool: ...


class LogSink(Protocol):
    """Anything that accepts toolkit log entries (LogWriter in production)."""

    def write(
            self,
            message: str,
            level: str = "info",
            category: str | None = None,
            context: dict[str, Any] | None = None,
    ) -> None: ...
