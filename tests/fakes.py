# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from types import SimpleNamespace
from typing import Any


class FakeClock:
    """
    Deterministic wall clock for the task runner.

    - Callable like datetime.now
    - advance() moves time forward
    """

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2025, 1, 31, 10, 0, 0)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current = self.current + timedelta(**kwargs)


@dataclass(slots=True)
class RecordingSink:
    """LogSink that keeps entries in memory."""

    entries: list[dict[str, Any]] = field(default_factory=list)

    def write(self, message, level="info", category=None, context=None) -> None:
        self.entries.append({"message": message, "level": level, "category": category, "context": context})


# Fixed epoch for boot_time(); tests pin time.time() relative to it.
BOOT_TIME = 1_700_000_000.0


class FakePsutil:
    """
    Stand-in for the psutil module used by SystemMonitor tests.

    Only the functions SystemMonitor calls are provided; values are fixed.
    """

    def __init__(self, *, cpu: float = 12.5, mem_percent: float = 40.0) -> None:
        self.cpu = cpu
        self.mem_percent = mem_percent

    def boot_time(self) -> float:
        return BOOT_TIME

    def cpu_count(self) -> int:
        return 4

    def cpu_percent(self, interval=None) -> float:
        return self.cpu

    def getloadavg(self):
        return (0.5, 0.25, 0.125)

    def virtual_memory(self):
        return SimpleNamespace(total=8 * 1024 ** 3, percent=self.mem_percent)

    def disk_usage(self, path):
        return SimpleNamespace(total=100 * 1024 ** 3, free=25 * 1024 ** 3)

    def process_iter(self, attrs=None):
        names = ["python3", "bash", "Python", "nginx"]
        return [SimpleNamespace(info={"name": n}) for n in names]

    def sensors_temperatures(self):
        return {"coretemp": [SimpleNamespace(label="Package", current=47.0)]}

    def net_io_counters(self, pernic=False):
        return {"eth0": SimpleNamespace(bytes_sent=10, bytes_recv=20, packets_sent=1, packets_recv=2)}


class BrokenPsutil:
    """Every probe raises, as on a locked-down host."""

    def __getattr__(self, name: str):
        def _fail(*args, **kwargs):
            raise PermissionError(name)

        return _fail
