# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from syskit.logs.log_writer import LogWriter
from syskit.system.metrics import SystemMonitor
from syskit.tasks.task_store import TaskStateStore
from syskit.toolkit import SysKit

from .fakes import FakeClock, FakePsutil


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with SysKit and the helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="syskit-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        log_dir=tmp_path / "logs",
        task_state_path=tmp_path / "state" / "tasks.json",
        log_retention_days=30,
        log_json_format=False,
        log_console=False,
        log_webhook_url=None,
        image_quality=80,
        xlsx_title_bg="071E40",
        xlsx_title_color="FFFFFF",
        process_name="python",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStateStore:
    return TaskStateStore(settings.task_state_path)


@pytest.fixture()
def kit(settings: SimpleNamespace, store: TaskStateStore, clock: FakeClock) -> SysKit:
    """
    SysKit wired with a tmp log folder, tmp state file, fake clock and fake psutil.

    NOTE: the file helpers are real; their behaviour on disk is what we test.
    """
    return SysKit(
        settings,
        log_writer=LogWriter.from_settings(settings),
        task_store=store,
        monitor=SystemMonitor(FakePsutil(), process_name="python"),
        clock=clock,
    )
