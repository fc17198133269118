# src/syskit/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local directories exist,
- wires the LogWriter, task state store and system monitor into a SysKit facade.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..logs.log_writer import LogWriter
from ..system.metrics import SystemMonitor
from ..tasks.task_store import TaskStateStore
from ..toolkit import SysKit

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.log_dir.mkdir(parents=True, exist_ok=True)
    settings.task_state_path.parent.mkdir(parents=True, exist_ok=True)


def create_toolkit(*, settings=None) -> SysKit:
    """
    Create a SysKit from the provided settings.

    Keeping settings injectable makes the CLI easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    kit = SysKit(
        settings,
        log_writer=LogWriter.from_settings(settings),
        task_store=TaskStateStore(settings.task_state_path),
        monitor=SystemMonitor(process_name=settings.process_name),
    )
    logger.debug("Toolkit ready log_dir=%s task_state=%s", settings.log_dir, settings.task_state_path)
    return kit
