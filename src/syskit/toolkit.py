# src/syskit/toolkit.py

"""
SysKit facade.

One object wiring the helpers to a Settings instance: backups, file
maintenance, logging, periodic tasks, image optimization, system monitoring
and XLSX export. The helpers stay usable on their own; the facade only
supplies configured defaults (log folder, task state file, quality, colors).
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

from .config import get_settings
from .excel.xlsx_writer import export_rows
from .files import archive, fs_ops
from .images.optimize import optimize_image
from .logs.log_writer import LogWriter
from .ports import Clock
from .system.metrics import SystemMonitor
from .tasks.task_models import RunOutcome
from .tasks.task_runner import run_every
from .tasks.task_store import TaskStateStore


class SysKit:
    def __init__(
            self,
            settings=None,
            *,
            log_writer: LogWriter | None = None,
            task_store: TaskStateStore | None = None,
            monitor: SystemMonitor | None = None,
            clock: Clock | None = None,
    ) -> None:
        self.settings = settings if settings is not None else get_settings()
        self.log_writer = log_writer or LogWriter.from_settings(self.settings)
        self.task_store = task_store or TaskStateStore(self.settings.task_state_path)
        self.system = monitor or SystemMonitor(process_name=self.settings.process_name)
        self._clock = clock

    # ---- backups and files ----

    def backup_folder(self, source: str | Path, destination: str | Path, exclude: Iterable[str] = ()) -> bool:
        """Create a ZIP backup of a folder or file."""
        return archive.zip_path(source, destination, exclude)

    def restore_backup(self, zip_file: str | Path, destination: str | Path) -> bool:
        return archive.unzip(zip_file, destination)

    def delete_old_files(
            self,
            path: str | Path,
            days: int,
            *,
            recursive: bool = False,
            exclude: Iterable[str] = (),
            simulate: bool = False,
    ) -> int:
        return fs_ops.delete_old_files(path, days, recursive=recursive, exclude=exclude, simulate=simulate)

    def copy(self, source: str | Path, destination: str | Path, exclude: Iterable[str] = ()) -> bool:
        return fs_ops.copy(source, destination, exclude)

    def move(self, source: str | Path, destination: str | Path, exclude: Iterable[str] = ()) -> bool:
        return fs_ops.move(source, destination, exclude)

    def delete(self, path: str | Path) -> bool:
        return fs_ops.delete(path)

    def dir_size(self, path: str | Path, human_readable: bool = True) -> str | int:
        size = fs_ops.dir_size(path)
        return fs_ops.human_size(size) if human_readable else size

    def ensure_directory(self, path: str | Path, mode: int = 0o775) -> Path:
        return fs_ops.ensure_directory(path, mode)

    def list_files(self, path: str | Path, pattern: str | None = None) -> list[Path]:
        return fs_ops.list_files(path, pattern)

    # ---- logs ----

    def log(
            self,
            message: str,
            level: str = "info",
            category: str | None = None,
            context: dict[str, Any] | None = None,
    ) -> None:
        self.log_writer.write(message, level, category, context)

    # ---- periodic tasks ----

    def run_every(
            self,
            interval: str,
            callback: Callable[[], Any],
            key: str = "default",
            max_runs: int = 0,
    ) -> RunOutcome:
        """
        Run `callback` at most once per `interval` (e.g. '5 minutes', '1 hour').

        max_runs=0 means unlimited. Outcomes are written to the toolkit log.
        """
        return run_every(
            interval, callback, key, max_runs, store=self.task_store, now=self._clock, sink=self.log_writer
        )

    # ---- images ----

    def optimize_image(self, path: str | Path, quality: int | None = None) -> bool:
        return optimize_image(path, self.settings.image_quality if quality is None else quality)

    # ---- system ----

    def info(self) -> dict[str, Any]:
        return self.system.get_info()

    def monitor(self, as_json: bool = True) -> str | dict[str, Any]:
        """CPU, RAM, disk, uptime, temperature... as pretty JSON or a dict."""
        data = self.system.get_metrics()
        return json.dumps(data, indent=2, ensure_ascii=False) if as_json else data

    def health(self) -> dict[str, Any]:
        return self.system.get_health()

    # ---- excel ----

    def export_excel(
            self,
            file_path: str | Path,
            rows: Sequence[Mapping[str, Any]] | Sequence[Sequence[Any]],
            headers: Sequence[Any] | None = None,
    ) -> bool:
        return export_rows(
            file_path,
            rows,
            headers,
            title_bg=self.settings.xlsx_title_bg,
            title_color=self.settings.xlsx_title_color,
        )
