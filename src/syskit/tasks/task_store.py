# src/syskit/tasks/task_store.py

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from .task_models import TaskRecord

logger = logging.getLogger(__name__)


def default_state_path() -> Path:
    return Path(tempfile.gettempdir()) / "syskit_tasks.json"


class TaskStateStore:
    """
    JSON file holding one record per task key:

        {"backup": {"lastRun": "2025-01-31 10:00:00", "count": 3}, ...}

    Every call re-reads the file; there is no cache and no cross-process lock,
    so two processes racing on the same key can lose an update.
    Writes go through a temp file + os.replace, so readers never see a partial file.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path is not None else default_state_path()

    @property
    def path(self) -> Path:
        return self._path

    # ---- low-level helpers ----

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8") or "{}")
        except (OSError, ValueError):
            logger.exception("Failed to read task state from %s; treating as empty", self._path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Task state in %s is not an object; treating as empty", self._path)
            return {}
        return data

    def _save(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(f"{self._path.name}.{os.getpid()}.tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=4), "utf-8")
        os.replace(tmp, self._path)

    # ---- public API ----

    def get(self, key: str) -> TaskRecord:
        return TaskRecord.from_json(self._load().get(key))

    def put(self, key: str, record: TaskRecord) -> None:
        data = self._load()
        data[key] = record.to_json()
        self._save(data)

    def reset(self, key: str) -> bool:
        """Forget a task key. Returns True if it existed."""
        data = self._load()
        if key not in data:
            return False
        del data[key]
        self._save(data)
        logger.info("Task state reset key=%s", key)
        return True

    def all(self) -> dict[str, TaskRecord]:
        return {str(k): TaskRecord.from_json(v) for k, v in self._load().items()}
