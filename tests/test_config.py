# tests/test_config.py

from __future__ import annotations

import tempfile
from pathlib import Path

from syskit.config import Settings


def test_defaults(monkeypatch) -> None:
    for name in ("SYSKIT_DATA_DIR", "SYSKIT_LOG_DIR", "SYSKIT_TASK_STATE_PATH", "SYSKIT_LOG_RETENTION_DAYS"):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()

    assert s.data_dir == Path(".local/syskit")
    assert s.log_dir == Path(".local/syskit/logs")
    assert s.task_state_path == Path(tempfile.gettempdir()) / "syskit_tasks.json"
    assert s.log_retention_days == 30


def test_env_overrides(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SYSKIT_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SYSKIT_LOG_RETENTION_DAYS", "0")
    monkeypatch.setenv("SYSKIT_LOG_JSON_FORMAT", "yes")
    monkeypatch.setenv("SYSKIT_LOG_WEBHOOK_URL", "  https://hooks.example/x ")
    monkeypatch.setenv("SYSKIT_IMAGE_QUALITY", "not-a-number")

    s = Settings.from_env()

    assert s.log_dir == tmp_path / "logs"
    assert s.log_retention_days == 1
    assert s.log_json_format is True
    assert s.log_webhook_url == "https://hooks.example/x"
    assert s.image_quality == 80
