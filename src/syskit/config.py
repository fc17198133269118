# src/syskit/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole toolkit, injected into helpers.
- Every value has a sane default; nothing is required at import time.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "SYSKIT"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_optional(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return raw.strip()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local paths ----
    data_dir: Path
    log_dir: Path
    task_state_path: Path

    # ---- Log writer ----
    log_retention_days: int
    log_json_format: bool
    log_console: bool
    log_webhook_url: str | None

    # ---- Helpers ----
    image_quality: int
    xlsx_title_bg: str
    xlsx_title_color: str
    process_name: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "syskit")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/syskit"))
        log_dir = _env_path(_k("LOG_DIR"), data_dir / "logs")
        # Shared across processes on the same host, like a crontab.
        task_state_path = _env_path(
            _k("TASK_STATE_PATH"), Path(tempfile.gettempdir()) / "syskit_tasks.json"
        )

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            log_dir=log_dir,
            task_state_path=task_state_path,
            log_retention_days=max(1, _env_int(_k("LOG_RETENTION_DAYS"), 30)),
            log_json_format=_env_bool(_k("LOG_JSON_FORMAT"), False),
            log_console=_env_bool(_k("LOG_CONSOLE"), True),
            log_webhook_url=_env_optional(_k("LOG_WEBHOOK_URL")),
            image_quality=_env_int(_k("IMAGE_QUALITY"), 80),
            xlsx_title_bg=_env(_k("XLSX_TITLE_BG"), "071E40"),
            xlsx_title_color=_env(_k("XLSX_TITLE_COLOR"), "FFFFFF"),
            process_name=_env(_k("PROCESS_NAME"), "python"),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
