# src/syskit/logs/log_writer.py

from __future__ import annotations

"""
Lightweight daily log files.

Layout: <base_path>/<category>/<YYYY-MM-DD>.log (category optional).
Each entry is one line, either plain text

    [2025-01-31 10:00:00] [info] Backup done {"size": 1024}

or a JSON object (json_format=True). Files older than the retention period are
removed from the folder after every write.

This is a user-facing activity log; the toolkit's own diagnostics go through the
stdlib `logging` module (see LogWriterHandler to route them here as well).
"""

import json
import logging
import sys
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Any

import requests

logger = logging.getLogger(__name__)

LEVELS = ("debug", "info", "success", "warning", "error", "critical")
ALERT_LEVELS = frozenset({"error", "critical"})

_COLORS = {
    "debug": "\033[0;36m",
    "info": "\033[0;37m",
    "success": "\033[0;32m",
    "warning": "\033[1;33m",
    "error": "\033[0;31m",
    "critical": "\033[1;41m",
}
_RESET = "\033[0m"

# stdlib level -> toolkit level
_STDLIB_LEVELS = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "critical",
}


def _now_str() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def interpolate(message: str, context: dict[str, Any] | None) -> str:
    """Replace {key} placeholders with context values ("User {name}" -> "User Sam")."""
    if not context:
        return message
    out = message
    for key, val in context.items():
        if isinstance(val, (str, int, float, bool)):
            rep = str(val)
        else:
            rep = json.dumps(val, ensure_ascii=False, default=str)
        out = out.replace("{" + str(key) + "}", rep)
    return out


class LogWriter:
    """Writes toolkit log entries to per-day, per-category files."""

    def __init__(
            self,
            base_path: str | Path = ".local/syskit/logs",
            *,
            retention_days: int = 30,
            json_format: bool = False,
            show_in_console: bool = True,
            webhook_url: str | None = None,
            buffer_mode: bool = False,
            webhook_timeout: float = 5.0,
    ) -> None:
        self._base_path = Path(base_path)
        self._retention_days = max(1, int(retention_days))
        self._json_format = bool(json_format)
        self._show_in_console = bool(show_in_console)
        self._webhook_url = webhook_url
        self._webhook_timeout = float(webhook_timeout)
        self._buffer_mode = bool(buffer_mode)
        self._buffer: list[tuple[dict[str, Any], str | None]] = []
        self._capturing = False

    @classmethod
    def from_settings(cls, settings) -> LogWriter:
        return cls(
            settings.log_dir,
            retention_days=settings.log_retention_days,
            json_format=settings.log_json_format,
            show_in_console=settings.log_console,
            webhook_url=settings.log_webhook_url,
        )

    # ---- configuration ----

    @property
    def base_path(self) -> Path:
        return self._base_path

    def set_base_path(self, path: str | Path) -> None:
        self._base_path = Path(path)

    def set_retention(self, days: int) -> None:
        self._retention_days = max(1, int(days))

    def set_show_in_console(self, show: bool) -> None:
        self._show_in_console = bool(show)

    def set_json_format(self, json_format: bool) -> None:
        self._json_format = bool(json_format)

    def enable_webhook(self, url: str | None) -> None:
        self._webhook_url = url or None

    def set_buffer_mode(self, enable: bool) -> None:
        self._buffer_mode = bool(enable)

    @property
    def buffered(self) -> int:
        return len(self._buffer)

    # ---- writing ----

    def write(
            self,
            message: str,
            level: str = "info",
            category: str | None = None,
            context: dict[str, Any] | None = None,
    ) -> None:
        level = (level or "info").lower()
        if level not in LEVELS:
            level = "info"
        context = dict(context or {})

        entry = {
            "time": _now_str(),
            "level": level,
            "message": interpolate(message, context),
            "context": context,
        }

        if self._buffer_mode:
            self._buffer.append((entry, category))
            return

        self._store(entry, category)

    def flush_buffer(self) -> int:
        """Write buffered entries to disk. Returns how many were written."""
        pending, self._buffer = self._buffer, []
        for entry, category in pending:
            self._store(entry, category)
        return len(pending)

    def _folder(self, category: str | None) -> Path:
        return self._base_path / category if category else self._base_path

    def _format_line(self, entry: dict[str, Any]) -> str:
        if self._json_format:
            return json.dumps(entry, ensure_ascii=False, default=str) + "\n"
        ctx = json.dumps(entry["context"], ensure_ascii=False, default=str)
        # One entry per line.
        message = str(entry["message"]).replace("\r", "\\r").replace("\n", "\\n")
        return f"[{entry['time']}] [{entry['level']}] {message} {ctx}\n"

    def _store(self, entry: dict[str, Any], category: str | None) -> None:
        folder = self._folder(category)
        folder.mkdir(parents=True, exist_ok=True)
        file = folder / f"{entry['time'][:10]}.log"

        with open(file, "a", encoding="utf-8") as fh:
            fh.write(self._format_line(entry))

        self.rotate(folder)

        if self._show_in_console and sys.stdout.isatty():
            self._cli_output(entry["message"], entry["level"])

        if self._webhook_url and entry["level"] in ALERT_LEVELS:
            self._send_webhook(entry)

    def rotate(self, folder: Path | None = None) -> int:
        """Remove *.log files older than the retention period. Returns removed count."""
        folder = folder or self._base_path
        limit_ts = time.time() - self._retention_days * 86400
        removed = 0
        for fp in folder.glob("*.log"):
            try:
                if fp.stat().st_mtime < limit_ts:
                    fp.unlink()
                    removed += 1
            except OSError:
                logger.debug("Rotation skipped %s", fp, exc_info=True)
        return removed

    @staticmethod
    def _cli_output(message: str, level: str) -> None:
        color = _COLORS.get(level, _RESET)
        sys.stdout.write(f"{color}[{level}] {message}{_RESET}\n")
        sys.stdout.flush()

    def _send_webhook(self, entry: dict[str, Any]) -> None:
        try:
            resp = requests.post(
                self._webhook_url,
                data=json.dumps(entry, ensure_ascii=False, default=str).encode("utf-8"),
                headers={"Content-Type": "application/json"},
                timeout=self._webhook_timeout,
            )
            resp.raise_for_status()
        except requests.RequestException:
            # Never let alert delivery break the caller.
            logger.warning("Webhook delivery failed url=%s", self._webhook_url, exc_info=True)

    # ---- reading ----

    def get_recent_logs(self, category: str | None = None, limit: int = 50) -> list[str]:
        """Today's non-empty lines for the category, newest first."""
        file = self._folder(category) / f"{datetime.now().strftime('%Y-%m-%d')}.log"
        if not file.exists():
            return []
        lines = [ln for ln in file.read_text("utf-8").splitlines() if ln.strip()]
        lines.reverse()
        return lines[: max(0, int(limit))]

    # ---- error capture ----

    def capture_errors(self) -> None:
        """
        Route uncaught exceptions (main thread and worker threads) into critical entries,
        and Python warnings into warning entries. The previous hooks still run afterwards.

        Calling it again is a no-op. Warnings are not routed a second time when a
        LogWriterHandler for this writer already sees the `py.warnings` records.
        """
        if self._capturing:
            return
        self._capturing = True

        prev_hook = sys.excepthook
        prev_thread_hook = threading.excepthook

        def _hook(exc_type, exc, tb) -> None:
            self._log_uncaught(exc)
            prev_hook(exc_type, exc, tb)

        def _thread_hook(args) -> None:
            if args.exc_value is not None:
                self._log_uncaught(args.exc_value)
            prev_thread_hook(args)

        sys.excepthook = _hook
        threading.excepthook = _thread_hook

        logging.captureWarnings(True)
        warnings_logger = logging.getLogger("py.warnings")
        if not self._has_handler(warnings_logger):
            warnings_logger.addHandler(LogWriterHandler(self, level=logging.WARNING))

    def _has_handler(self, log: logging.Logger) -> bool:
        """True if a LogWriterHandler bound to this writer is on `log`'s propagation path."""
        current: logging.Logger | None = log
        while current is not None:
            for handler in current.handlers:
                if isinstance(handler, LogWriterHandler) and handler.writer is self:
                    return True
            if not current.propagate:
                break
            current = current.parent
        return False

    def _log_uncaught(self, exc: BaseException) -> None:
        tb = exc.__traceback__
        while tb is not None and tb.tb_next is not None:
            tb = tb.tb_next
        context: dict[str, Any] = {}
        if tb is not None:
            context = {"file": tb.tb_frame.f_code.co_filename, "line": tb.tb_lineno}
        self.write(f"Uncaught exception: {exc}", "critical", None, context)

    # ---- shortcuts ----

    def debug(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.write(message, "debug", None, context)

    def info(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.write(message, "info", None, context)

    def success(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.write(message, "success", None, context)

    def warning(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.write(message, "warning", None, context)

    def error(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.write(message, "error", None, context)

    def critical(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.write(message, "critical", None, context)


class LogWriterHandler(logging.Handler):
    """
    Bridge stdlib logging records into a LogWriter.

    The record's logger name is kept in the entry context; `category` selects the
    sub-folder (None -> base folder).
    """

    def __init__(self, writer: LogWriter, *, category: str | None = None, level: int = logging.INFO) -> None:
        super().__init__(level=level)
        self._writer = writer
        self._category = category

    @property
    def writer(self) -> LogWriter:
        return self._writer

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = _STDLIB_LEVELS.get(record.levelno, "info")
            self._writer.write(record.getMessage(), level, self._category, {"logger": record.name})
        except Exception:
            self.handleError(record)
