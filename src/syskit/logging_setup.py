# src/syskit/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - allow all syskit logs
    - suppress Python warnings (captured as 'py.warnings') unless ERROR+
    - suppress third-party noise (PIL, urllib3) unless WARNING+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == "syskit" or name.startswith("syskit."):
            return True

        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        return record.levelno >= logging.WARNING


def setup_logging(
    *,
    log_dir: str | Path = ".local/syskit/logs",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    extra_handlers: list[logging.Handler] | None = None,
) -> None:
    """
    Configure logging with:
    - Console handler: filtered for interactive use
    - File handler: full logs for debugging (syskit.log)
    - Optional extra handlers (e.g. LogWriterHandler for daily category files)

    Call this ONCE, very early (before first logger.info).
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "syskit.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    for handler in extra_handlers or []:
        root.addHandler(handler)

    logging.captureWarnings(True)

    logging.getLogger("PIL").setLevel(logging.INFO)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
