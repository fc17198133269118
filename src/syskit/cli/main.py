# src/syskit/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds the SysKit facade, then dispatches
`syskit <command> [args]` through the command registry.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_toolkit
from ..config import get_settings
from ..errors import SysKitError
from ..logging_setup import setup_logging
from ..logs.log_writer import LogWriterHandler
from .commands import registry

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    argv = list(sys.argv[1:] if argv is None else argv)

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    kit = create_toolkit(settings=settings)

    # Toolkit warnings/errors also land in the daily "syskit" log category.
    setup_logging(
        log_dir=settings.log_dir,
        console_level=console_level,
        extra_handlers=[LogWriterHandler(kit.log_writer, category="syskit", level=logging.WARNING)],
    )
    kit.log_writer.capture_errors()

    def emit(text: str) -> None:
        print(text, flush=True)

    try:
        reply = registry.handle(kit, argv or ["help"], emit=emit)
    except SysKitError as exc:
        logger.error("%s", exc)
        return 1

    if reply:
        print(reply)
    return 0


if __name__ == "__main__":
    sys.exit(main())
