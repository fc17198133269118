# src/syskit/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import cast

from ..errors import SysKitError
from ..files.fs_ops import human_size
from ..toolkit import SysKit

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[SysKit, list[str]], str]
CommandHandler3 = Callable[[SysKit, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple sub-command registry used by the CLI (help, backup, monitor, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        kit: SysKit,
        argv: list[str],
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle an argument vector like ["backup", "src", "out.zip"].
        Returns a reply string or None if argv is empty.
        """
        if not argv:
            return None

        name = argv[0].lower()
        args = argv[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: {name}. Use 'syskit help' to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(kit, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(kit, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  {name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _split_flags(args: list[str]) -> tuple[list[str], set[str]]:
    positional = [a for a in args if not a.startswith("--")]
    flags = {a[2:].lower() for a in args if a.startswith("--")}
    return positional, flags


def cmd_help(kit: SysKit, args: list[str]) -> str:
    return registry.build_help()


def cmd_backup(kit: SysKit, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    backup <source> <destination.zip> [exclude-pattern ...]
    """
    if len(args) < 2:
        return "Usage: backup <source> <destination.zip> [exclude-pattern ...]"

    source, destination, *exclude = args
    if emit:
        with contextlib.suppress(Exception):
            emit(f"Compressing {source}...")

    kit.backup_folder(source, destination, exclude)
    kit.log("Backup created {destination}", "success", "backups", {"source": source, "destination": destination})
    return f"Backup written to {destination} ({human_size(Path(destination).stat().st_size)})."


def cmd_restore(kit: SysKit, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: restore <archive.zip> <destination>"
    kit.restore_backup(args[0], args[1])
    return f"Extracted {args[0]} into {args[1]}."


def cmd_clean(kit: SysKit, args: list[str]) -> str:
    """
    clean <path> <days> [--recursive] [--dry-run]
    """
    positional, flags = _split_flags(args)
    if len(positional) != 2:
        return "Usage: clean <path> <days> [--recursive] [--dry-run]"
    try:
        days = int(positional[1])
    except ValueError:
        return f"Invalid number of days: {positional[1]}"

    simulate = "dry-run" in flags
    count = kit.delete_old_files(positional[0], days, recursive="recursive" in flags, simulate=simulate)
    verb = "Would delete" if simulate else "Deleted"
    return f"{verb} {count} file(s) older than {days} day(s) in {positional[0]}."


def cmd_size(kit: SysKit, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: size <path>"
    return f"{args[0]}: {kit.dir_size(args[0])}"


def cmd_info(kit: SysKit, args: list[str]) -> str:
    return json.dumps(kit.info(), indent=2, ensure_ascii=False)


def cmd_monitor(kit: SysKit, args: list[str]) -> str:
    return str(kit.monitor(as_json=True))


def cmd_health(kit: SysKit, args: list[str]) -> str:
    health = kit.health()
    return f"Status: {health['status']} (at {health['timestamp']})"


def cmd_optimize(kit: SysKit, args: list[str]) -> str:
    """
    optimize <image> [quality]
    """
    if not args or len(args) > 2:
        return "Usage: optimize <image> [quality]"
    quality = None
    if len(args) == 2:
        try:
            quality = int(args[1])
        except ValueError:
            return f"Invalid quality: {args[1]}"
    kit.optimize_image(args[0], quality)
    return f"Optimized {args[0]}."


def cmd_logs(kit: SysKit, args: list[str]) -> str:
    """
    logs [category] [limit]
    """
    category = args[0] if args and args[0] != "-" else None
    limit = 20
    if len(args) > 1:
        try:
            limit = int(args[1])
        except ValueError:
            return f"Invalid limit: {args[1]}"
    lines = kit.log_writer.get_recent_logs(category, limit)
    if not lines:
        return "No log entries today."
    return "\n".join(lines)


def cmd_tasks(kit: SysKit, args: list[str]) -> str:
    """
    tasks            -> list persisted task state
    tasks reset KEY  -> forget a task (it will run on next invocation)
    """
    if args and args[0].lower() == "reset":
        if len(args) != 2:
            return "Usage: tasks reset <key>"
        return f"Task '{args[1]}' reset." if kit.task_store.reset(args[1]) else f"No state for task '{args[1]}'."

    records = kit.task_store.all()
    if not records:
        return f"No task state in {kit.task_store.path}."
    lines = [f"Task state ({kit.task_store.path}):"]
    for key, rec in sorted(records.items()):
        last = rec.last_run.strftime("%Y-%m-%d %H:%M:%S") if rec.last_run else "never"
        lines.append(f"  {key}: last run {last}, {rec.count} run(s)")
    return "\n".join(lines)


def cmd_export(kit: SysKit, args: list[str]) -> str:
    """
    export <rows.json> <output.xlsx>   (rows.json = list of objects)
    """
    if len(args) != 2:
        return "Usage: export <rows.json> <output.xlsx>"
    try:
        rows = json.loads(Path(args[0]).read_text("utf-8"))
    except (OSError, ValueError) as exc:
        raise SysKitError(f"Could not read rows from {args[0]}") from exc
    if not isinstance(rows, list):
        return f"{args[0]} must contain a JSON list of objects."
    kit.export_excel(args[1], rows)
    return f"Exported {len(rows)} row(s) to {args[1]}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("backup", cmd_backup, help_text="ZIP a folder or file: backup <src> <dest.zip> [exclude...].")
registry.register("restore", cmd_restore, help_text="Extract a backup: restore <zip> <dest>.")
registry.register("clean", cmd_clean, help_text="Delete old files: clean <path> <days> [--recursive] [--dry-run].")
registry.register("size", cmd_size, help_text="Human-readable size of a folder or file.")
registry.register("info", cmd_info, help_text="Interpreter and OS information.")
registry.register("monitor", cmd_monitor, help_text="CPU, memory, disk, temperature and network metrics (JSON).")
registry.register("health", cmd_health, help_text="OK / HIGH LOAD summary.")
registry.register("optimize", cmd_optimize, help_text="Re-encode an image: optimize <image> [quality].")
registry.register("logs", cmd_logs, help_text="Today's log lines: logs [category|-] [limit].")
registry.register("tasks", cmd_tasks, help_text="Periodic task state: tasks | tasks reset <key>.")
registry.register("export", cmd_export, help_text="JSON rows to XLSX: export <rows.json> <out.xlsx>.")
