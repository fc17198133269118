"""
SysKit: system automation helpers.

Backups and file maintenance, daily log files, "run every N minutes" tasks,
image optimization, system monitoring and lightweight XLSX export.
"""

from .errors import (
    ArchiveError,
    ExportError,
    FileOperationError,
    InvalidIntervalError,
    SysKitError,
    UnsupportedFormatError,
)
from .tasks.task_models import RunOutcome
from .toolkit import SysKit

__all__ = [
    "ArchiveError",
    "ExportError",
    "FileOperationError",
    "InvalidIntervalError",
    "RunOutcome",
    "SysKit",
    "SysKitError",
    "UnsupportedFormatError",
]
