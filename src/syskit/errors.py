# src/syskit/errors.py

from __future__ import annotations


class SysKitError(Exception):
    """Base class for every error raised by syskit helpers."""


class InvalidIntervalError(SysKitError, ValueError):
    """Interval string could not be parsed (unknown unit, bad amount)."""


class FileOperationError(SysKitError):
    pass


class ArchiveError(SysKitError):
    pass


class ExportError(SysKitError):
    pass


class UnsupportedFormatError(SysKitError):
    pass
