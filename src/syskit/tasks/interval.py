# src/syskit/tasks/interval.py

from __future__ import annotations

from ..errors import InvalidIntervalError

_UNIT_SECONDS = {
    "second": 1,
    "seconds": 1,
    "minute": 60,
    "minutes": 60,
    "hour": 3600,
    "hours": 3600,
    "day": 86400,
    "days": 86400,
}


def parse_interval(interval: str) -> int:
    """
    Convert a human-readable interval ("5 minutes", "1 hour") into seconds.

    Accepted units: second(s), minute(s), hour(s), day(s), case-insensitive.
    Raises InvalidIntervalError for anything else.
    """
    parts = (interval or "").strip().split(None, 1)
    if len(parts) != 2:
        raise InvalidIntervalError(f"Invalid interval: {interval!r}")

    raw_value, raw_unit = parts
    try:
        value = int(raw_value)
    except ValueError:
        raise InvalidIntervalError(f"Invalid interval: {interval!r}") from None

    if value < 0:
        raise InvalidIntervalError(f"Invalid interval: {interval!r}")

    factor = _UNIT_SECONDS.get(raw_unit.strip().lower())
    if factor is None:
        raise InvalidIntervalError(f"Invalid interval: {interval!r}")

    return value * factor
