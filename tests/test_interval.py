# tests/test_interval.py

from __future__ import annotations

import pytest

from syskit.errors import InvalidIntervalError
from syskit.tasks.interval import parse_interval


@pytest.mark.parametrize(
    ("text", "seconds"),
    [
        ("30 seconds", 30),
        ("1 second", 1),
        ("5 minutes", 300),
        ("1 minute", 60),
        ("2 hours", 7200),
        ("1 Hour", 3600),
        ("3 days", 259200),
        ("  1 DAY ", 86400),
        ("0 minutes", 0),
    ],
)
def test_parse_interval_known_units(text: str, seconds: int) -> None:
    assert parse_interval(text) == seconds


@pytest.mark.parametrize("text", ["5 weeks", "10 fortnights", "5", "", "minutes", "five minutes", "-1 hour"])
def test_parse_interval_rejects_invalid(text: str) -> None:
    with pytest.raises(InvalidIntervalError):
        parse_interval(text)


def test_invalid_interval_is_a_value_error() -> None:
    with pytest.raises(ValueError, match="Invalid interval"):
        parse_interval("1 month")
