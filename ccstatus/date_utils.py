"""Approximate timestamp helpers for elapsed-time display.

Timestamps are converted with a simplified calendar (365-day years, 30-day
months, no leap days). The values are only meaningful relative to each other
and are used to show rough agent runtimes, so the approximation is kept as-is.
"""
from __future__ import annotations

import re
import time

_NUMBER_RE = re.compile(r"^\+?\d+$")
_SECONDS_PER_DAY = 86400


def _numeric_parts(token: str, sep: str) -> list[int]:
    return [int(part) for part in token.split(sep) if _NUMBER_RE.match(part)]


def parse_timestamp_seconds(value: str | None) -> int | None:
    """Convert an ISO-8601-like timestamp to approximate seconds since epoch."""
    if not value or not isinstance(value, str):
        return None
    token = value.rstrip("Z")
    pieces = token.split("T")
    if len(pieces) != 2:
        return None

    date_parts = _numeric_parts(pieces[0], "-")
    time_parts = _numeric_parts(pieces[1].split(".")[0], ":")
    if len(date_parts) != 3 or len(time_parts) != 3:
        return None

    year, month, day = date_parts
    if year < 1970:
        return None
    hours, minutes, seconds = time_parts

    days_since_epoch = (year - 1970) * 365 + month * 30 + day
    seconds_in_day = hours * 3600 + minutes * 60 + seconds
    return days_since_epoch * _SECONDS_PER_DAY + seconds_in_day


def now_seconds() -> int:
    return int(time.time())


def calculate_elapsed(start: str | None, end: str | None, now: int | None = None) -> int:
    """Seconds between start and end; a missing bound falls back to ``now``."""
    now_value = now_seconds() if now is None else now
    start_secs = parse_timestamp_seconds(start)
    end_secs = parse_timestamp_seconds(end)
    if start_secs is None:
        start_secs = now_value
    if end_secs is None:
        end_secs = now_value
    return max(0, end_secs - start_secs)
