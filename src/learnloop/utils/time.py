"""Time utilities for learnloop.

Provides timezone-aware "now" plus parsing of the loosely formatted
timestamps found in operational logs.
"""

import re
from datetime import UTC, datetime

# [YYYY-MM-DD HH:MM[:SS] [TZ]]; the trailing zone word is ignored
_LOG_TIMESTAMP = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})"
    r"(?:[ T]+(?P<time>\d{1,2}:\d{2}(?::\d{2})?))?"
    r"(?:\s*[A-Za-z]+)?$"
)


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(UTC)


def parse_timestamp(value: str) -> datetime | None:
    """Parse a log timestamp into a datetime.

    Accepts ISO-8601 strings (``datetime.fromisoformat``) and the log format
    ``YYYY-MM-DD HH:MM[:SS] [TZ]``. Zone abbreviations are not normalized:
    the result is naive wall-clock time in that case.

    Returns:
        The parsed datetime, or None if the value is not recognizable.
    """
    text = value.strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    match = _LOG_TIMESTAMP.match(text)
    if not match:
        return None
    stamp = match.group("date")
    clock = match.group("time") or "00:00"
    if clock.count(":") == 1:
        clock += ":00"
    try:
        return datetime.strptime(f"{stamp} {clock}", "%Y-%m-%d %H:%M:%S")
    except ValueError:
        return None


def days_between(earlier: datetime, later: datetime) -> float:
    """Fractional days from ``earlier`` to ``later``.

    Mixed naive/aware pairs are compared by treating the naive value as
    local time.
    """
    if (earlier.tzinfo is None) != (later.tzinfo is None):
        earlier = earlier.astimezone()
        later = later.astimezone()
    return (later - earlier).total_seconds() / 86400.0
