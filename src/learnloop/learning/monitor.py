"""Log monitoring: turn operational logs into structured entries.

Reads two kinds of sources:
- the primary running log (``<ops>/RUNLOG.md``), one file appended forever
- dated daily logs (``<memory>/YYYY-MM-DD.md``) within a retention window

Only lines of the form ``[<date> <time> [tz]] <rest>`` carry signal; every
other line (prose, headings, blank lines) is dropped without complaint.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from pathlib import Path

from learnloop.core.constants import (
    DEFAULT_DAYS_BACK,
    DEFAULT_DATED_DIR,
    DEFAULT_PRIMARY_DIR,
    PRIMARY_LOG_NAME,
)
from learnloop.core.errors import ErrorCategory
from learnloop.core.logging import get_logger

_logger = get_logger("monitor")

_TIMESTAMPED_LINE = re.compile(r"^\[(\d{4}-\d{2}-\d{2}\s+[\d:]+\s*\w*)\]\s*(.+)$")
_DATED_LOG_NAME = re.compile(r"^(\d{4}-\d{2}-\d{2})\.[A-Za-z0-9]+$")
_TRAILING_DURATION = re.compile(r"\((\d+(?:\.\d+)?)\s*(ms|s|m)\)\s*$")

_DURATION_SCALE = {"ms": 0.001, "s": 1.0, "m": 60.0}


@dataclass(frozen=True)
class LogEntry:
    """One structured line from a log file."""

    timestamp: str
    """Opaque, lexically sortable date-time string from the bracket."""

    action: str
    """Raw (un-normalized) action text."""

    outcome: str
    file: str
    """Provenance: the file the line was read from."""

    duration: float | None = None
    """Seconds, when the outcome ends with a ``(12s)``-style suffix."""


@dataclass
class MonitorResult:
    """Result of reading one or more log sources."""

    success: bool
    entries: list[LogEntry] = field(default_factory=list)
    error: str | None = None


# An extractor receives the text after the timestamp and returns
# (action, outcome) or None when it does not apply.
Extractor = Callable[[str], tuple[str, str] | None]


def _extract_action_outcome(rest: str) -> tuple[str, str] | None:
    colon = rest.find(":")
    if colon <= 0:
        return None
    return rest[:colon].strip(), rest[colon + 1 :].strip()


def _extract_bare_action(rest: str) -> tuple[str, str] | None:
    return rest.strip(), ""


EXTRACTORS: list[tuple[str, Extractor]] = [
    ("action_outcome", _extract_action_outcome),
    ("bare_action", _extract_bare_action),
]
"""Named extractors tried in priority order; the first non-None result wins."""


def _parse_duration(outcome: str) -> float | None:
    match = _TRAILING_DURATION.search(outcome)
    if not match:
        return None
    return float(match.group(1)) * _DURATION_SCALE[match.group(2)]


def parse_line(line: str, file: str) -> LogEntry | None:
    """Parse a single log line.

    Args:
        line: Raw line text.
        file: Provenance recorded on the entry.

    Returns:
        A LogEntry, or None if the line has no bracketed timestamp prefix.
    """
    match = _TIMESTAMPED_LINE.match(line)
    if not match:
        return None

    timestamp, rest = match.group(1), match.group(2)
    for _name, extractor in EXTRACTORS:
        extracted = extractor(rest)
        if extracted is not None:
            action, outcome = extracted
            return LogEntry(
                timestamp=timestamp,
                action=action,
                outcome=outcome,
                file=file,
                duration=_parse_duration(outcome),
            )
    return None


def parse_log(content: str, file: str) -> list[LogEntry]:
    """Parse every line of a log, preserving file order (no sorting)."""
    entries: list[LogEntry] = []
    skipped = 0
    for line in content.splitlines():
        entry = parse_line(line, file)
        if entry is not None:
            entries.append(entry)
        elif line.strip():
            skipped += 1
    if skipped:
        _logger.debug(
            "monitor.lines_skipped",
            file=file,
            skipped=skipped,
            category=ErrorCategory.PARSE_SKIP.value,
        )
    return entries


def _sorted_by_timestamp(entries: list[LogEntry]) -> list[LogEntry]:
    # Zero-padded ISO-like strings sort correctly as text
    return sorted(entries, key=lambda e: e.timestamp)


def _read_text(path: Path) -> str:
    with open(path, encoding="utf-8") as f:
        return f.read()


async def read_primary_log(path: Path | str) -> MonitorResult:
    """Read and parse the primary running log.

    Never raises: an unreadable file yields ``success=False`` with the
    error message and no entries.
    """
    path = Path(path)
    try:
        content = await asyncio.to_thread(_read_text, path)
    except (OSError, UnicodeDecodeError) as e:
        _logger.warning(
            "monitor.source_failed",
            source=str(path),
            category=ErrorCategory.SOURCE_UNAVAILABLE.value,
            error=str(e),
        )
        return MonitorResult(success=False, entries=[], error=str(e))

    entries = parse_log(content, str(path))
    _logger.debug("monitor.primary_read", source=str(path), entries=len(entries))
    return MonitorResult(success=True, entries=entries)


def _dated_files(directory: Path, cutoff: date) -> list[tuple[Path, str]]:
    selected: list[tuple[Path, str]] = []
    for path in sorted(directory.iterdir()):
        match = _DATED_LOG_NAME.match(path.name)
        if not match:
            continue
        try:
            file_date = date.fromisoformat(match.group(1))
        except ValueError:
            _logger.debug("monitor.invalid_dated_name", file=path.name)
            continue
        if file_date >= cutoff:
            selected.append((path, path.name))
    return selected


def _cutoff_date(now: datetime, days_back: int) -> date:
    try:
        return (now - timedelta(days=days_back)).date()
    except OverflowError:
        # Window reaches past year 1: every dated file qualifies
        return date.min


async def read_dated_logs(
    directory: Path | str,
    days_back: int = DEFAULT_DAYS_BACK,
    now: datetime | None = None,
) -> MonitorResult:
    """Read dated logs (``YYYY-MM-DD.<ext>``) from the last ``days_back`` days.

    A file qualifies when its date is on or after the calendar day
    ``days_back`` days before ``now``. Entries are merged across files and
    sorted by timestamp.

    On failure the entries gathered before the error are still returned,
    with ``success=False``.
    """
    directory = Path(directory)
    now = now or datetime.now()
    cutoff = _cutoff_date(now, days_back)
    entries: list[LogEntry] = []

    try:
        files = await asyncio.to_thread(_dated_files, directory, cutoff)
        for path, name in files:
            content = await asyncio.to_thread(_read_text, path)
            entries.extend(parse_log(content, name))
    except (OSError, UnicodeDecodeError) as e:
        _logger.warning(
            "monitor.source_failed",
            source=str(directory),
            category=ErrorCategory.SOURCE_UNAVAILABLE.value,
            error=str(e),
        )
        return MonitorResult(
            success=False,
            entries=_sorted_by_timestamp(entries),
            error=str(e),
        )

    _logger.debug(
        "monitor.dated_read",
        source=str(directory),
        files=len(files),
        entries=len(entries),
    )
    return MonitorResult(success=True, entries=_sorted_by_timestamp(entries))


async def monitor_all(
    primary_dir: Path | str = DEFAULT_PRIMARY_DIR,
    dated_dir: Path | str = DEFAULT_DATED_DIR,
    days_back: int = DEFAULT_DAYS_BACK,
    now: datetime | None = None,
) -> MonitorResult:
    """Read both sources concurrently and merge them.

    The pass succeeds if either source succeeds; a total failure requires
    both to fail. Errors from both sources are joined with ``"; "``.
    """
    primary, dated = await asyncio.gather(
        read_primary_log(Path(primary_dir) / PRIMARY_LOG_NAME),
        read_dated_logs(dated_dir, days_back, now=now),
    )

    entries = _sorted_by_timestamp([*primary.entries, *dated.entries])
    errors = [e for e in (primary.error, dated.error) if e]

    result = MonitorResult(
        success=primary.success or dated.success,
        entries=entries,
        error="; ".join(errors) or None,
    )
    _logger.info(
        "monitor.pass_complete",
        success=result.success,
        entries=len(entries),
        primary_ok=primary.success,
        dated_ok=dated.success,
    )
    return result
