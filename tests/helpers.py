"""Shared test helpers for learnloop tests."""

from __future__ import annotations

from learnloop.learning.confidence import ConfidenceResult
from learnloop.learning.decision import level_for
from learnloop.learning.monitor import LogEntry
from learnloop.learning.patterns import Pattern
from learnloop.triggers.pattern_validated import (
    NotificationTarget,
    PatternValidatedEvent,
    TargetType,
)


def make_entry(
    timestamp: str,
    action: str,
    outcome: str = "",
    file: str = "RUNLOG.md",
) -> LogEntry:
    return LogEntry(timestamp=timestamp, action=action, outcome=outcome, file=file)


def make_pattern(
    action: str,
    occurrences: int = 3,
    examples: list[str] | None = None,
    last_seen: str = "2026-10-18 12:00",
) -> Pattern:
    """Build a pattern directly, bypassing detection."""
    return Pattern(
        name=action.lower().replace("_", "-"),
        action=action,
        occurrences=occurrences,
        examples=examples if examples is not None else ["done"],
        first_seen="2026-10-01 09:00",
        last_seen=last_seen,
    )


def make_confidence(score: int) -> ConfidenceResult:
    return ConfidenceResult(score=score, level=level_for(score))


def log_lines(
    action: str,
    count: int,
    outcome: str,
    hour: int = 0,
    day: str = "2026-10-18",
) -> list[str]:
    """``count`` RUNLOG lines for one action, one minute apart from ``hour``:00."""
    lines = []
    for i in range(count):
        h, m = divmod(i, 60)
        lines.append(f"[{day} {hour + h:02d}:{m:02d}] {action}: {outcome}")
    return lines


class RecordingNotifier:
    """Notifier that records what it was asked to deliver."""

    def __init__(self, target_type: TargetType = "channel", fail: bool = False) -> None:
        self._target_type = target_type
        self.fail = fail
        self.sent: list[tuple[PatternValidatedEvent, NotificationTarget]] = []

    @property
    def target_type(self) -> TargetType:
        return self._target_type

    async def send(self, event: PatternValidatedEvent, target: NotificationTarget) -> bool:
        if self.fail:
            raise RuntimeError("channel unavailable")
        self.sent.append((event, target))
        return True
