"""Pattern detection over structured log entries.

A pattern is a normalized action that recurs at least ``min_occurrences``
times. Detection is a pure function of its input: running it twice over the
same entries yields identical patterns.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from learnloop.core.constants import (
    DEFAULT_MIN_OCCURRENCES,
    MAX_PATTERN_EXAMPLES,
    SIGNIFICANT_OCCURRENCES,
    SIGNIFICANT_SHARE,
)
from learnloop.core.logging import get_logger
from learnloop.learning.monitor import LogEntry

_logger = get_logger("detector")

_NON_ACTION_CHARS = re.compile(r"[^A-Z0-9_]+")
_UNDERSCORE_RUNS = re.compile(r"_+")


@dataclass
class Pattern:
    """A recurring action inferred from grouped log entries."""

    name: str
    """Slug form of the action (lowercase, hyphens)."""

    action: str
    """Normalized action (see normalize_action)."""

    occurrences: int
    """Number of log entries that produced this pattern."""

    examples: list[str] = field(default_factory=list)
    """Up to three outcomes, earliest first."""

    first_seen: str = ""
    last_seen: str = ""


@dataclass
class DetectorResult:
    """Output of one detection run."""

    patterns: list[Pattern]
    total_entries: int
    unique_actions: int


def normalize_action(raw: str) -> str:
    """Map a raw action to its canonical key.

    Uppercases, replaces every run of characters outside ``[A-Z0-9_]`` with a
    single underscore, collapses repeated underscores and trims underscores
    at both ends.

    The mapping is deliberately lossy: "Phase 1: Setup" and "phase-1 setup"
    both become ``PHASE_1_SETUP`` and are counted as the same action.
    Distinct actions that normalize identically are merged.
    """
    key = _NON_ACTION_CHARS.sub("_", raw.upper())
    key = _UNDERSCORE_RUNS.sub("_", key)
    return key.strip("_")


def action_to_name(action: str) -> str:
    """Slug for a normalized action: ``DEPLOY_APP`` -> ``deploy-app``."""
    return action.lower().replace("_", "-")


def group_by_action(entries: Iterable[LogEntry]) -> dict[str, list[LogEntry]]:
    """Group entries by normalized action, preserving insertion order."""
    groups: dict[str, list[LogEntry]] = {}
    for entry in entries:
        groups.setdefault(normalize_action(entry.action), []).append(entry)
    return groups


def detect_patterns(
    entries: Sequence[LogEntry],
    min_occurrences: int = DEFAULT_MIN_OCCURRENCES,
) -> DetectorResult:
    """Promote action groups with enough occurrences into patterns.

    Args:
        entries: Log entries, in any order.
        min_occurrences: Minimum group size to emit a pattern.

    Returns:
        DetectorResult with patterns sorted by occurrences (descending,
        stable for ties), the total entry count and the number of distinct
        normalized actions.
    """
    groups = group_by_action(entries)
    patterns: list[Pattern] = []

    for action, group in groups.items():
        if len(group) < min_occurrences:
            continue
        ordered = sorted(group, key=lambda e: e.timestamp)
        patterns.append(
            Pattern(
                name=action_to_name(action),
                action=action,
                occurrences=len(group),
                examples=[e.outcome for e in ordered[:MAX_PATTERN_EXAMPLES]],
                first_seen=ordered[0].timestamp,
                last_seen=ordered[-1].timestamp,
            )
        )

    patterns.sort(key=lambda p: p.occurrences, reverse=True)

    _logger.debug(
        "detector.patterns_detected",
        patterns=len(patterns),
        total_entries=len(entries),
        unique_actions=len(groups),
        min_occurrences=min_occurrences,
    )
    return DetectorResult(
        patterns=patterns,
        total_entries=len(entries),
        unique_actions=len(groups),
    )


def is_significant_pattern(pattern: Pattern, total_entries: int) -> bool:
    """True if the pattern has 5+ occurrences or covers 5% of all entries.

    Not applied by detect_patterns; callers layer it on top of the
    occurrence threshold.
    """
    return (
        pattern.occurrences >= SIGNIFICANT_OCCURRENCES
        or pattern.occurrences >= total_entries * SIGNIFICANT_SHARE
    )


def find_outcome_patterns(entries: Iterable[LogEntry]) -> dict[str, list[str]]:
    """Group outcomes by their first three lowercase words."""
    groups: dict[str, list[str]] = {}
    for entry in entries:
        key = " ".join(entry.outcome.lower().split()[:3])
        groups.setdefault(key, []).append(entry.outcome)
    return groups
