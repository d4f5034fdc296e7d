"""Confidence scoring for detected patterns.

A pattern's confidence combines three independent factors, each in [0, 1]:

    score = round(100 × (
        sample_size_factor × 0.5
        + recency_factor × 0.3
        + consistency_factor × 0.2
    ))

Where:
    - sample_size_factor = min(1, log10(occurrences + 1) / 2)
    - recency_factor = max(0, 1 - days_since_last_seen / 30)
    - consistency_factor = share of the first example's words (len > 3)
      that appear in every example

The score maps to a level and an action through the decision gate
(learnloop.learning.decision). Results are recomputed on every call.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from learnloop.core.config.learning import ConfidenceWeights
from learnloop.core.constants import (
    CONSISTENCY_MIN_WORD_LENGTH,
    NEUTRAL_CONSISTENCY,
    RECENCY_WINDOW_DAYS,
)
from learnloop.core.logging import get_logger
from learnloop.learning.decision import Action, ConfidenceLevel, classify, level_for
from learnloop.learning.patterns import Pattern
from learnloop.utils.time import days_between, parse_timestamp

_logger = get_logger("confidence")


@dataclass
class ConfidenceFactor:
    """One weighted input to the confidence score."""

    name: str
    value: float
    """Raw input: occurrences, days since last seen, or example count."""

    weight: float
    contribution: float
    """Factor in [0, 1] multiplied by its weight."""


@dataclass
class ConfidenceResult:
    """Confidence in a pattern, 0-100, with the factors behind it."""

    score: int
    level: ConfidenceLevel
    factors: list[ConfidenceFactor] = field(default_factory=list)


def sample_size_factor(occurrences: int) -> float:
    """Logarithmic credit for repetition: 3 -> ~0.30, 10 -> ~0.52, 99+ -> 1.0.

    Monotone non-decreasing in ``occurrences`` and never above 1.
    """
    if occurrences <= 0:
        return 0.0
    return min(1.0, math.log10(occurrences + 1) / 2)


def days_since(last_seen: str, now: datetime | None = None) -> float | None:
    """Fractional days from ``last_seen`` to ``now``, or None if unparseable."""
    seen = parse_timestamp(last_seen)
    if seen is None:
        return None
    if now is None:
        now = datetime.now(seen.tzinfo) if seen.tzinfo else datetime.now()
    return days_between(seen, now)


def recency_factor(last_seen: str, now: datetime | None = None) -> float:
    """Linear decay from 1.0 (seen now) to 0.0 (seen 30+ days ago).

    Timestamps in the future are capped at 1.0; unparseable timestamps
    score 0.0.
    """
    elapsed = days_since(last_seen, now)
    if elapsed is None:
        _logger.debug("confidence.unparseable_timestamp", last_seen=last_seen)
        return 0.0
    return max(0.0, min(1.0, 1.0 - elapsed / RECENCY_WINDOW_DAYS))


def _significant_words(text: str) -> set[str]:
    return {w for w in text.lower().split() if len(w) > CONSISTENCY_MIN_WORD_LENGTH}


def consistency_factor(examples: Sequence[str]) -> float:
    """Share of the first example's words that every example contains.

    Only words longer than three characters count. Fewer than two examples
    give the neutral 0.5.
    """
    if len(examples) < 2:
        return NEUTRAL_CONSISTENCY

    word_sets = [_significant_words(e) for e in examples]
    first = word_sets[0]
    common = sum(1 for word in first if all(word in s for s in word_sets))
    return min(1.0, common / max(1, len(first)))


class ConfidenceCalculator:
    """Calculates confidence results for patterns.

    Holds the factor weights; the module-level functions use the defaults.
    """

    def __init__(self, weights: ConfidenceWeights | None = None) -> None:
        """Initialize the calculator.

        Args:
            weights: Factor weights. Uses defaults (0.5/0.3/0.2) if None.
        """
        self.weights = weights or ConfidenceWeights()

    def calculate(self, pattern: Pattern, now: datetime | None = None) -> ConfidenceResult:
        """Score a pattern.

        Args:
            pattern: The pattern to score.
            now: Reference time for recency (defaults to now).

        Returns:
            ConfidenceResult whose factor contributions sum to score / 100
            (before rounding).
        """
        elapsed = days_since(pattern.last_seen, now)
        factors = [
            ConfidenceFactor(
                name="sample_size",
                value=pattern.occurrences,
                weight=self.weights.sample_size,
                contribution=sample_size_factor(pattern.occurrences) * self.weights.sample_size,
            ),
            ConfidenceFactor(
                name="recency",
                value=round(elapsed, 2) if elapsed is not None else -1.0,
                weight=self.weights.recency,
                contribution=recency_factor(pattern.last_seen, now) * self.weights.recency,
            ),
            ConfidenceFactor(
                name="consistency",
                value=len(pattern.examples),
                weight=self.weights.consistency,
                contribution=consistency_factor(pattern.examples) * self.weights.consistency,
            ),
        ]

        score = round(sum(f.contribution for f in factors) * 100)
        result = ConfidenceResult(score=score, level=level_for(score), factors=factors)

        _logger.debug(
            "confidence.calculated",
            pattern=pattern.name,
            score=score,
            level=result.level.value,
        )
        return result


def calculate_confidence(
    pattern: Pattern,
    now: datetime | None = None,
    weights: ConfidenceWeights | None = None,
) -> ConfidenceResult:
    """Convenience function to score a pattern without creating a calculator."""
    return ConfidenceCalculator(weights).calculate(pattern, now=now)


def should_auto_generate(confidence: ConfidenceResult) -> bool:
    """Score >= 85: promote the pattern to a skill."""
    return classify(confidence.score) is Action.AUTO_GENERATE


def needs_human_review(confidence: ConfidenceResult) -> bool:
    """70 <= score < 85: ask a human."""
    return classify(confidence.score) is Action.HUMAN_REVIEW


def should_discard(confidence: ConfidenceResult) -> bool:
    """Score < 70: drop the pattern."""
    return classify(confidence.score) is Action.DISCARD
