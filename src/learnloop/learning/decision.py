"""Decision gate: the single mapping from confidence score to action.

Every consumer (confidence predicates, skill generation, trigger dispatch)
goes through classify() so the three-way partition cannot diverge:

    score >= 85        -> auto_generate
    70 <= score < 85   -> human_review
    score < 70         -> discard
"""

from __future__ import annotations

from enum import Enum

from learnloop.core.constants import AUTO_GENERATE_THRESHOLD, HUMAN_REVIEW_THRESHOLD


class Action(str, Enum):
    """What to do with a scored pattern."""

    AUTO_GENERATE = "auto_generate"
    HUMAN_REVIEW = "human_review"
    DISCARD = "discard"


class ConfidenceLevel(str, Enum):
    """Discrete confidence level, aligned with Action."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def classify(score: float) -> Action:
    """Map a confidence score to its action."""
    if score >= AUTO_GENERATE_THRESHOLD:
        return Action.AUTO_GENERATE
    if score >= HUMAN_REVIEW_THRESHOLD:
        return Action.HUMAN_REVIEW
    return Action.DISCARD


_LEVELS = {
    Action.AUTO_GENERATE: ConfidenceLevel.HIGH,
    Action.HUMAN_REVIEW: ConfidenceLevel.MEDIUM,
    Action.DISCARD: ConfidenceLevel.LOW,
}


def level_for(score: float) -> ConfidenceLevel:
    """Map a confidence score to its level using the same boundaries."""
    return _LEVELS[classify(score)]
