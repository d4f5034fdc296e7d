"""Pattern-validated events and their notification targets.

Every evaluated pattern becomes a PatternValidatedEvent carrying the
decision-gate action. Targets always include the validated-patterns file
log; auto-generated patterns are broadcast and review candidates go to the
review channel. Delivery itself happens elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from learnloop.core.config.learning import NotificationConfig
from learnloop.learning.confidence import ConfidenceResult
from learnloop.learning.decision import Action, classify
from learnloop.learning.patterns import Pattern
from learnloop.utils.time import utc_now

TargetType = Literal["project", "channel", "file"]


@dataclass
class PatternValidatedEvent:
    """One evaluated pattern, consumed immediately by the dispatcher."""

    pattern: Pattern
    confidence: ConfidenceResult
    timestamp: str
    """ISO-8601 UTC time the event was created."""

    action: Action


@dataclass(frozen=True)
class NotificationTarget:
    """Where a notification should go."""

    type: TargetType
    target: str


def determine_action(confidence: ConfidenceResult) -> Action:
    """Decision-gate action for a confidence result."""
    return classify(confidence.score)


def create_event(pattern: Pattern, confidence: ConfidenceResult) -> PatternValidatedEvent:
    """Wrap a scored pattern into an event stamped with the current time."""
    return PatternValidatedEvent(
        pattern=pattern,
        confidence=confidence,
        timestamp=utc_now().isoformat(),
        action=determine_action(confidence),
    )


def should_notify(event: PatternValidatedEvent) -> bool:
    """Discarded patterns are not announced."""
    return event.action is not Action.DISCARD


def get_notification_targets(
    event: PatternValidatedEvent,
    config: NotificationConfig | None = None,
) -> list[NotificationTarget]:
    """Resolve notification targets for an event.

    Always returns the file log target, even for discarded events; callers
    must check should_notify() before dispatching.
    """
    config = config or NotificationConfig()
    targets = [NotificationTarget(type="file", target=config.validated_log.as_posix())]

    if event.action is Action.AUTO_GENERATE:
        targets.append(NotificationTarget(type="channel", target=config.broadcast_channel))
    elif event.action is Action.HUMAN_REVIEW:
        targets.append(NotificationTarget(type="channel", target=config.review_channel))

    return targets


def format_notification(event: PatternValidatedEvent) -> str:
    """Markdown summary of an event, as appended to the validated log."""
    decision = event.action.value.replace("_", " ")
    return (
        f"### Pattern Validated: {event.pattern.name}\n"
        "\n"
        f"- **Timestamp:** {event.timestamp}\n"
        f"- **Action:** {event.pattern.action}\n"
        f"- **Occurrences:** {event.pattern.occurrences}\n"
        f"- **Confidence:** {event.confidence.score}% ({event.confidence.level.value})\n"
        f"- **Decision:** {decision}\n"
    )
