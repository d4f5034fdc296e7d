"""Notification framework base types and protocols.

Provides the dispatch side of pattern-validated events:
- Notifier protocol for delivery backends, one per target type
- NotificationDispatcher for routing an event to its resolved targets

Channel delivery (chat, webhooks) is supplied by the host application as
additional Notifier implementations; only the file log ships here.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from learnloop.core.config.learning import NotificationConfig
from learnloop.core.logging import get_logger
from learnloop.triggers.pattern_validated import (
    NotificationTarget,
    PatternValidatedEvent,
    TargetType,
    get_notification_targets,
    should_notify,
)

_logger = get_logger("notifications")


@runtime_checkable
class Notifier(Protocol):
    """Protocol for notification backends.

    Each notifier handles one target type ("file", "channel", "project").
    """

    @property
    def target_type(self) -> TargetType:
        """The target type this notifier delivers to."""
        ...

    async def send(self, event: PatternValidatedEvent, target: NotificationTarget) -> bool:
        """Deliver an event to one target.

        Returns:
            True if delivered. Failures should be logged, not raised.
        """
        ...


class NotificationDispatcher:
    """Routes pattern-validated events to registered notifiers.

    Example usage:
        dispatcher = NotificationDispatcher([ValidatedLogNotifier(base_dir)])
        await dispatcher.dispatch(create_event(pattern, confidence))
    """

    def __init__(
        self,
        notifiers: list[Notifier] | None = None,
        config: NotificationConfig | None = None,
    ) -> None:
        self._notifiers: list[Notifier] = notifiers or []
        self.config = config or NotificationConfig()

    def add_notifier(self, notifier: Notifier) -> None:
        self._notifiers.append(notifier)

    @property
    def notifier_count(self) -> int:
        """Number of registered notifiers."""
        return len(self._notifiers)

    async def dispatch(self, event: PatternValidatedEvent) -> dict[str, bool]:
        """Send an event to every resolved target.

        Discarded events are not dispatched at all. Targets without a
        registered notifier are logged and skipped. A failing notifier does
        not stop delivery to the others.

        Returns:
            Mapping of target string to delivery success.
        """
        if not should_notify(event):
            return {}

        results: dict[str, bool] = {}
        for target in get_notification_targets(event, self.config):
            handlers = [n for n in self._notifiers if n.target_type == target.type]
            if not handlers:
                _logger.debug(
                    "notifications.no_handler",
                    target_type=target.type,
                    target=target.target,
                    pattern=event.pattern.name,
                )
                continue
            delivered = False
            for notifier in handlers:
                try:
                    delivered = await notifier.send(event, target) or delivered
                except Exception as e:
                    # Notifications must never break a learning pass
                    _logger.warning(
                        "notifications.notifier_failed",
                        notifier=type(notifier).__name__,
                        target=target.target,
                        error=str(e),
                    )
            results[target.target] = delivered

        return results
