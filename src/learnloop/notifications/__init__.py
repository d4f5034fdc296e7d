"""Notification dispatch for pattern-validated events.

Usage:
    from learnloop.notifications import NotificationDispatcher, ValidatedLogNotifier

    dispatcher = NotificationDispatcher([ValidatedLogNotifier(workspace)])
    await dispatcher.dispatch(event)
"""

from learnloop.notifications.base import NotificationDispatcher, Notifier
from learnloop.notifications.file import ValidatedLogNotifier

__all__ = [
    "NotificationDispatcher",
    "Notifier",
    "ValidatedLogNotifier",
]
