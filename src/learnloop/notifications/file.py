"""Append-only validated-patterns log.

Each dispatched event is appended as a markdown section to the file named by
the ``file`` notification target, resolved against a base directory.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from learnloop.core.logging import get_logger
from learnloop.triggers.pattern_validated import (
    NotificationTarget,
    PatternValidatedEvent,
    TargetType,
    format_notification,
)

_logger = get_logger("notifications.file")


class ValidatedLogNotifier:
    """Appends validated-pattern events to a markdown log file."""

    def __init__(self, base_dir: Path | str = ".") -> None:
        """Initialize the notifier.

        Args:
            base_dir: Directory relative file targets are resolved against.
        """
        self.base_dir = Path(base_dir)

    @property
    def target_type(self) -> TargetType:
        return "file"

    def _append(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(text + "\n")

    async def send(self, event: PatternValidatedEvent, target: NotificationTarget) -> bool:
        path = self.base_dir / target.target
        try:
            await asyncio.to_thread(self._append, path, format_notification(event))
        except OSError as e:
            _logger.warning("notifications.append_failed", path=str(path), error=str(e))
            return False
        return True
