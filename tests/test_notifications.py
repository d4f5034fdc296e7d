"""Tests for notification dispatch and the validated-patterns log."""

from __future__ import annotations

from pathlib import Path

import pytest

from learnloop.notifications import NotificationDispatcher, Notifier, ValidatedLogNotifier
from learnloop.triggers.pattern_validated import NotificationTarget, create_event

from tests.helpers import RecordingNotifier, make_confidence, make_pattern

VALIDATED_LOG = "vault/patterns/validated.md"


def _event(score: int, action: str = "DEPLOY_APP"):
    return create_event(make_pattern(action, occurrences=20), make_confidence(score))


class TestNotifierProtocol:
    def test_implementations_satisfy_protocol(self, tmp_path: Path):
        assert isinstance(ValidatedLogNotifier(tmp_path), Notifier)
        assert isinstance(RecordingNotifier(), Notifier)


class TestValidatedLogNotifier:
    """Tests for ValidatedLogNotifier."""

    @pytest.mark.asyncio
    async def test_appends_sections(self, tmp_path: Path):
        notifier = ValidatedLogNotifier(tmp_path)
        target = NotificationTarget("file", VALIDATED_LOG)

        assert await notifier.send(_event(90, "BUILD"), target) is True
        assert await notifier.send(_event(75, "TEST"), target) is True

        content = (tmp_path / VALIDATED_LOG).read_text()
        assert content.index("Pattern Validated: build") < content.index("Pattern Validated: test")

    @pytest.mark.asyncio
    async def test_unwritable_target(self, tmp_path: Path):
        (tmp_path / "vault").write_text("a file, not a directory")
        notifier = ValidatedLogNotifier(tmp_path)

        delivered = await notifier.send(_event(90), NotificationTarget("file", VALIDATED_LOG))

        assert delivered is False


class TestNotificationDispatcher:
    """Tests for NotificationDispatcher.dispatch()."""

    @pytest.mark.asyncio
    async def test_auto_generate_reaches_file_and_broadcast(self, tmp_path: Path):
        channel = RecordingNotifier("channel")
        dispatcher = NotificationDispatcher([ValidatedLogNotifier(tmp_path), channel])

        results = await dispatcher.dispatch(_event(95))

        assert results == {VALIDATED_LOG: True, "#patterns": True}
        assert [t.target for _, t in channel.sent] == ["#patterns"]
        assert (tmp_path / VALIDATED_LOG).exists()

    @pytest.mark.asyncio
    async def test_review_goes_to_review_channel(self, tmp_path: Path):
        channel = RecordingNotifier("channel")
        dispatcher = NotificationDispatcher([ValidatedLogNotifier(tmp_path), channel])

        await dispatcher.dispatch(_event(72))

        assert [t.target for _, t in channel.sent] == ["#pattern-review"]

    @pytest.mark.asyncio
    async def test_discard_is_not_dispatched(self, tmp_path: Path):
        channel = RecordingNotifier("channel")
        dispatcher = NotificationDispatcher([ValidatedLogNotifier(tmp_path), channel])

        assert await dispatcher.dispatch(_event(20)) == {}
        assert channel.sent == []
        assert not (tmp_path / VALIDATED_LOG).exists()

    @pytest.mark.asyncio
    async def test_targets_without_handler_are_skipped(self, tmp_path: Path):
        dispatcher = NotificationDispatcher([ValidatedLogNotifier(tmp_path)])

        results = await dispatcher.dispatch(_event(95))

        assert results == {VALIDATED_LOG: True}

    @pytest.mark.asyncio
    async def test_failing_notifier_does_not_stop_others(self, tmp_path: Path):
        dispatcher = NotificationDispatcher([
            RecordingNotifier("channel", fail=True),
            ValidatedLogNotifier(tmp_path),
        ])

        results = await dispatcher.dispatch(_event(95))

        assert results == {VALIDATED_LOG: True, "#patterns": False}

    def test_add_notifier(self):
        dispatcher = NotificationDispatcher()
        assert dispatcher.notifier_count == 0
        dispatcher.add_notifier(RecordingNotifier())
        assert dispatcher.notifier_count == 1
