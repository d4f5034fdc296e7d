"""Tests for learnloop.triggers.pattern_validated."""

from __future__ import annotations

from datetime import datetime

import pytest

from learnloop.core.config import NotificationConfig
from learnloop.learning.decision import Action
from learnloop.triggers.pattern_validated import (
    NotificationTarget,
    create_event,
    determine_action,
    format_notification,
    get_notification_targets,
    should_notify,
)

from tests.helpers import make_confidence, make_pattern


def _event(score: int):
    return create_event(make_pattern("DEPLOY_APP", occurrences=20), make_confidence(score))


class TestCreateEvent:
    def test_action_from_decision_gate(self):
        assert _event(90).action is Action.AUTO_GENERATE
        assert _event(75).action is Action.HUMAN_REVIEW
        assert _event(10).action is Action.DISCARD

    def test_timestamp_is_iso_utc(self):
        stamp = datetime.fromisoformat(_event(90).timestamp)
        assert stamp.utcoffset() is not None
        assert stamp.utcoffset().total_seconds() == 0

    def test_determine_action(self):
        assert determine_action(make_confidence(85)) is Action.AUTO_GENERATE


class TestShouldNotify:
    @pytest.mark.parametrize(("score", "expected"), [(90, True), (75, True), (69, False)])
    def test_discard_is_silent(self, score: int, expected: bool):
        assert should_notify(_event(score)) is expected


class TestGetNotificationTargets:
    """Target resolution per decision."""

    def test_auto_generate_goes_to_file_and_broadcast(self):
        targets = get_notification_targets(_event(90))

        assert NotificationTarget("file", "vault/patterns/validated.md") in targets
        assert NotificationTarget("channel", "#patterns") in targets
        assert len(targets) == 2

    def test_review_goes_to_file_and_review_channel(self):
        targets = get_notification_targets(_event(75))

        assert targets[0].type == "file"
        channels = [t.target for t in targets if t.type == "channel"]
        assert channels == ["#pattern-review"]

    def test_discard_only_file(self):
        targets = get_notification_targets(_event(30))

        assert [t.type for t in targets] == ["file"]

    def test_configured_targets(self):
        config = NotificationConfig(
            validated_log="logs/validated.md",
            broadcast_channel="#wins",
            review_channel="#triage",
        )

        auto = get_notification_targets(_event(99), config)
        review = get_notification_targets(_event(80), config)

        assert auto == [
            NotificationTarget("file", "logs/validated.md"),
            NotificationTarget("channel", "#wins"),
        ]
        assert review[1] == NotificationTarget("channel", "#triage")


class TestFormatNotification:
    def test_contents(self):
        text = format_notification(_event(90))

        assert text.startswith("### Pattern Validated: deploy-app\n")
        assert "**Action:** DEPLOY_APP" in text
        assert "**Occurrences:** 20" in text
        assert "**Confidence:** 90% (high)" in text
        assert "**Decision:** auto generate" in text
