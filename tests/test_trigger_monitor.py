"""Tests for learnloop.triggers.monitor.

Covers status-file parsing and value coercion, condition operators,
trigger evaluation and the async status-file monitor.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from learnloop.triggers.monitor import (
    DEFAULT_TRIGGERS,
    Trigger,
    TriggerCondition,
    check_condition,
    check_triggers,
    monitor_status_file,
    parse_status_file,
)

STATUS = """\
# Project status
status: complete
confidence: 90
ratio: 0.75
green: true
flaky: false
owner: ops team
weird: nan
"""


class TestParseStatusFile:
    """Tests for parse_status_file()."""

    def test_coercion(self):
        data = parse_status_file(STATUS)

        assert data["status"] == "complete"
        assert data["confidence"] == 90
        assert isinstance(data["confidence"], int)
        assert data["ratio"] == pytest.approx(0.75)
        assert data["green"] is True
        assert data["flaky"] is False
        assert data["owner"] == "ops team"

    def test_non_finite_numbers_stay_strings(self):
        assert parse_status_file(STATUS)["weird"] == "nan"
        assert parse_status_file("x: inf")["x"] == "inf"

    def test_ignores_non_matching_lines(self):
        data = parse_status_file("# heading\n\nno colon here\n: empty key\nkey:\n")
        assert data == {}

    def test_later_keys_win(self):
        assert parse_status_file("a: 1\na: 2\n") == {"a": 2}


class TestCheckCondition:
    """Tests for check_condition()."""

    DATA = {"status": "complete", "confidence": 90, "note": "build finished", "empty": None}

    @pytest.mark.parametrize(
        ("condition", "expected"),
        [
            (TriggerCondition("status", "equals", "complete"), True),
            (TriggerCondition("status", "equals", "failed"), False),
            (TriggerCondition("note", "contains", "finished"), True),
            (TriggerCondition("note", "contains", "failed"), False),
            (TriggerCondition("confidence", "greater_than", 84), True),
            (TriggerCondition("confidence", "greater_than", 90), False),
            (TriggerCondition("status", "greater_than", 1), False),
            (TriggerCondition("missing", "greater_than", 0), False),
            (TriggerCondition("status", "exists"), True),
            (TriggerCondition("empty", "exists"), False),
            (TriggerCondition("missing", "exists"), False),
        ],
    )
    def test_operators(self, condition: TriggerCondition, expected: bool):
        assert check_condition(condition, self.DATA) is expected

    def test_equals_is_type_sensitive(self):
        assert not check_condition(TriggerCondition("confidence", "equals", "90"), self.DATA)


class TestCheckTriggers:
    """Tests for check_triggers()."""

    def test_default_triggers(self):
        results = check_triggers(DEFAULT_TRIGGERS, parse_status_file(STATUS))

        assert [(r.trigger.name, r.fired) for r in results] == [
            ("pattern-validated", True),
            ("build-complete", True),
        ]

    def test_data_attached_only_when_fired(self):
        results = check_triggers(DEFAULT_TRIGGERS, {"confidence": 50, "status": "complete"})

        by_name = {r.trigger.name: r for r in results}
        assert by_name["pattern-validated"].fired is False
        assert by_name["pattern-validated"].data is None
        assert by_name["build-complete"].data == {"confidence": 50, "status": "complete"}

    def test_disabled_triggers_are_skipped(self):
        paused = Trigger(
            name="paused",
            condition=TriggerCondition("status", "exists"),
            action="noop",
            enabled=False,
        )

        results = check_triggers([paused, *DEFAULT_TRIGGERS], {"status": "x"})

        assert "paused" not in [r.trigger.name for r in results]
        assert len(results) == 2


class TestMonitorStatusFile:
    """Tests for monitor_status_file()."""

    @pytest.mark.asyncio
    async def test_reads_and_evaluates(self, tmp_path: Path):
        status = tmp_path / "STATUS.md"
        status.write_text(STATUS)

        result = await monitor_status_file(status, DEFAULT_TRIGGERS)

        assert result.success is True
        assert all(r.fired for r in result.results)

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path: Path):
        result = await monitor_status_file(tmp_path / "STATUS.md", DEFAULT_TRIGGERS)

        assert result.success is False
        assert result.results == []
        assert result.error
