"""Trigger conditions evaluated against project status files.

A status file is a list of ``key: value`` lines. A trigger fires when its
condition holds for the parsed status map:

    equals        status[field] == value
    contains      str(value) in str(status[field])
    greater_than  float(status[field]) > float(value)
    exists        field present with a non-None value
"""

from __future__ import annotations

import asyncio
import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from learnloop.core.logging import get_logger
from learnloop.utils.time import utc_now

_logger = get_logger("triggers")

Operator = Literal["equals", "contains", "greater_than", "exists"]

_STATUS_LINE = re.compile(r"^(\w+):\s*(.+)$")


@dataclass(frozen=True)
class TriggerCondition:
    field: str
    operator: Operator
    value: str | float | bool | None = None
    name: str = ""


@dataclass(frozen=True)
class Trigger:
    name: str
    condition: TriggerCondition
    action: str
    enabled: bool = True


@dataclass
class TriggerResult:
    trigger: Trigger
    fired: bool
    timestamp: str
    data: dict[str, Any] | None = None
    """The status map, attached only when the trigger fired."""


@dataclass
class TriggerMonitorResult:
    success: bool
    results: list[TriggerResult] = field(default_factory=list)
    error: str | None = None


DEFAULT_TRIGGERS = [
    Trigger(
        name="pattern-validated",
        condition=TriggerCondition(field="confidence", operator="greater_than", value=84),
        action="Generate skill",
    ),
    Trigger(
        name="build-complete",
        condition=TriggerCondition(field="status", operator="equals", value="complete"),
        action="Run verification",
    ),
]


def _as_number(value: Any) -> float:
    if isinstance(value, bool):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def check_condition(condition: TriggerCondition, data: Mapping[str, Any]) -> bool:
    """Evaluate one condition against a status map."""
    value = data.get(condition.field)

    if condition.operator == "equals":
        return value == condition.value
    if condition.operator == "contains":
        return str(condition.value) in str(value)
    if condition.operator == "greater_than":
        # NaN compares False, so missing or non-numeric fields never fire
        return _as_number(value) > _as_number(condition.value)
    if condition.operator == "exists":
        return value is not None
    return False


def _coerce(raw: str) -> str | float | bool:
    if raw == "true":
        return True
    if raw == "false":
        return False
    try:
        number = float(raw)
    except ValueError:
        return raw
    if not math.isfinite(number):
        return raw
    return int(number) if number.is_integer() and "." not in raw else number


def parse_status_file(content: str) -> dict[str, Any]:
    """Parse ``key: value`` lines; booleans and numbers are coerced."""
    data: dict[str, Any] = {}
    for line in content.splitlines():
        match = _STATUS_LINE.match(line)
        if match:
            key, raw = match.group(1), match.group(2).strip()
            data[key] = _coerce(raw)
    return data


def check_triggers(
    triggers: Sequence[Trigger],
    data: Mapping[str, Any],
) -> list[TriggerResult]:
    """Evaluate every enabled trigger; disabled triggers produce no result."""
    results: list[TriggerResult] = []
    for trigger in triggers:
        if not trigger.enabled:
            continue
        fired = check_condition(trigger.condition, data)
        results.append(
            TriggerResult(
                trigger=trigger,
                fired=fired,
                timestamp=utc_now().isoformat(),
                data=dict(data) if fired else None,
            )
        )
    return results


def _read_text(path: Path) -> str:
    with open(path, encoding="utf-8") as f:
        return f.read()


async def monitor_status_file(
    file_path: Path | str,
    triggers: Sequence[Trigger],
) -> TriggerMonitorResult:
    """Read a status file and evaluate triggers against it."""
    path = Path(file_path)
    try:
        content = await asyncio.to_thread(_read_text, path)
    except (OSError, UnicodeDecodeError) as e:
        _logger.warning("triggers.status_unreadable", source=str(path), error=str(e))
        return TriggerMonitorResult(success=False, error=str(e))

    results = check_triggers(triggers, parse_status_file(content))
    _logger.debug(
        "triggers.checked",
        source=str(path),
        fired=sum(1 for r in results if r.fired),
        total=len(results),
    )
    return TriggerMonitorResult(success=True, results=results)
