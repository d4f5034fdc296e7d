"""Trigger commands.

Commands:
- trigger-list: Show the configured triggers
- trigger-check: Evaluate triggers against a ``key: value`` status file
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from learnloop.triggers.monitor import DEFAULT_TRIGGERS, TriggerCondition, monitor_status_file

from ..output import console, create_triggers_table


def _describe(condition: TriggerCondition) -> str:
    if condition.operator == "exists":
        return f"{condition.field} exists"
    return f"{condition.field} {condition.operator} {condition.value}"


def trigger_list() -> None:
    """Show the configured triggers."""
    table = create_triggers_table()
    for trigger in DEFAULT_TRIGGERS:
        state = "[green]enabled[/green]" if trigger.enabled else "[dim]paused[/dim]"
        table.add_row(trigger.name, _describe(trigger.condition), trigger.action, state)
    console.print(table)


def trigger_check(
    status_file: Path = typer.Argument(..., help="Status file with key: value lines"),
) -> None:
    """Evaluate the configured triggers against a status file."""
    result = asyncio.run(monitor_status_file(status_file, DEFAULT_TRIGGERS))
    if not result.success:
        console.print(f"[red]Cannot read status file:[/red] {result.error}")
        raise typer.Exit(1)

    table = create_triggers_table()
    for item in result.results:
        state = "[red]FIRED[/red]" if item.fired else "[dim]not triggered[/dim]"
        table.add_row(
            item.trigger.name,
            _describe(item.trigger.condition),
            item.trigger.action,
            state,
        )
    console.print(table)
