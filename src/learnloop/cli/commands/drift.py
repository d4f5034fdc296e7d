"""``drift`` command: compare observed patterns with an expected workflow."""

from __future__ import annotations

import asyncio
import json as json_lib
from pathlib import Path

import typer

from learnloop.learning.drift import apply_correction, auto_correct_drift, detect_drift
from learnloop.learning.monitor import monitor_all
from learnloop.learning.patterns import detect_patterns

from ..helpers import is_quiet, load_config
from ..output import console, create_corrections_table


def drift(
    expected: list[str] | None = typer.Option(
        None,
        "--expected",
        "-e",
        help="Expected normalized action (repeatable, in workflow order)",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML configuration file",
    ),
    threshold: int | None = typer.Option(
        None,
        "--threshold",
        "-t",
        min=0,
        max=100,
        help="Confidence gate for corrections (nothing proposed below 85)",
    ),
    apply_to: Path | None = typer.Option(
        None,
        "--apply",
        "-a",
        help="Apply proposed corrections to this workflow document",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output as JSON for machine parsing",
    ),
) -> None:
    """Detect drift from an expected workflow and propose corrections.

    Examples:
        learnloop drift -e BUILD -e TEST -e VERIFY     # Report drift
        learnloop drift -c learnloop.yaml --apply docs/WORKFLOW.md
    """
    config = load_config(config_file, console)
    expected_workflow = list(expected) if expected else config.drift.expected_workflow
    if not expected_workflow:
        console.print("[red]No expected workflow given.[/red] Use --expected or a config file.")
        raise typer.Exit(1)
    gate = threshold if threshold is not None else config.drift.confidence_threshold

    monitor = asyncio.run(
        monitor_all(
            config.monitor.primary_dir,
            config.monitor.dated_dir,
            config.monitor.days_back,
        )
    )
    patterns = detect_patterns(monitor.entries, config.detection.min_occurrences).patterns
    missing = detect_drift(patterns, expected_workflow)
    result = auto_correct_drift(patterns, expected_workflow, gate)

    if apply_to is not None:
        for correction in result.corrections:
            asyncio.run(apply_correction(correction, apply_to))

    if json_output:
        output = {
            "expected": expected_workflow,
            "missing": missing,
            "threshold": gate,
            "corrections": [
                {
                    "type": c.type,
                    "target": c.target,
                    "before": c.before,
                    "after": c.after,
                    "reason": c.reason,
                    "applied": c.applied,
                }
                for c in result.corrections
            ],
        }
        console.print(json_lib.dumps(output, indent=2))
        return

    if monitor.error and not is_quiet():
        console.print(f"[yellow]Source problems:[/yellow] {monitor.error}")

    if not missing:
        console.print("[green]✓ No drift: every expected action was observed[/green]")
        return

    console.print(f"[bold]Missing actions:[/bold] {', '.join(missing)}")
    if not result.corrections:
        console.print("[dim]No corrections proposed[/dim]")
        return

    table = create_corrections_table()
    for correction in result.corrections:
        applied = "[green]✓[/green]" if correction.applied else "-"
        table.add_row(correction.before, correction.after, applied, correction.reason)
    console.print(table)
