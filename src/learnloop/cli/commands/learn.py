"""``learn`` command: detect patterns in logs and generate skills."""

from __future__ import annotations

import asyncio
import json as json_lib
from pathlib import Path

import typer

from learnloop.learning.pipeline import LearningPipeline, PipelineReport

from ..helpers import is_quiet, is_verbose, load_config
from ..output import ActionColors, console, create_patterns_table


def learn(
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML configuration file",
    ),
    memory: Path | None = typer.Option(
        None,
        "--memory",
        help="Directory of dated YYYY-MM-DD logs",
    ),
    ops: Path | None = typer.Option(
        None,
        "--ops",
        help="Directory holding RUNLOG.md",
    ),
    skills: Path | None = typer.Option(
        None,
        "--skills",
        help="Skill vault directory",
    ),
    days: int | None = typer.Option(
        None,
        "--days",
        "-d",
        min=0,
        help="Only read dated logs from the last N days",
    ),
    min_occurrences: int | None = typer.Option(
        None,
        "--min-occurrences",
        "-m",
        min=1,
        help="Minimum occurrences for a pattern",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Score patterns without writing skills or logs",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output as JSON for machine parsing",
    ),
) -> None:
    """Detect recurring patterns in logs and promote them to skills.

    Examples:
        learnloop learn                        # Use ./ops and ./memory
        learnloop learn --memory notes -d 14   # Two weeks of dated logs
        learnloop learn --dry-run              # Preview decisions only
        learnloop learn --json                 # JSON output for scripting
    """
    config = load_config(config_file, console)

    monitor_update: dict[str, object] = {}
    if memory is not None:
        monitor_update["dated_dir"] = memory
    if ops is not None:
        monitor_update["primary_dir"] = ops
    if days is not None:
        monitor_update["days_back"] = days
    if monitor_update:
        config.monitor = config.monitor.model_copy(update=monitor_update)
    if skills is not None:
        config.skills = config.skills.model_copy(update={"vault_dir": skills})
    if min_occurrences is not None:
        config.detection = config.detection.model_copy(
            update={"min_occurrences": min_occurrences}
        )

    report = asyncio.run(LearningPipeline(config).run(dry_run=dry_run))

    if json_output:
        console.print(json_lib.dumps(_report_to_dict(report), indent=2))
        return

    _print_report(report)


def _report_to_dict(report: PipelineReport) -> dict[str, object]:
    return {
        "success": report.monitor.success,
        "error": report.monitor.error,
        "entries": len(report.monitor.entries),
        "dry_run": report.dry_run,
        "patterns": [
            {
                "name": e.pattern.name,
                "action": e.pattern.action,
                "occurrences": e.pattern.occurrences,
                "first_seen": e.pattern.first_seen,
                "last_seen": e.pattern.last_seen,
                "confidence": e.confidence.score,
                "level": e.confidence.level.value,
                "decision": e.action.value,
                "skill_path": str(e.skill_path) if e.skill_path else None,
            }
            for e in report.evaluations
        ],
        "summary": {
            "generated": report.generated,
            "review": report.review,
            "discarded": report.discarded,
        },
        "corrections": [
            {"before": c.before, "after": c.after, "reason": c.reason, "applied": c.applied}
            for c in report.corrections
        ],
    }


def _print_report(report: PipelineReport) -> None:
    monitor = report.monitor
    if monitor.error and not is_quiet():
        color = "yellow" if monitor.success else "red"
        console.print(f"[{color}]Source problems:[/{color}] {monitor.error}")

    if report.nothing_to_learn:
        console.print("No entries found. Nothing to learn from.")
        return

    if not is_quiet():
        console.print(f"Found {len(monitor.entries)} log entries")

    if not report.evaluations:
        console.print("No patterns detected yet. Need more data.")
        return

    table = create_patterns_table()
    for evaluation in report.evaluations:
        decision = ActionColors.format(evaluation.action)
        if evaluation.skill_path is not None:
            decision += f" → {evaluation.skill_path}"
        elif evaluation.skipped_existing:
            decision += " [dim](exists)[/dim]"
        elif evaluation.write_error:
            decision += f" [red](write failed: {evaluation.write_error})[/red]"
        table.add_row(
            evaluation.pattern.name,
            str(evaluation.pattern.occurrences),
            f"{evaluation.confidence.score}%",
            evaluation.pattern.last_seen,
            decision,
        )
    console.print(table)

    if is_verbose():
        for evaluation in report.evaluations:
            factors = ", ".join(
                f"{f.name}={f.contribution:.3f}" for f in evaluation.confidence.factors
            )
            console.print(f"[dim]{evaluation.pattern.name}: {factors}[/dim]")

    console.print(
        f"Generated: {report.generated} | Review: {report.review} "
        f"| Discarded: {report.discarded}"
    )
    for correction in report.corrections:
        state = "applied" if correction.applied else "proposed"
        console.print(f"[yellow]Drift ({state}):[/yellow] {correction.reason}")
    if report.dry_run:
        console.print("[dim](Dry run - no files written)[/dim]")
