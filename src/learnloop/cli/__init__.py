"""learnloop CLI.

The app is assembled here from the command modules in ``cli/commands``.
Global options (--verbose, --quiet, --log-*) are handled by the app
callback and stored in ``helpers`` before any command runs.

Package structure:
    cli/
    ├── __init__.py           # This file - app assembly
    ├── helpers.py            # Output level, logging state, config loading
    ├── output.py             # Rich tables and action formatting
    └── commands/
        ├── learn.py          # learn command
        ├── drift.py          # drift command
        └── trigger.py        # trigger-list, trigger-check commands
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from learnloop import __version__

# Re-export helpers module for direct access to internal state (conftest.py needs this)
from . import helpers as helpers
from .commands import drift, learn, trigger_check, trigger_list
from .helpers import (
    OutputLevel,
    configure_global_logging,
    set_log_file,
    set_log_format,
    set_log_level,
    set_output_level,
)
from .output import console

app = typer.Typer(
    name="learnloop",
    help="Learn reusable skills from operational logs",
    add_completion=False,
)


# =============================================================================
# Global option callbacks
# =============================================================================


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"learnloop v{__version__}")
        raise typer.Exit()


def verbose_callback(value: bool) -> None:
    if value:
        set_output_level(OutputLevel.VERBOSE)


def quiet_callback(value: bool) -> None:
    if value:
        set_output_level(OutputLevel.QUIET)


def log_level_callback(value: str | None) -> str | None:
    if value:
        set_log_level(value)
    return value


def log_file_callback(value: Path | None) -> Path | None:
    if value:
        set_log_file(value)
    return value


def log_format_callback(value: str | None) -> str | None:
    if value:
        set_log_format(value)
    return value


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        callback=verbose_callback,
        is_eager=True,
        help="Show detailed output with additional information",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        callback=quiet_callback,
        is_eager=True,
        help="Show minimal output (errors only)",
    ),
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            "-L",
            callback=log_level_callback,
            help="Logging level (DEBUG, INFO, WARNING, ERROR)",
            envvar="LEARNLOOP_LOG_LEVEL",
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            callback=log_file_callback,
            help="Path for log file output",
            envvar="LEARNLOOP_LOG_FILE",
        ),
    ] = None,
    log_format: Annotated[
        str | None,
        typer.Option(
            "--log-format",
            callback=log_format_callback,
            help="Log format: json, console, or both",
            envvar="LEARNLOOP_LOG_FORMAT",
        ),
    ] = None,
) -> None:
    """learnloop - turn repeated log actions into skills."""
    configure_global_logging(console)


app.command()(learn)
app.command()(drift)
app.command(name="trigger-list")(trigger_list)
app.command(name="trigger-check")(trigger_check)


__all__ = [
    "app",
    "main",
    "console",
    "OutputLevel",
]
