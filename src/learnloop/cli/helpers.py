"""Shared utilities for learnloop CLI commands.

Holds the global output/logging state set by the app callback and the
config loading helper used by every command.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal

import typer
from rich.console import Console

from learnloop.core.config import LearnLoopConfig
from learnloop.core.errors import ConfigError
from learnloop.core.logging import configure_logging, get_logger

_logger = get_logger("cli")


# =============================================================================
# Output level management
# =============================================================================


class OutputLevel(str, Enum):
    """Output verbosity level."""

    QUIET = "quiet"  # Minimal output (errors only)
    NORMAL = "normal"
    VERBOSE = "verbose"


_output_level: OutputLevel = OutputLevel.NORMAL


def get_output_level() -> OutputLevel:
    return _output_level


def set_output_level(level: OutputLevel) -> None:
    global _output_level
    _output_level = level


def is_verbose() -> bool:
    return _output_level == OutputLevel.VERBOSE


def is_quiet() -> bool:
    return _output_level == OutputLevel.QUIET


# =============================================================================
# Logging configuration
# =============================================================================


@dataclass
class CliLoggingConfig:
    """CLI logging state collected from global options."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    file: Path | None = None
    format: Literal["json", "console", "both"] = "console"
    configured: bool = False
    explicit: bool = False
    """True once any --log-* option was given; config files then leave logging alone."""


_log_config = CliLoggingConfig()


def set_log_level(level: str) -> None:
    _log_config.level = level.upper()  # type: ignore[assignment]
    _log_config.explicit = True


def set_log_file(path: Path | None) -> None:
    _log_config.file = path
    _log_config.explicit = True


def set_log_format(fmt: str) -> None:
    _log_config.format = fmt  # type: ignore[assignment]
    _log_config.explicit = True


def configure_global_logging(console: Console) -> None:
    """Configure logging from the global CLI options, once per session.

    Raises:
        typer.Exit: If logging configuration fails.
    """
    if _log_config.configured:
        return

    try:
        configure_logging(
            level=_log_config.level,
            format=_log_config.format,
            file_path=_log_config.file,
        )
        _log_config.configured = True
    except (ValueError, AttributeError) as e:
        console.print(f"[red]Logging configuration error:[/red] {e}")
        raise typer.Exit(1) from None


def reset_logging_state() -> None:
    """Reset logging and output state (primarily for testing)."""
    global _output_level
    _log_config.level = "WARNING"
    _log_config.file = None
    _log_config.format = "console"
    _log_config.configured = False
    _log_config.explicit = False
    _output_level = OutputLevel.NORMAL


# =============================================================================
# Config loading
# =============================================================================


def load_config(path: Path | None, console: Console) -> LearnLoopConfig:
    """Load a config file, or the defaults when no path is given.

    A ``logging`` section in the file reconfigures logging unless a --log-*
    option was given on the command line.

    Raises:
        typer.Exit: If the file cannot be loaded.
    """
    if path is None:
        return LearnLoopConfig()
    try:
        config = LearnLoopConfig.from_yaml(path)
    except ConfigError as e:
        console.print(f"[red]Error loading config:[/red] {e}")
        raise typer.Exit(1) from None

    if "logging" in config.model_fields_set and not _log_config.explicit:
        _apply_file_logging(config, console)
    return config


def _apply_file_logging(config: LearnLoopConfig, console: Console) -> None:
    """Reconfigure logging from the config file's ``logging`` section."""
    log = config.logging
    try:
        configure_logging(
            level=log.level,
            format=log.format,
            file_path=log.file_path,
            max_file_size_mb=log.max_file_size_mb,
            backup_count=log.backup_count,
            include_timestamps=log.include_timestamps,
            include_context=log.include_context,
        )
    except (ValueError, OSError) as e:
        console.print(f"[red]Logging configuration error:[/red] {e}")
        raise typer.Exit(1) from None
    _logger.debug("cli.logging_from_config", level=log.level, format=log.format)
