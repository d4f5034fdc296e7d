"""Rich output formatting for the learnloop CLI.

Centralizes Rich-based formatting: the shared console, colors for decision
actions and table factories used by the commands.
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from learnloop.learning.decision import Action

# =============================================================================
# Shared console instance
# =============================================================================

# Quiet/JSON modes are handled by guards in each command, not by the console.
console = Console()


# =============================================================================
# Color schemes
# =============================================================================


class ActionColors:
    """Color and label mappings for decision-gate actions."""

    COLORS: dict[Action, str] = {
        Action.AUTO_GENERATE: "green",
        Action.HUMAN_REVIEW: "yellow",
        Action.DISCARD: "red",
    }

    LABELS: dict[Action, str] = {
        Action.AUTO_GENERATE: "AUTO-GENERATE",
        Action.HUMAN_REVIEW: "NEEDS REVIEW",
        Action.DISCARD: "DISCARDED",
    }

    @classmethod
    def format(cls, action: Action) -> str:
        """Rich markup for an action."""
        color = cls.COLORS.get(action, "white")
        return f"[{color}]{cls.LABELS.get(action, action.value)}[/{color}]"


# =============================================================================
# Table builders
# =============================================================================


def create_patterns_table() -> Table:
    """Create a styled table for scored patterns."""
    table = Table(title="Patterns Found")
    table.add_column("Pattern", style="cyan", no_wrap=True)
    table.add_column("Occurrences", justify="right")
    table.add_column("Confidence", justify="right")
    table.add_column("Last Seen", style="dim")
    table.add_column("Decision")
    return table


def create_corrections_table() -> Table:
    """Create a styled table for drift corrections."""
    table = Table(title="Drift Corrections")
    table.add_column("Missing", style="cyan", no_wrap=True)
    table.add_column("Replacement", style="green")
    table.add_column("Applied", justify="center")
    table.add_column("Reason", style="dim", no_wrap=False)
    return table


def create_triggers_table() -> Table:
    """Create a styled table for trigger definitions or results."""
    table = Table(title="Triggers")
    table.add_column("Trigger", style="cyan", no_wrap=True)
    table.add_column("Condition")
    table.add_column("Action", style="dim")
    table.add_column("State", justify="center")
    return table
