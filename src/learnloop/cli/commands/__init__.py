"""CLI command modules.

Each module defines one or more Typer command functions, registered on the
app in ``learnloop.cli``.
"""

from .drift import drift
from .learn import learn
from .trigger import trigger_check, trigger_list

__all__ = [
    "drift",
    "learn",
    "trigger_check",
    "trigger_list",
]
