"""Error categories and exception hierarchy.

All learnloop exceptions inherit from LearnLoopError, so callers can catch
broad (LearnLoopError) or narrow (e.g., ConfigError).
"""

from __future__ import annotations

from learnloop.core.errors.codes import ErrorCategory


class LearnLoopError(Exception):
    """Base exception for all learnloop errors."""


class ConfigError(LearnLoopError):
    """Raised when a configuration file cannot be read or fails validation."""


__all__ = [
    "ConfigError",
    "ErrorCategory",
    "LearnLoopError",
]
