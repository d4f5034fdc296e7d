"""Core configuration, logging and error types."""

from learnloop.core.config import LearnLoopConfig, LogConfig
from learnloop.core.errors import ConfigError, ErrorCategory, LearnLoopError

__all__ = [
    "ConfigError",
    "ErrorCategory",
    "LearnLoopConfig",
    "LearnLoopError",
    "LogConfig",
]
