"""Configuration models for learnloop.

This package provides Pydantic models for loading and validating YAML
pipeline configuration. All models are re-exported from this ``__init__``.
"""

from learnloop.core.config.learning import (
    ConfidenceWeights,
    DetectionConfig,
    DriftConfig,
    MonitorConfig,
    NotificationConfig,
    SkillConfig,
)
from learnloop.core.config.pipeline import LearnLoopConfig
from learnloop.core.config.workspace import LogConfig

__all__ = [
    "ConfidenceWeights",
    "DetectionConfig",
    "DriftConfig",
    "LearnLoopConfig",
    "LogConfig",
    "MonitorConfig",
    "NotificationConfig",
    "SkillConfig",
]
