"""Top-level configuration for a learning pipeline run."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from learnloop.core.config.learning import (
    ConfidenceWeights,
    DetectionConfig,
    DriftConfig,
    MonitorConfig,
    NotificationConfig,
    SkillConfig,
)
from learnloop.core.config.workspace import LogConfig
from learnloop.core.errors import ConfigError


class LearnLoopConfig(BaseModel):
    """Complete learnloop configuration.

    Every section has defaults, so an empty YAML document is a valid config.

    Example YAML:
        monitor:
          primary_dir: ops
          dated_dir: memory
          days_back: 7
        detection:
          min_occurrences: 3
        skills:
          vault_dir: vault/skills
        drift:
          expected_workflow: [BUILD, TEST, DEPLOY]
    """

    monitor: MonitorConfig = Field(default_factory=MonitorConfig)
    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    weights: ConfidenceWeights = Field(default_factory=ConfidenceWeights)
    skills: SkillConfig = Field(default_factory=SkillConfig)
    drift: DriftConfig = Field(default_factory=DriftConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    logging: LogConfig = Field(default_factory=LogConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> LearnLoopConfig:
        """Load configuration from a YAML file.

        Raises:
            ConfigError: If the file cannot be read, parsed or validated.
        """
        try:
            with open(path, encoding="utf-8") as f:
                return cls.from_yaml_string(f.read())
        except OSError as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e

    @classmethod
    def from_yaml_string(cls, yaml_str: str) -> LearnLoopConfig:
        """Load configuration from a YAML string.

        Raises:
            ConfigError: If the YAML is malformed or fails validation.
        """
        try:
            data = yaml.safe_load(yaml_str) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("Config root must be a mapping")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(str(e)) from e
