"""Learning pipeline configuration models.

Defines models for log monitoring, pattern detection, confidence weighting,
skill generation, drift correction and validated-pattern notifications.
"""

from __future__ import annotations

import math
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from learnloop.core.constants import (
    AUTO_GENERATE_THRESHOLD,
    BROADCAST_CHANNEL,
    CONSISTENCY_WEIGHT,
    DEFAULT_DATED_DIR,
    DEFAULT_DAYS_BACK,
    DEFAULT_MIN_OCCURRENCES,
    DEFAULT_PRIMARY_DIR,
    DEFAULT_SKILLS_DIR,
    RECENCY_WEIGHT,
    REVIEW_CHANNEL,
    SAMPLE_SIZE_WEIGHT,
    VALIDATED_PATTERNS_LOG,
)


class MonitorConfig(BaseModel):
    """Where the log monitor looks for entries.

    The primary log is ``<primary_dir>/RUNLOG.md``; dated logs are files named
    ``YYYY-MM-DD.<ext>`` inside ``dated_dir``.
    """

    primary_dir: Path = Field(
        default=Path(DEFAULT_PRIMARY_DIR),
        description="Directory holding the running RUNLOG.md",
    )
    dated_dir: Path = Field(
        default=Path(DEFAULT_DATED_DIR),
        description="Directory holding YYYY-MM-DD dated logs",
    )
    days_back: int = Field(
        default=DEFAULT_DAYS_BACK,
        ge=0,
        description="Retention window for dated logs, in days",
    )


class DetectionConfig(BaseModel):
    """Configuration for pattern detection."""

    min_occurrences: int = Field(
        default=DEFAULT_MIN_OCCURRENCES,
        ge=1,
        description="Minimum entries sharing a normalized action to form a pattern",
    )
    significant_only: bool = Field(
        default=False,
        description="Additionally drop patterns that fail the significance test "
        "(5+ occurrences or 5% of all entries)",
    )


class ConfidenceWeights(BaseModel):
    """Weights combining the three confidence factors.

    The weights must sum to 1.0 so that the combined score stays in [0, 100].
    """

    sample_size: float = Field(default=SAMPLE_SIZE_WEIGHT, ge=0.0, le=1.0)
    recency: float = Field(default=RECENCY_WEIGHT, ge=0.0, le=1.0)
    consistency: float = Field(default=CONSISTENCY_WEIGHT, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _validate_sum(self) -> ConfidenceWeights:
        total = self.sample_size + self.recency + self.consistency
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"confidence weights must sum to 1.0 (got {total:.3f})")
        return self


class SkillConfig(BaseModel):
    """Configuration for skill generation."""

    vault_dir: Path = Field(
        default=Path(DEFAULT_SKILLS_DIR),
        description="Directory where generated skills are written",
    )
    skip_existing: bool = Field(
        default=True,
        description="Do not overwrite a skill that already exists in the vault",
    )


class DriftConfig(BaseModel):
    """Configuration for drift detection and correction.

    Example YAML:
        drift:
          expected_workflow: [BUILD, TEST, VERIFY, COMMIT]
          confidence_threshold: 85
          target_file: docs/WORKFLOW.md
          auto_apply: false
    """

    expected_workflow: list[str] = Field(
        default_factory=list,
        description="Ordered list of expected normalized action names",
    )
    confidence_threshold: int = Field(
        default=AUTO_GENERATE_THRESHOLD,
        ge=0,
        le=100,
        description="Global gate for auto-correction. Below 85 nothing is proposed.",
    )
    target_file: Path | None = Field(
        default=None,
        description="Workflow document corrections are applied to",
    )
    auto_apply: bool = Field(
        default=False,
        description="Apply proposed corrections to target_file without review",
    )

    @model_validator(mode="after")
    def _check_target_for_apply(self) -> DriftConfig:
        if self.auto_apply and self.target_file is None:
            raise ValueError("target_file is required when auto_apply is enabled")
        return self


class NotificationConfig(BaseModel):
    """Targets for validated-pattern notifications."""

    validated_log: Path = Field(
        default=Path(VALIDATED_PATTERNS_LOG),
        description="Append-only log of validated patterns",
    )
    broadcast_channel: str = Field(
        default=BROADCAST_CHANNEL,
        description="Channel notified for auto-generated skills",
    )
    review_channel: str = Field(
        default=REVIEW_CHANNEL,
        description="Channel notified for patterns needing human review",
    )

    @model_validator(mode="after")
    def _check_distinct_channels(self) -> NotificationConfig:
        if self.broadcast_channel == self.review_channel:
            raise ValueError("broadcast_channel and review_channel must differ")
        return self
