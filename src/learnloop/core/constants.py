"""Global constants for learnloop.

Centralizes the thresholds, weights and default paths used throughout the
pipeline, making them discoverable and consistent.
"""

# =============================================================================
# Decision Gate Thresholds (confidence score, 0-100)
# =============================================================================

AUTO_GENERATE_THRESHOLD = 85
"""Scores at or above this promote a pattern straight to a skill."""

HUMAN_REVIEW_THRESHOLD = 70
"""Scores in [HUMAN_REVIEW_THRESHOLD, AUTO_GENERATE_THRESHOLD) need review."""

# =============================================================================
# Confidence Factor Weights
# =============================================================================

SAMPLE_SIZE_WEIGHT = 0.5
RECENCY_WEIGHT = 0.3
CONSISTENCY_WEIGHT = 0.2

RECENCY_WINDOW_DAYS = 30
"""Recency decays linearly to zero over this many days."""

CONSISTENCY_MIN_WORD_LENGTH = 3
"""Only words longer than this count toward outcome consistency."""

NEUTRAL_CONSISTENCY = 0.5
"""Consistency assigned when fewer than two examples exist."""

# =============================================================================
# Detection
# =============================================================================

DEFAULT_MIN_OCCURRENCES = 3
MAX_PATTERN_EXAMPLES = 3

SIGNIFICANT_OCCURRENCES = 5
SIGNIFICANT_SHARE = 0.05
"""A pattern is significant with 5+ occurrences or 5% of all entries."""

# =============================================================================
# Default Paths
# =============================================================================

DEFAULT_PRIMARY_DIR = "ops"
PRIMARY_LOG_NAME = "RUNLOG.md"
DEFAULT_DATED_DIR = "memory"
DEFAULT_DAYS_BACK = 7
DEFAULT_SKILLS_DIR = "vault/skills"
VALIDATED_PATTERNS_LOG = "vault/patterns/validated.md"

# =============================================================================
# Notification Channels
# =============================================================================

BROADCAST_CHANNEL = "#patterns"
"""Channel notified when a pattern is auto-generated into a skill."""

REVIEW_CHANNEL = "#pattern-review"
"""Channel notified when a pattern needs human review."""

# =============================================================================
# Drift Correction
# =============================================================================

MANUAL_PROCESS_PLACEHOLDER = "manual process"
"""Workflow text replaced when suggesting automation of a pattern."""
