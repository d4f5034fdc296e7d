"""Error categories for the learning pipeline.

Every failure inside the pipeline falls into one of these categories.
Only WRITE_FAILURE can escape as an exception (unexpected I/O during a
write); the others are reported through result objects.
"""

from enum import Enum


class ErrorCategory(str, Enum):
    """Categories of pipeline outcomes that are not plain success."""

    SOURCE_UNAVAILABLE = "source_unavailable"
    """Log file or directory missing/unreadable. Recovered locally."""

    PARSE_SKIP = "parse_skip"
    """Line without a bracketed timestamp. Silently dropped, not counted."""

    WRITE_FAILURE = "write_failure"
    """Skill or correction file could not be written. No retry."""

    THRESHOLD_MISS = "threshold_miss"
    """Confidence below the generation threshold. A normal branch outcome."""
