"""Learning module: log monitoring, pattern detection, confidence and drift."""

from learnloop.learning.confidence import (
    ConfidenceCalculator,
    ConfidenceFactor,
    ConfidenceResult,
    calculate_confidence,
    consistency_factor,
    needs_human_review,
    recency_factor,
    sample_size_factor,
    should_auto_generate,
    should_discard,
)
from learnloop.learning.decision import Action, ConfidenceLevel, classify, level_for
from learnloop.learning.drift import (
    CorrectionResult,
    DriftCorrection,
    apply_correction,
    auto_correct_drift,
    detect_drift,
    suggest_correction,
    suggest_workflow_improvement,
)
from learnloop.learning.generator import (
    GeneratedSkill,
    SkillWriteResult,
    generate_skill,
    generate_skill_name,
    skill_exists,
    write_skill,
)
from learnloop.learning.monitor import (
    LogEntry,
    MonitorResult,
    monitor_all,
    parse_line,
    parse_log,
    read_dated_logs,
    read_primary_log,
)
from learnloop.learning.patterns import (
    DetectorResult,
    Pattern,
    detect_patterns,
    group_by_action,
    is_significant_pattern,
    normalize_action,
)

__all__ = [
    # Monitor
    "LogEntry",
    "MonitorResult",
    "monitor_all",
    "parse_line",
    "parse_log",
    "read_dated_logs",
    "read_primary_log",
    # Patterns
    "DetectorResult",
    "Pattern",
    "detect_patterns",
    "group_by_action",
    "is_significant_pattern",
    "normalize_action",
    # Confidence
    "ConfidenceCalculator",
    "ConfidenceFactor",
    "ConfidenceResult",
    "calculate_confidence",
    "consistency_factor",
    "needs_human_review",
    "recency_factor",
    "sample_size_factor",
    "should_auto_generate",
    "should_discard",
    # Decision gate
    "Action",
    "ConfidenceLevel",
    "classify",
    "level_for",
    # Skills
    "GeneratedSkill",
    "SkillWriteResult",
    "generate_skill",
    "generate_skill_name",
    "skill_exists",
    "write_skill",
    # Drift
    "CorrectionResult",
    "DriftCorrection",
    "apply_correction",
    "auto_correct_drift",
    "detect_drift",
    "suggest_correction",
    "suggest_workflow_improvement",
]
