"""Triggers: pattern-validated events and status-file trigger conditions."""

from learnloop.triggers.monitor import (
    DEFAULT_TRIGGERS,
    Trigger,
    TriggerCondition,
    TriggerMonitorResult,
    TriggerResult,
    check_condition,
    check_triggers,
    monitor_status_file,
    parse_status_file,
)
from learnloop.triggers.pattern_validated import (
    NotificationTarget,
    PatternValidatedEvent,
    create_event,
    determine_action,
    format_notification,
    get_notification_targets,
    should_notify,
)

__all__ = [
    # Pattern-validated events
    "NotificationTarget",
    "PatternValidatedEvent",
    "create_event",
    "determine_action",
    "format_notification",
    "get_notification_targets",
    "should_notify",
    # Status-file triggers
    "DEFAULT_TRIGGERS",
    "Trigger",
    "TriggerCondition",
    "TriggerMonitorResult",
    "TriggerResult",
    "check_condition",
    "check_triggers",
    "monitor_status_file",
    "parse_status_file",
]
