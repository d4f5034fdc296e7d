"""Shared utilities for learnloop.

Contains cross-cutting utilities used by multiple modules.
"""

from learnloop.utils.time import days_between, parse_timestamp, utc_now

__all__ = ["days_between", "parse_timestamp", "utc_now"]
