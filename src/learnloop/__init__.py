"""learnloop - autonomous pattern learning from operational logs.

Reads run logs, detects repeated actions, scores them for confidence, and
turns validated patterns into skill documents. Also watches an expected
workflow for drift and evaluates simple triggers over status files.
"""

__version__ = "0.1.0"
