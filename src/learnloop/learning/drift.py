"""Drift detection and correction against an expected workflow.

Drift is an expected workflow action that no longer shows up among the
observed patterns. The corrector proposes substitutions; applying them is a
separate, explicit step (apply_correction) so callers can review first.

Applying a correction is a plain text substitution on a document. It is
serialized per document with an advisory lock on a ``<file>.lock`` sidecar
and written through a temp file plus atomic rename, so concurrent correction
runs cannot interleave and readers never see a half-written file.
"""

from __future__ import annotations

import asyncio
import fcntl
import os
import tempfile
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from learnloop.core.constants import AUTO_GENERATE_THRESHOLD, MANUAL_PROCESS_PLACEHOLDER
from learnloop.core.logging import get_logger
from learnloop.learning.confidence import ConfidenceResult
from learnloop.learning.patterns import Pattern

_logger = get_logger("drift")

CorrectionType = Literal["workflow", "config", "skill"]

Similarity = Callable[[str, str], bool]
"""(missing_action, candidate_action) -> whether the candidate can stand in."""


@dataclass
class DriftCorrection:
    """A proposed substitution in a target document.

    ``applied`` flips to True only after the substitution succeeded.
    """

    type: CorrectionType
    target: str
    before: str
    after: str
    reason: str
    applied: bool = False


@dataclass
class CorrectionResult:
    """Result of an auto-correction pass."""

    success: bool
    corrections: list[DriftCorrection] = field(default_factory=list)
    error: str | None = None


def first_token_overlap(missing: str, candidate: str) -> bool:
    """Default similarity: either action contains the other's first token.

    Coarse by nature: ``BUILD_APP`` and ``BUILD_DOCS`` count as
    interchangeable. Pass a different Similarity to suggest_correction when
    that matters.
    """
    return missing.split("_")[0] in candidate or candidate.split("_")[0] in missing


def detect_drift(current_patterns: Sequence[Pattern], expected_actions: Sequence[str]) -> list[str]:
    """Expected actions with no matching observed pattern, in expected order."""
    current = {p.action for p in current_patterns}
    return [action for action in expected_actions if action not in current]


def suggest_correction(
    missing_action: str,
    available_patterns: Sequence[Pattern],
    similarity: Similarity = first_token_overlap,
) -> DriftCorrection | None:
    """Propose swapping a missing action for the first similar observed one.

    Returns:
        A workflow correction, or None if no available pattern is similar.
    """
    for candidate in available_patterns:
        if similarity(missing_action, candidate.action):
            return DriftCorrection(
                type="workflow",
                target=missing_action,
                before=missing_action,
                after=candidate.action,
                reason=(
                    f"Pattern {missing_action} not observed. "
                    f"{candidate.action} found {candidate.occurrences} times."
                ),
            )
    return None


@contextmanager
def _locked(path: Path) -> Iterator[None]:
    """Hold an exclusive advisory lock on ``<path>.lock`` for the block."""
    lock_path = path.with_name(f"{path.name}.lock")
    fd = os.open(lock_path, os.O_RDWR | os.O_CREAT, 0o644)
    try:
        fcntl.flock(fd, fcntl.LOCK_EX)
        yield
    finally:
        fcntl.flock(fd, fcntl.LOCK_UN)
        os.close(fd)


def _atomic_write(path: Path, content: str) -> None:
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as f:
        f.write(content)
        temp_path = Path(f.name)
    try:
        os.replace(temp_path, path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise


def _substitute(correction: DriftCorrection, path: Path) -> bool:
    with _locked(path):
        try:
            with open(path, encoding="utf-8") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            _logger.warning("drift.target_unreadable", target=str(path), error=str(e))
            return False

        if correction.before not in content:
            return False

        _atomic_write(path, content.replace(correction.before, correction.after))
        return True


async def apply_correction(correction: DriftCorrection, file_path: Path | str) -> bool:
    """Replace every literal occurrence of ``before`` with ``after`` in a file.

    This is a text substitution, not a structural edit: a ``before`` string
    that also matches unrelated text is replaced there too.

    Returns:
        True if a replacement happened (and ``correction.applied`` is set),
        False if the file was unreadable or did not contain ``before``.

    Raises:
        OSError: If the rewritten file cannot be written.
    """
    path = Path(file_path)
    if not path.is_file():
        _logger.warning("drift.target_missing", target=str(path))
        return False

    replaced = await asyncio.to_thread(_substitute, correction, path)
    if replaced:
        correction.applied = True
        _logger.info(
            "drift.correction_applied",
            target=str(path),
            before=correction.before,
            after=correction.after,
        )
    return replaced


def suggest_workflow_improvement(
    pattern: Pattern,
    confidence: ConfidenceResult,
) -> DriftCorrection | None:
    """Propose automating a high-confidence pattern (score >= 85 only)."""
    if confidence.score < AUTO_GENERATE_THRESHOLD:
        return None

    return DriftCorrection(
        type="workflow",
        target=f"workflow-{pattern.name}",
        before=MANUAL_PROCESS_PLACEHOLDER,
        after=f"automated {pattern.name} pattern",
        reason=(
            f"Pattern {pattern.name} observed {pattern.occurrences} times "
            f"with {confidence.score}% confidence. Consider automating."
        ),
    )


def auto_correct_drift(
    patterns: Sequence[Pattern],
    expected_workflow: Sequence[str],
    confidence_threshold: float,
    similarity: Similarity = first_token_overlap,
) -> CorrectionResult:
    """Propose corrections for every missing expected action.

    ``confidence_threshold`` is a global gate: below 85 nothing is proposed,
    whatever the drift. Corrections are proposals only; nothing is applied.
    """
    if confidence_threshold < AUTO_GENERATE_THRESHOLD:
        _logger.debug("drift.gate_closed", threshold=confidence_threshold)
        return CorrectionResult(success=True, corrections=[])

    missing = detect_drift(patterns, expected_workflow)
    corrections: list[DriftCorrection] = []
    for action in missing:
        correction = suggest_correction(action, patterns, similarity)
        if correction is not None:
            corrections.append(correction)

    _logger.info(
        "drift.corrections_proposed",
        missing=len(missing),
        corrections=len(corrections),
    )
    return CorrectionResult(success=True, corrections=corrections)
