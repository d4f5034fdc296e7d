"""One learning pass: monitor, detect, score, decide, generate, correct.

The pipeline wires the stages together the way the ``learn`` command runs
them. Each stage stays independently callable; this module only sequences
them and collects a report.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from learnloop.core.config import LearnLoopConfig
from learnloop.core.errors import ErrorCategory
from learnloop.core.logging import (
    ExecutionContext,
    get_current_context,
    get_logger,
    with_context,
)
from learnloop.learning.confidence import ConfidenceCalculator, ConfidenceResult
from learnloop.learning.decision import Action
from learnloop.learning.drift import DriftCorrection, apply_correction, auto_correct_drift
from learnloop.learning.generator import generate_skill, skill_exists, write_skill
from learnloop.learning.monitor import MonitorResult, monitor_all
from learnloop.learning.patterns import (
    DetectorResult,
    Pattern,
    detect_patterns,
    is_significant_pattern,
)
from learnloop.notifications import NotificationDispatcher, Notifier, ValidatedLogNotifier
from learnloop.triggers.pattern_validated import create_event

_logger = get_logger("pipeline")


@dataclass
class PatternEvaluation:
    """What the pipeline decided for one pattern."""

    pattern: Pattern
    confidence: ConfidenceResult
    action: Action
    skill_path: Path | None = None
    """Set when a skill file was written."""

    skipped_existing: bool = False
    write_error: str | None = None


@dataclass
class PipelineReport:
    """Summary of one learning pass."""

    monitor: MonitorResult
    detection: DetectorResult | None = None
    evaluations: list[PatternEvaluation] = field(default_factory=list)
    corrections: list[DriftCorrection] = field(default_factory=list)
    dry_run: bool = False

    def count(self, action: Action) -> int:
        return sum(1 for e in self.evaluations if e.action is action)

    @property
    def generated(self) -> int:
        return self.count(Action.AUTO_GENERATE)

    @property
    def review(self) -> int:
        return self.count(Action.HUMAN_REVIEW)

    @property
    def discarded(self) -> int:
        return self.count(Action.DISCARD)

    @property
    def written_skills(self) -> list[Path]:
        return [e.skill_path for e in self.evaluations if e.skill_path is not None]

    @property
    def nothing_to_learn(self) -> bool:
        """No entries were found; informational, not an error."""
        return not self.monitor.entries


class LearningPipeline:
    """Runs learning passes for one configuration.

    Relative paths in the configuration are resolved against ``base_dir``.
    """

    def __init__(
        self,
        config: LearnLoopConfig | None = None,
        base_dir: Path | str = ".",
        notifiers: list[Notifier] | None = None,
    ) -> None:
        self.config = config or LearnLoopConfig()
        self.base_dir = Path(base_dir)
        self.calculator = ConfidenceCalculator(self.config.weights)
        if notifiers is None:
            notifiers = [ValidatedLogNotifier(self.base_dir)]
        self.dispatcher = NotificationDispatcher(notifiers, self.config.notifications)

    def _resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else self.base_dir / path

    def _context(self) -> ExecutionContext:
        return get_current_context() or ExecutionContext(component="pipeline")

    async def run(self, dry_run: bool = False, now: datetime | None = None) -> PipelineReport:
        """Execute one learning pass.

        Args:
            dry_run: Score and decide, but write nothing (no skills, no
                validated-log entries, no document corrections).
            now: Reference time for dated-log selection and recency.
        """
        with with_context(ExecutionContext(component="pipeline")):
            return await self._run(dry_run, now)

    async def _run(self, dry_run: bool, now: datetime | None) -> PipelineReport:
        monitor_cfg = self.config.monitor
        with with_context(self._context().with_component("monitor")):
            monitor = await monitor_all(
                self._resolve(monitor_cfg.primary_dir),
                self._resolve(monitor_cfg.dated_dir),
                monitor_cfg.days_back,
                now=now,
            )
        report = PipelineReport(monitor=monitor, dry_run=dry_run)

        if not monitor.entries:
            _logger.info("pipeline.nothing_to_learn", error=monitor.error)
            return report

        detection = detect_patterns(monitor.entries, self.config.detection.min_occurrences)
        if self.config.detection.significant_only:
            detection.patterns = [
                p for p in detection.patterns
                if is_significant_pattern(p, detection.total_entries)
            ]
        report.detection = detection

        if not detection.patterns:
            _logger.info("pipeline.no_patterns", entries=detection.total_entries)
            return report

        for pattern in detection.patterns:
            report.evaluations.append(await self._evaluate(pattern, dry_run, now))

        if self.config.drift.expected_workflow:
            report.corrections = await self._correct_drift(detection.patterns, dry_run)

        _logger.info(
            "pipeline.pass_complete",
            patterns=len(detection.patterns),
            generated=report.generated,
            review=report.review,
            discarded=report.discarded,
            corrections=len(report.corrections),
            dry_run=dry_run,
        )
        return report

    async def _evaluate(
        self,
        pattern: Pattern,
        dry_run: bool,
        now: datetime | None,
    ) -> PatternEvaluation:
        confidence = self.calculator.calculate(pattern, now=now)
        event = create_event(pattern, confidence)
        evaluation = PatternEvaluation(pattern=pattern, confidence=confidence, action=event.action)

        if event.action is Action.DISCARD:
            _logger.debug(
                "pipeline.pattern_discarded",
                pattern=pattern.name,
                score=confidence.score,
                category=ErrorCategory.THRESHOLD_MISS.value,
            )

        if dry_run:
            return evaluation

        await self.dispatcher.dispatch(event)

        if event.action is not Action.AUTO_GENERATE:
            return evaluation

        skill = generate_skill(pattern, confidence)
        vault_dir = self._resolve(self.config.skills.vault_dir)
        if self.config.skills.skip_existing and skill_exists(skill.name, vault_dir):
            evaluation.skipped_existing = True
            _logger.debug("pipeline.skill_exists", skill=skill.name)
            return evaluation

        result = await write_skill(skill, vault_dir)
        if result.success:
            evaluation.skill_path = result.path
        else:
            evaluation.write_error = result.error
        return evaluation

    async def _correct_drift(
        self,
        patterns: list[Pattern],
        dry_run: bool,
    ) -> list[DriftCorrection]:
        drift_cfg = self.config.drift
        result = auto_correct_drift(
            patterns,
            drift_cfg.expected_workflow,
            drift_cfg.confidence_threshold,
        )
        if drift_cfg.auto_apply and drift_cfg.target_file is not None and not dry_run:
            target = self._resolve(drift_cfg.target_file)
            ctx = self._context().with_component("drift").with_source(str(target))
            with with_context(ctx):
                for correction in result.corrections:
                    await apply_correction(correction, target)
        return result.corrections
