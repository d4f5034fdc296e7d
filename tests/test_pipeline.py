"""End-to-end tests for learnloop.learning.pipeline.

Each test builds a small project tree (ops/RUNLOG.md, memory/) and runs a
full learning pass against it with a fixed clock.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

import pytest

from learnloop.core.config import DriftConfig, LearnLoopConfig
from learnloop.core.logging import configure_logging
from learnloop.learning.decision import Action
from learnloop.learning.pipeline import LearningPipeline

from tests.helpers import RecordingNotifier, log_lines

NOW = datetime(2026, 10, 18, 3, 0, 0)


def _write_runlog(workspace: Path) -> None:
    lines = [
        "# Run log",
        *log_lines("DEPLOY", 99, "deployed service cleanly", hour=0),
        *log_lines("LINT", 6, "lint clean", hour=2),
        *log_lines("TEST", 3, "passed all suites", hour=2),
    ]
    (workspace / "ops" / "RUNLOG.md").write_text("\n".join(lines) + "\n")


@pytest.fixture
def project(workspace: Path) -> Path:
    _write_runlog(workspace)
    return workspace


def _by_name(report):
    return {e.pattern.name: e for e in report.evaluations}


class TestLearningPipeline:
    """Tests for LearningPipeline.run()."""

    @pytest.mark.asyncio
    async def test_decisions(self, project: Path):
        report = await LearningPipeline(base_dir=project).run(now=NOW)

        evaluations = _by_name(report)
        assert evaluations["deploy"].action is Action.AUTO_GENERATE
        assert evaluations["lint"].action is Action.HUMAN_REVIEW
        assert evaluations["test"].action is Action.DISCARD
        assert (report.generated, report.review, report.discarded) == (1, 1, 1)

    @pytest.mark.asyncio
    async def test_writes_skill_and_validated_log(self, project: Path):
        report = await LearningPipeline(base_dir=project).run(now=NOW)

        skill = project / "vault" / "skills" / "auto-deploy.md"
        assert report.written_skills == [skill]
        assert "**Confidence:**" in skill.read_text()

        validated = (project / "vault" / "patterns" / "validated.md").read_text()
        assert "Pattern Validated: deploy" in validated
        assert "Pattern Validated: lint" in validated
        assert "Pattern Validated: test" not in validated

    @pytest.mark.asyncio
    async def test_channel_notifications(self, project: Path):
        channel = RecordingNotifier("channel")

        await LearningPipeline(base_dir=project, notifiers=[channel]).run(now=NOW)

        assert sorted(t.target for _, t in channel.sent) == ["#pattern-review", "#patterns"]
        assert not (project / "vault" / "patterns").exists()

    @pytest.mark.asyncio
    async def test_dry_run_writes_nothing(self, project: Path):
        report = await LearningPipeline(base_dir=project).run(dry_run=True, now=NOW)

        assert report.dry_run is True
        assert report.generated == 1
        assert report.written_skills == []
        assert not (project / "vault").exists()

    @pytest.mark.asyncio
    async def test_existing_skill_is_kept(self, project: Path):
        pipeline = LearningPipeline(base_dir=project)
        await pipeline.run(now=NOW)
        skill = project / "vault" / "skills" / "auto-deploy.md"
        skill.write_text("hand edited")

        report = await pipeline.run(now=NOW)

        assert _by_name(report)["deploy"].skipped_existing is True
        assert skill.read_text() == "hand edited"

    @pytest.mark.asyncio
    async def test_overwrite_when_not_skipping(self, project: Path):
        config = LearnLoopConfig()
        config.skills.skip_existing = False
        skill = project / "vault" / "skills" / "auto-deploy.md"
        skill.parent.mkdir(parents=True)
        skill.write_text("hand edited")

        await LearningPipeline(config, base_dir=project).run(now=NOW)

        assert skill.read_text().startswith("# Skill: auto-deploy")

    @pytest.mark.asyncio
    async def test_nothing_to_learn(self, workspace: Path):
        report = await LearningPipeline(base_dir=workspace).run(now=NOW)

        assert report.nothing_to_learn is True
        assert report.monitor.success is True
        assert report.detection is None
        assert report.evaluations == []

    @pytest.mark.asyncio
    async def test_missing_sources(self, tmp_path: Path):
        report = await LearningPipeline(base_dir=tmp_path).run(now=NOW)

        assert report.monitor.success is False
        assert report.nothing_to_learn is True

    @pytest.mark.asyncio
    async def test_min_occurrences(self, project: Path):
        config = LearnLoopConfig()
        config.detection.min_occurrences = 10

        report = await LearningPipeline(config, base_dir=project).run(dry_run=True, now=NOW)

        assert [e.pattern.name for e in report.evaluations] == ["deploy"]

    @pytest.mark.asyncio
    async def test_dated_logs_are_included(self, project: Path):
        (project / "memory" / "2026-10-17.md").write_text(
            "\n".join(
                f"[2026-10-17 10:{i:02d}] Review PR: merged" for i in range(4)
            )
        )

        report = await LearningPipeline(base_dir=project).run(dry_run=True, now=NOW)

        assert "review-pr" in _by_name(report)


class TestPipelineDrift:
    """Drift correction inside a learning pass."""

    @pytest.mark.asyncio
    async def test_corrections_proposed_not_applied(self, project: Path):
        config = LearnLoopConfig(drift=DriftConfig(expected_workflow=["DEPLOY_PROD", "LINT"]))

        report = await LearningPipeline(config, base_dir=project).run(now=NOW)

        assert [(c.before, c.after) for c in report.corrections] == [("DEPLOY_PROD", "DEPLOY")]
        assert report.corrections[0].applied is False

    @pytest.mark.asyncio
    async def test_auto_apply(self, project: Path):
        (project / "WORKFLOW.md").write_text("1. LINT\n2. DEPLOY_PROD\n")
        config = LearnLoopConfig(
            drift=DriftConfig(
                expected_workflow=["DEPLOY_PROD"],
                target_file=Path("WORKFLOW.md"),
                auto_apply=True,
            )
        )

        report = await LearningPipeline(config, base_dir=project).run(now=NOW)

        assert report.corrections[0].applied is True
        assert (project / "WORKFLOW.md").read_text() == "1. LINT\n2. DEPLOY\n"

    @pytest.mark.asyncio
    async def test_applied_correction_logged_with_target_source(
        self, project: Path, tmp_path: Path
    ):
        log_file = tmp_path / "learnloop.log"
        configure_logging(level="INFO", format="json", file_path=log_file)
        (project / "WORKFLOW.md").write_text("DEPLOY_PROD\n")
        config = LearnLoopConfig(
            drift=DriftConfig(
                expected_workflow=["DEPLOY_PROD"],
                target_file=Path("WORKFLOW.md"),
                auto_apply=True,
            )
        )

        await LearningPipeline(config, base_dir=project).run(now=NOW)
        for handler in logging.getLogger().handlers:
            handler.flush()

        records = [json.loads(line) for line in log_file.read_text().splitlines()]
        applied = [r for r in records if r["event"] == "drift.correction_applied"]
        run_ids = {r["run_id"] for r in records if r["event"].startswith("pipeline.")}
        assert applied[0]["source"] == str(project / "WORKFLOW.md")
        assert applied[0]["run_id"] in run_ids

    @pytest.mark.asyncio
    async def test_auto_apply_skipped_on_dry_run(self, project: Path):
        (project / "WORKFLOW.md").write_text("DEPLOY_PROD\n")
        config = LearnLoopConfig(
            drift=DriftConfig(
                expected_workflow=["DEPLOY_PROD"],
                target_file=Path("WORKFLOW.md"),
                auto_apply=True,
            )
        )

        report = await LearningPipeline(config, base_dir=project).run(dry_run=True, now=NOW)

        assert report.corrections[0].applied is False
        assert (project / "WORKFLOW.md").read_text() == "DEPLOY_PROD\n"

    @pytest.mark.asyncio
    async def test_low_threshold_blocks_corrections(self, project: Path):
        config = LearnLoopConfig(
            drift=DriftConfig(expected_workflow=["DEPLOY_PROD"], confidence_threshold=60)
        )

        report = await LearningPipeline(config, base_dir=project).run(now=NOW)

        assert report.corrections == []
