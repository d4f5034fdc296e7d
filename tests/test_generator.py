"""Tests for learnloop.learning.generator."""

from __future__ import annotations

from pathlib import Path

import pytest

from learnloop.learning.generator import (
    SKILL_SOURCE,
    format_skill,
    generate_skill,
    generate_skill_name,
    skill_exists,
    write_skill,
)

from tests.helpers import make_confidence, make_pattern


@pytest.fixture
def skill():
    pattern = make_pattern(
        "DEPLOY_APP",
        occurrences=12,
        examples=["deployed v1", "deployed v2", "deployed v3"],
    )
    return generate_skill(pattern, make_confidence(91))


class TestGenerateSkill:
    """Tests for generate_skill()."""

    def test_name_is_prefixed(self):
        assert generate_skill_name(make_pattern("DEPLOY_APP")) == "auto-deploy-app"

    def test_fields(self, skill):
        assert skill.name == "auto-deploy-app"
        assert skill.confidence == 91
        assert skill.examples == ["deployed v1", "deployed v2", "deployed v3"]
        assert skill.source == SKILL_SOURCE
        assert "DEPLOY_APP" in skill.implementation
        assert "12 times" in skill.implementation

    def test_low_confidence_still_renders(self):
        """Preview flows can render a skill at any score."""
        low = generate_skill(make_pattern("BUILD"), make_confidence(10))
        assert low.confidence == 10

    def test_examples_are_copied(self):
        pattern = make_pattern("BUILD", examples=["a"])
        generated = generate_skill(pattern, make_confidence(90))
        pattern.examples.append("b")
        assert generated.examples == ["a"]


class TestFormatSkill:
    def test_sections(self, skill):
        text = format_skill(skill)

        assert text.startswith("# Skill: auto-deploy-app\n")
        assert "**Confidence:** 91%" in text
        assert "## Pattern" in text
        assert "## Implementation" in text
        assert "## Examples" in text
        assert "- deployed v2" in text

    def test_no_examples(self, skill):
        skill.examples = []
        assert "(no outcomes recorded)" in format_skill(skill)


class TestWriteSkill:
    """Tests for write_skill() and skill_exists()."""

    @pytest.mark.asyncio
    async def test_writes_into_new_vault(self, tmp_path: Path, skill):
        vault = tmp_path / "vault" / "skills"

        result = await write_skill(skill, vault)

        assert result.success is True
        assert result.path == vault / "auto-deploy-app.md"
        assert result.path.read_text().startswith("# Skill: auto-deploy-app")
        assert skill_exists("auto-deploy-app", vault)

    @pytest.mark.asyncio
    async def test_overwrites_existing(self, tmp_path: Path, skill):
        (tmp_path / "auto-deploy-app.md").write_text("stale")

        result = await write_skill(skill, tmp_path)

        assert result.success is True
        assert "stale" not in result.path.read_text()

    @pytest.mark.asyncio
    async def test_write_failure_is_reported(self, tmp_path: Path, skill):
        blocker = tmp_path / "vault"
        blocker.write_text("not a directory")

        result = await write_skill(skill, blocker / "skills")

        assert result.success is False
        assert result.error

    def test_skill_exists_is_exact(self, tmp_path: Path):
        (tmp_path / "auto-build.md").write_text("x")
        assert skill_exists("auto-build", tmp_path)
        assert not skill_exists("auto-buil", tmp_path)
        assert not skill_exists("auto-build", tmp_path / "missing")
