"""Skill generation from validated patterns.

A skill is a markdown document in the vault describing an automatable
behavior. Skills are keyed by name: ``<vault_dir>/<name>.md``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from learnloop.core.errors import ErrorCategory
from learnloop.core.logging import get_logger
from learnloop.learning.confidence import ConfidenceResult
from learnloop.learning.patterns import Pattern

_logger = get_logger("generator")

SKILL_SOURCE = "learning-agent"


@dataclass
class GeneratedSkill:
    """A skill derived from a pattern, ready to be written to the vault."""

    name: str
    pattern: Pattern
    confidence: int
    examples: list[str]
    implementation: str
    source: str = SKILL_SOURCE
    created: str = field(default_factory=lambda: date.today().isoformat())


@dataclass
class SkillWriteResult:
    """Outcome of writing a skill file."""

    success: bool
    path: Path
    error: str | None = None


def generate_skill_name(pattern: Pattern) -> str:
    """Skill name for a pattern: ``auto-<pattern name>``."""
    return f"auto-{pattern.name}"


def skill_path(name: str, vault_dir: Path | str) -> Path:
    return Path(vault_dir) / f"{name}.md"


def generate_implementation(pattern: Pattern) -> str:
    """Describe how to reproduce the pattern's behavior."""
    lines = [
        f"When performing `{pattern.action}`, follow the observed procedure.",
        "",
        f"This action was observed {pattern.occurrences} times "
        f"between {pattern.first_seen} and {pattern.last_seen}.",
    ]
    if pattern.examples:
        lines.append("")
        lines.append("Typical outcomes:")
        lines.extend(f"- {example}" for example in pattern.examples if example)
    return "\n".join(lines)


def format_skill(skill: GeneratedSkill) -> str:
    """Render a skill as a markdown document."""
    examples = "\n".join(f"- {e}" for e in skill.examples if e) or "- (no outcomes recorded)"
    return (
        f"# Skill: {skill.name}\n"
        "\n"
        f"**Source:** {skill.source}\n"
        f"**Confidence:** {skill.confidence}%\n"
        f"**Created:** {skill.created}\n"
        "\n"
        "## Pattern\n"
        "\n"
        f"- **Action:** {skill.pattern.action}\n"
        f"- **Occurrences:** {skill.pattern.occurrences}\n"
        f"- **First seen:** {skill.pattern.first_seen}\n"
        f"- **Last seen:** {skill.pattern.last_seen}\n"
        "\n"
        "## Implementation\n"
        "\n"
        f"{skill.implementation}\n"
        "\n"
        "## Examples\n"
        "\n"
        f"{examples}\n"
    )


def generate_skill(pattern: Pattern, confidence: ConfidenceResult) -> GeneratedSkill:
    """Build a skill from a pattern and its confidence.

    The confidence gate is NOT enforced here so that preview and dry-run
    flows can render a skill at any score. Callers that persist skills must
    check ``should_auto_generate(confidence)`` first.
    """
    return GeneratedSkill(
        name=generate_skill_name(pattern),
        pattern=pattern,
        confidence=confidence.score,
        examples=list(pattern.examples),
        implementation=generate_implementation(pattern),
    )


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


async def write_skill(skill: GeneratedSkill, vault_dir: Path | str) -> SkillWriteResult:
    """Write a skill to ``<vault_dir>/<name>.md``, overwriting any existing file.

    Callers wanting idempotence check skill_exists() first.
    """
    path = skill_path(skill.name, vault_dir)
    try:
        await asyncio.to_thread(_write_text, path, format_skill(skill))
    except OSError as e:
        _logger.error(
            "generator.write_failed",
            skill=skill.name,
            path=str(path),
            category=ErrorCategory.WRITE_FAILURE.value,
            error=str(e),
        )
        return SkillWriteResult(success=False, path=path, error=str(e))

    _logger.info("generator.skill_written", skill=skill.name, path=str(path))
    return SkillWriteResult(success=True, path=path)


def skill_exists(name: str, vault_dir: Path | str) -> bool:
    """True if a skill with exactly this name exists in the vault."""
    return skill_path(name, vault_dir).is_file()
