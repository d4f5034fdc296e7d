"""Pytest fixtures for learnloop tests."""

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from learnloop.core.logging import _current_context


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None, None, None]:
    """Reset CLI logging state, structlog and root handlers around each test."""
    import learnloop.cli.helpers as helpers_module

    helpers_module.reset_logging_state()
    structlog.reset_defaults()
    token = _current_context.set(None)

    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    for handler in original_handlers:
        root_logger.removeHandler(handler)

    yield

    helpers_module.reset_logging_state()
    _current_context.reset(token)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    for handler in original_handlers:
        root_logger.addHandler(handler)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A project root with empty ops/ and memory/ directories."""
    (tmp_path / "ops").mkdir()
    (tmp_path / "memory").mkdir()
    return tmp_path
