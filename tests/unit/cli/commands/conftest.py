"""Shared fixtures for CLI command tests."""

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from docsections.lib.logging_config import ROOT_LOGGER_NAME


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None]:
    """Undo handlers installed by setup_logging() during a CLI invocation."""
    yield
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)
    root.propagate = True


@pytest.fixture
def pdf_path(tmp_path: Path) -> Path:
    """Create a placeholder PDF file; extraction is patched in tests."""
    path = tmp_path / "lesson.pdf"
    path.write_bytes(b"%PDF-1.4\n%placeholder\n")
    return path
