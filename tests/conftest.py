"""
Pytest configuration and shared fixtures for pocket cleaner tests.

This module provides temporary directories, CSV writers and sample records
shared across the test modules.
"""

import logging
from pathlib import Path
from typing import Callable, List, Sequence

import pytest

from pocket_cleaner.core.data_models import PocketItem
from tests.fixtures.test_data import POCKET_HEADER


# ============================================================================
# Temporary Directory and File Fixtures
# ============================================================================


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Directory holding input exports."""
    input_dir = tmp_path / "exports"
    input_dir.mkdir()
    return input_dir


@pytest.fixture
def work_dir(tmp_path: Path, monkeypatch) -> Path:
    """
    Working directory for end-to-end runs.

    The default output lands in ../output, so it resolves to tmp_path/output.
    """
    cwd = tmp_path / "work"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return cwd


@pytest.fixture
def default_output_path(tmp_path: Path) -> Path:
    return tmp_path / "output" / "cleaned_links.csv"


@pytest.fixture
def write_csv() -> Callable[..., Path]:
    """Write raw lines to a CSV file, header first."""

    def _write(
        path: Path, rows: Sequence[str], header: str = POCKET_HEADER, encoding: str = "utf-8"
    ) -> Path:
        lines = [header, *rows] if header is not None else list(rows)
        path.write_text("\n".join(lines) + "\n", encoding=encoding)
        return path

    return _write


# ============================================================================
# Data Fixtures - Objects
# ============================================================================


@pytest.fixture
def sample_items() -> List[PocketItem]:
    """Records with two duplicate pairs."""
    return [
        PocketItem(title="Example", url="http://example.com/a", added="1700000000", tags=["x"]),
        PocketItem(title="Other", url="https://other.org", added="1700000001"),
        PocketItem(title="Example again", url="https://EXAMPLE.com/a/", added="1700000002"),
        PocketItem(title="Third", url="https://third.net/page?q=1", added="1700000003", tags=["a", "b"]),
        PocketItem(title="Other dup", url=" https://other.org/ ", added="1700000004"),
    ]


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep configuration overrides from the host environment out of tests."""
    monkeypatch.delenv("POCKET_CLEANER_OUTPUT", raising=False)
    monkeypatch.delenv("POCKET_CLEANER_LOG_LEVEL", raising=False)


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo root logger changes made by setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
