"""Integration-test fixtures.

Engines here are built through src.main exactly as an embedding UI would,
against real storage backends (local files, or a shared in-memory slot
standing in for several open tabs).
"""

from pathlib import Path

import pytest

from config.settings import Settings
from tests.helpers import TEST_KEY


@pytest.fixture
def file_settings(tmp_path: Path) -> Settings:
    return Settings(
        STORAGE_BACKEND="file",
        STORAGE_DIR=str(tmp_path / "state"),
        STORAGE_KEY=TEST_KEY,
    )


@pytest.fixture
def memory_settings() -> Settings:
    return Settings(STORAGE_BACKEND="memory", STORAGE_KEY=TEST_KEY)
