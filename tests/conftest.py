"""
Test configuration: repo root on sys.path, plus isolation guards.

Every test gets MOODSPEND_HOME pointed at a temp directory so nothing ever
touches the real journal at ~/.moodspend.
"""

import sys
from pathlib import Path

import pytest

# Add repo root to sys.path so tests can import moodspend.*, cli.*, tests.fixtures
REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from moodspend.store import SQLiteStore  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Redirect the app home and default DB into tmp_path."""
    home = tmp_path / "home"
    monkeypatch.setenv("MOODSPEND_HOME", str(home))
    monkeypatch.delenv("MOODSPEND_DB", raising=False)
    return home


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "test_moodspend.db"


@pytest.fixture
def store(db_path):
    return SQLiteStore(db_path)
