from __future__ import annotations

import os
from pathlib import Path

APP_ENV_HOME = "MOODSPEND_HOME"
APP_ENV_DB = "MOODSPEND_DB"


def app_home() -> Path:
    """
    User-writable home for moodspend.
    Override with MOODSPEND_HOME.
    """
    if os.environ.get(APP_ENV_HOME):
        return Path(os.environ[APP_ENV_HOME]).expanduser().resolve()
    return (Path.home() / ".moodspend").resolve()


def data_dir() -> Path:
    d = app_home() / "data"
    d.mkdir(parents=True, exist_ok=True)
    return d


def db_path() -> Path:
    """
    Canonical journal DB path.

    Resolution order:
    1. MOODSPEND_DB env var (explicit override)
    2. ~/.moodspend/data/moodspend.db (default)
    """
    if os.environ.get(APP_ENV_DB):
        return Path(os.environ[APP_ENV_DB]).expanduser().resolve()
    return data_dir() / "moodspend.db"
