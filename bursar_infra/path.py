# bursar_infra/path.py
from __future__ import annotations
import os
import sys
from pathlib import Path

APP_NAME = "SchoolBursar"
COMPANY_NAME = "Bursar"

DATA_DIR_ENV = "BURSAR_DATA_DIR"
DB_URL_ENV = "BURSAR_DB_URL"
LOG_LEVEL_ENV = "BURSAR_LOG_LEVEL"


def user_data_dir() -> Path:
    """
    Returns the per-user data directory, e.g.:

    Windows:
        C:\\Users\\<User>\\AppData\\Roaming\\Bursar\\SchoolBursar

    macOS:
        ~/Library/Application Support/Bursar/SchoolBursar

    Linux:
        ~/.local/share/Bursar/SchoolBursar

    BURSAR_DATA_DIR overrides all of the above.
    """
    override = (os.getenv(DATA_DIR_ENV) or "").strip()
    if override:
        path = Path(override).expanduser()
        path.mkdir(parents=True, exist_ok=True)
        return path

    if sys.platform.startswith("win"):
        base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share"))

    path = base / COMPANY_NAME / APP_NAME
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError:
        # read-only profile; fall back to the home directory
        path = Path.home() / f".{APP_NAME}"
        path.mkdir(parents=True, exist_ok=True)
    return path


def default_db_path() -> Path:
    return user_data_dir() / "bursar.db"


def database_url() -> str:
    override = (os.getenv(DB_URL_ENV) or "").strip()
    if override:
        return override
    return f"sqlite:///{default_db_path().as_posix()}"


def log_level_name(default: str = "INFO") -> str:
    return (os.getenv(LOG_LEVEL_ENV) or default).strip().upper() or default
