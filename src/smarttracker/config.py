"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back on bad input."""

    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Smart Tracker"
    DB_FILENAME = "smarttracker.db"

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("SMARTTRACKER_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("SMARTTRACKER_DATABASE_URL", self._build_sqlite_url())
        # Debounce windows for the two independent save channels.
        self.HABITS_SAVE_DELAY_MS = _env_int("SMARTTRACKER_HABITS_SAVE_DELAY_MS", 200)
        self.SETTINGS_SAVE_DELAY_MS = _env_int("SMARTTRACKER_SETTINGS_SAVE_DELAY_MS", 250)
        self.ROLLOVER_SWEEP_SECONDS = _env_int("SMARTTRACKER_ROLLOVER_SWEEP_SECONDS", 60)

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("SMARTTRACKER_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected install locations fall back to user-local storage.
            local_app_data = os.getenv("LOCALAPPDATA") or (Path.home() / ".local" / "share")
            fallback_path = Path(local_app_data).expanduser() / "smarttracker"
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    @property
    def habits_save_delay(self) -> float:
        return self.HABITS_SAVE_DELAY_MS / 1000

    @property
    def settings_save_delay(self) -> float:
        return self.SETTINGS_SAVE_DELAY_MS / 1000

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        # Saves run on the scheduler's worker thread.
        connect_args: dict[str, Any] = {"check_same_thread": False}
        return {"connect_args": connect_args}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False
