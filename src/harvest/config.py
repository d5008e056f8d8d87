# src/harvest/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- The task file location is an explicit value handed to the codec, never a hidden constant.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "HARVEST"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_to_file: bool

    # ---- Console ----
    show_banner: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_path: Path

    @staticmethod
    def from_env(*, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv(override=False)

        app_name = _env(_k("APP_NAME"), "harvest").strip() or "harvest"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        log_to_file = _env_bool(_k("LOG_TO_FILE"), True)
        show_banner = _env_bool(_k("SHOW_BANNER"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/harvest"))
        tasks_path = _env_path(_k("TASKS_PATH"), data_dir / "tasks.txt")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_to_file=log_to_file,
            show_banner=show_banner,
            data_dir=data_dir,
            tasks_path=tasks_path,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
