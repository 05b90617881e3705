"""Settings loaded from TASKDASH_* environment variables (+ optional .env)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from task_dashboard.form import DEFAULT_SUBMIT_DELAY
from task_dashboard.storage import DEFAULT_KEY

ENV_PREFIX = "TASKDASH"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_level(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    level = raw.strip().upper()
    return level if level in logging.getLevelNamesMapping() else default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    data_dir: Path
    storage_key: str
    submit_delay: float

    log_level: str
    log_dir: Path
    log_to_file: bool

    @staticmethod
    def from_env(*, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True), override=False)

        data_dir = _env_path(_k("DATA_DIR"), Path(".data"))
        submit_delay = _env_float(_k("SUBMIT_DELAY"), DEFAULT_SUBMIT_DELAY)

        return Settings(
            data_dir=data_dir,
            storage_key=_env(_k("STORAGE_KEY"), DEFAULT_KEY),
            submit_delay=max(0.0, submit_delay),
            log_level=_env_level(_k("LOG_LEVEL"), "WARNING"),
            log_dir=_env_path(_k("LOG_DIR"), data_dir),
            log_to_file=_env_bool(_k("LOG_TO_FILE"), False),
        )
