# src/task_manager/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKMGR"

load_dotenv(override=False)


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


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


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
    data_dir: Path

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Expiry sweep ----
    sweeper_enabled: bool
    sweep_interval_seconds: float
    sweep_retention_seconds: float

    # ---- Store tuning ----
    store_max_optimistic_retries: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "task-manager").strip() or "task-manager"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/task-manager"))

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        sweeper_enabled = _env_bool(_k("SWEEPER_ENABLED"), True)
        # Once per hour, drop completed tasks untouched for 24 hours.
        sweep_interval_seconds = _env_float(_k("SWEEP_INTERVAL_SECONDS"), 3600.0)
        sweep_retention_seconds = _env_float(_k("SWEEP_RETENTION_SECONDS"), 86400.0)

        store_max_optimistic_retries = _env_int(_k("STORE_MAX_OPTIMISTIC_RETRIES"), 64)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            console_enabled=console_enabled,
            sweeper_enabled=sweeper_enabled,
            sweep_interval_seconds=sweep_interval_seconds,
            sweep_retention_seconds=sweep_retention_seconds,
            store_max_optimistic_retries=store_max_optimistic_retries,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
