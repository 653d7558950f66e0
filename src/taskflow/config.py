# src/taskflow/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every consumer also accepts an injected settings object (tests pass a SimpleNamespace).
- Invalid enumerated values fall back to defaults instead of failing at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKFLOW"

STORAGE_BACKENDS = ("sqlite", "json", "memory")
STORAGE_VARIANTS = ("full", "minimal")
CORRUPT_POLICIES = ("reset", "raise")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


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


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = _env(name, default).strip().lower()
    return raw if raw in choices else default


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

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Storage ----
    data_dir: Path
    storage_backend: str
    storage_path: Path
    storage_variant: str
    tasks_key: str
    settings_key: str
    on_corrupt: str

    # ---- Autosave ----
    autosave_seconds: float

    @staticmethod
    def from_env() -> Settings:
        app_name = _env(_k("APP_NAME"), "TaskFlow") or "TaskFlow"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskflow"))
        storage_backend = _env_choice(_k("STORAGE_BACKEND"), STORAGE_BACKENDS, "sqlite")
        default_file = "storage.json" if storage_backend == "json" else "storage.sqlite3"
        storage_path = _env_path(_k("STORAGE_PATH"), data_dir / default_file)
        storage_variant = _env_choice(_k("STORAGE_VARIANT"), STORAGE_VARIANTS, "full")
        tasks_key = _env(_k("TASKS_KEY"), "taskflow_todos").strip() or "taskflow_todos"
        settings_key = _env(_k("SETTINGS_KEY"), "taskflow_settings").strip() or "taskflow_settings"
        on_corrupt = _env_choice(_k("ON_CORRUPT"), CORRUPT_POLICIES, "reset")

        autosave_seconds = _env_float(_k("AUTOSAVE_SECONDS"), 30.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            data_dir=data_dir,
            storage_backend=storage_backend,
            storage_path=storage_path,
            storage_variant=storage_variant,
            tasks_key=tasks_key,
            settings_key=settings_key,
            on_corrupt=on_corrupt,
            autosave_seconds=autosave_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
