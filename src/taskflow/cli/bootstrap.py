# src/taskflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires storage backend -> persistence adapter -> task store into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..storage.kv_store import open_kv_store
from ..storage.persistence import PersistenceAdapter
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    if settings.storage_backend != "memory":
        settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    storage = open_kv_store(settings.storage_backend, settings.storage_path)
    persistence = PersistenceAdapter(
        storage,
        variant=settings.storage_variant,
        tasks_key=settings.tasks_key,
        settings_key=settings.settings_key,
        on_corrupt=settings.on_corrupt,
    )
    logger.info(
        "Storage backend=%s variant=%s on_corrupt=%s",
        settings.storage_backend,
        settings.storage_variant,
        settings.on_corrupt,
    )

    return AppState(
        settings=settings,
        store=TaskStore(persistence),
        persistence=persistence,
    )
