# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskflow.core.state import AppState
from taskflow.storage.persistence import PersistenceAdapter
from taskflow.tasks.task_store import TaskStore

from .fakes import FailingKVStore, FakeClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="TaskFlow",
        data_dir=tmp_path,
        storage_backend="memory",
        storage_path=tmp_path / "storage.sqlite3",
        storage_variant="full",
        tasks_key="taskflow_todos",
        settings_key="taskflow_settings",
        on_corrupt="reset",
        autosave_seconds=0,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def kv() -> FailingKVStore:
    return FailingKVStore()


@pytest.fixture()
def persistence(kv: FailingKVStore, clock: FakeClock) -> PersistenceAdapter:
    return PersistenceAdapter(kv, clock_ms=clock)


@pytest.fixture()
def store(persistence: PersistenceAdapter, clock: FakeClock) -> TaskStore:
    """Fresh store on empty storage: starts SEEDED with the three demo tasks."""
    return TaskStore(persistence, clock_ms=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, persistence: PersistenceAdapter) -> AppState:
    return AppState(settings=settings, store=store, persistence=persistence)
