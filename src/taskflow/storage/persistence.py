# src/taskflow/storage/persistence.py

"""
Translate task-store state to and from a key-value medium.

Two layouts:
- full:    task list under the tasks key, AppSettings under the settings key
- minimal: task list only; settings reset to defaults on every load

Missing keys are not errors: first-ever load yields demo tasks plus default settings.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from ..core.ports import KeyValueStorage
from ..tasks.task_models import AppSettings, Task, utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_TASKS_KEY = "taskflow_todos"
DEFAULT_SETTINGS_KEY = "taskflow_settings"

SEED_TEXTS: tuple[tuple[str, bool], ...] = (
    ("Welcome to TaskFlow! 🎉", False),
    ("Try adding your first task below", False),
    ("Click this circle to mark as complete", True),
)


class StorageVariant(StrEnum):
    FULL = "full"
    MINIMAL = "minimal"


class CorruptPolicy(StrEnum):
    RESET = "reset"  # log and fall back to seed/defaults
    RAISE = "raise"


class PersistenceUnavailable(RuntimeError):
    """Storage read or write failed."""

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


def _ms_now() -> int:
    return int(time.time() * 1000)


def seed_tasks(now_ms: int) -> list[Task]:
    """Demo content for a first-time user: two active tasks and one completed."""
    created = utc_now_iso(datetime.fromtimestamp(now_ms / 1000, UTC))
    out: list[Task] = []
    for offset, (text, done) in zip((3000, 2000, 1000), SEED_TEXTS):
        task = Task(id=now_ms - offset, text=text, created_at=created)
        if done:
            task.mark_completed(created)
        out.append(task)
    return out


class PersistenceAdapter:
    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        variant: StorageVariant | str = StorageVariant.FULL,
        tasks_key: str = DEFAULT_TASKS_KEY,
        settings_key: str = DEFAULT_SETTINGS_KEY,
        on_corrupt: CorruptPolicy | str = CorruptPolicy.RESET,
        clock_ms: Callable[[], int] = _ms_now,
    ) -> None:
        self._storage = storage
        self._variant = StorageVariant(variant)
        self._tasks_key = tasks_key
        self._settings_key = settings_key
        self._on_corrupt = CorruptPolicy(on_corrupt)
        self._clock_ms = clock_ms

    @property
    def variant(self) -> StorageVariant:
        return self._variant

    # ---- low-level helpers ----

    def _read_json(self, key: str) -> Any | None:
        """
        Return the decoded value under key, or None if absent.

        Unreadable or unparseable values follow the corrupt policy:
        RESET treats them as absent, RAISE raises PersistenceUnavailable.
        """
        try:
            raw = self._storage.get(key)
            if raw is None:
                return None
            return json.loads(raw)
        except Exception as e:
            return self._corrupt(key, e)

    def _corrupt(self, key: str, cause: Exception) -> None:
        if self._on_corrupt is CorruptPolicy.RAISE:
            raise PersistenceUnavailable(f"failed to read {key!r}: {cause}", key=key) from cause
        logger.warning("Stored value for %r is unreadable (%s); using defaults.", key, cause)
        return None

    def _decode_tasks(self, data: Any) -> list[Task] | None:
        try:
            if not isinstance(data, list):
                raise ValueError(f"expected a list, got {type(data).__name__}")
            return [Task.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            return self._corrupt(self._tasks_key, e)

    def _decode_settings(self, data: Any) -> AppSettings | None:
        try:
            if not isinstance(data, dict):
                raise ValueError(f"expected an object, got {type(data).__name__}")
            return AppSettings.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            return self._corrupt(self._settings_key, e)

    def _write(self, key: str, payload: Any) -> None:
        try:
            self._storage.set(key, json.dumps(payload, ensure_ascii=False))
        except Exception as e:
            logger.exception("Failed to write %r.", key)
            raise PersistenceUnavailable(f"failed to write {key!r}: {e}", key=key) from e

    # ---- public API ----

    def load(self) -> tuple[list[Task], AppSettings]:
        tasks: list[Task] | None = None
        data = self._read_json(self._tasks_key)
        if data is not None:
            tasks = self._decode_tasks(data)

        seeded = tasks is None
        if tasks is None:
            tasks = seed_tasks(self._clock_ms())
            logger.info("No stored tasks under %r; seeded %d demo tasks.", self._tasks_key, len(tasks))

        if self._variant is StorageVariant.MINIMAL:
            fresh = AppSettings.defaults()
            fresh.show_welcome = seeded
            return tasks, fresh

        settings: AppSettings | None = None
        raw_settings = self._read_json(self._settings_key)
        if raw_settings is not None:
            settings = self._decode_settings(raw_settings)
        if settings is None:
            settings = AppSettings.defaults()
            settings.show_welcome = seeded

        logger.debug(
            "Loaded %d tasks (filter=%s welcome=%s)",
            len(tasks),
            settings.last_filter.value,
            settings.show_welcome,
        )
        return tasks, settings

    def save(self, tasks: list[Task], settings: AppSettings) -> None:
        self._write(self._tasks_key, [t.to_dict() for t in tasks])
        if self._variant is StorageVariant.FULL:
            self._write(self._settings_key, settings.to_dict())
        logger.debug("Saved %d tasks.", len(tasks))

    def close(self) -> None:
        self._storage.close()
