# src/taskflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete backends.
This keeps storage media swappable (memory, JSON file, SQLite) and makes testing easier.
"""

from typing import Protocol

from ..tasks.task_models import AppSettings, Task, TaskFilter, TaskStats


class KeyValueStorage(Protocol):
    """Durable string-keyed text medium (think browser localStorage)."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...
    def close(self) -> None: ...


class StateRepo(Protocol):
    """What the task store needs from persistence."""

    def load(self) -> tuple[list[Task], AppSettings]: ...
    def save(self, tasks: list[Task], settings: AppSettings) -> None: ...


class TaskRepo(Protocol):
    """
    Presentation-side port: what a view projector may call.

    Mutations persist before returning; reads have no side effects.
    """

    @property
    def current_filter(self) -> TaskFilter: ...

    def add(self, raw_text: str) -> Task | None: ...
    def toggle(self, task_id: int) -> Task | None: ...
    def delete(self, task_id: int) -> bool: ...
    def clear_completed(self) -> int: ...
    def set_filter(self, f: TaskFilter | str) -> None: ...
    def visible_tasks(self) -> list[Task]: ...
    def stats(self) -> TaskStats: ...
    def flush(self) -> None: ...
