# src/taskflow/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


def utc_now_iso(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T10:00:00.000Z."""
    dt = now or datetime.now(UTC)
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TaskFilter(StrEnum):
    """View predicate over the task list."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | TaskFilter) -> TaskFilter:
        if isinstance(raw, TaskFilter):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise ValueError(f"unknown filter: {raw!r}") from None

    @classmethod
    def from_stored(cls, raw: str | None) -> TaskFilter:
        if not raw:
            return cls.ALL
        try:
            return cls(raw)
        except ValueError:
            return cls.ALL

    def matches(self, task: Task) -> bool:
        if self is TaskFilter.ACTIVE:
            return not task.completed
        if self is TaskFilter.COMPLETED:
            return task.completed
        return True


class StorePhase(StrEnum):
    """
    Demo-data lifecycle.

    SEEDED: placeholder tasks are shown; the first real add discards them.
    LIVE:   the list holds only user data. There is no way back to SEEDED.
    """

    SEEDED = "seeded"
    LIVE = "live"


@dataclass(slots=True)
class Task:
    id: int
    text: str
    created_at: str
    completed: bool = False
    completed_at: str | None = None

    def mark_completed(self, now_iso: str) -> None:
        self.completed = True
        self.completed_at = now_iso

    def mark_active(self) -> None:
        self.completed = False
        self.completed_at = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "createdAt": self.created_at,
        }
        if self.completed_at is not None:
            out["completedAt"] = self.completed_at
        return out

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        # Stored records are trusted; a missing key means the value is corrupt.
        return cls(
            id=int(raw["id"]),
            text=str(raw["text"]),
            completed=bool(raw["completed"]),
            created_at=str(raw["createdAt"]),
            completed_at=raw.get("completedAt"),
        )


@dataclass(slots=True)
class AppSettings:
    last_filter: TaskFilter = TaskFilter.ALL
    show_welcome: bool = True
    total_tasks_created: int = 0
    total_tasks_completed: int = 0

    @classmethod
    def defaults(cls) -> AppSettings:
        return cls()

    @property
    def phase(self) -> StorePhase:
        return StorePhase.SEEDED if self.show_welcome else StorePhase.LIVE

    def to_dict(self) -> dict[str, Any]:
        return {
            "lastFilter": self.last_filter.value,
            "showWelcome": self.show_welcome,
            "totalTasksCreated": self.total_tasks_created,
            "totalTasksCompleted": self.total_tasks_completed,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> AppSettings:
        return cls(
            last_filter=TaskFilter.from_stored(raw.get("lastFilter")),
            show_welcome=bool(raw.get("showWelcome", True)),
            total_tasks_created=int(raw.get("totalTasksCreated", 0)),
            total_tasks_completed=int(raw.get("totalTasksCompleted", 0)),
        )


@dataclass(slots=True, frozen=True)
class TaskStats:
    active_count: int
    completed_count: int

    @property
    def total(self) -> int:
        return self.active_count + self.completed_count
