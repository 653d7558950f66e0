# src/taskflow/tasks/task_store.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import UTC, datetime

from ..core.ports import StateRepo
from .task_models import AppSettings, StorePhase, Task, TaskFilter, TaskStats, utc_now_iso

logger = logging.getLogger(__name__)


def _ms_now() -> int:
    return int(time.time() * 1000)


class IdAllocator:
    """
    Time-derived ids that never repeat.

    Returns the current millisecond clock unless that would not exceed the
    last issued id, in which case it returns last + 1.
    """

    def __init__(self, clock_ms: Callable[[], int] = _ms_now, last_issued: int = 0) -> None:
        self._clock_ms = clock_ms
        self._last = int(last_issued)

    def observe(self, task_id: int) -> None:
        if task_id > self._last:
            self._last = task_id

    def next_id(self) -> int:
        nid = max(int(self._clock_ms()), self._last + 1)
        self._last = nid
        return nid


class TaskStore:
    """
    Authoritative in-memory task list plus settings/counters.

    Every mutating call saves the full state through the repo before returning.
    Unknown ids and blank input are silent no-ops, reported via the return value.
    """

    def __init__(self, repo: StateRepo, *, clock_ms: Callable[[], int] = _ms_now) -> None:
        self._repo = repo
        self._clock_ms = clock_ms
        self._tasks, self._settings = repo.load()
        self._filter = self._settings.last_filter
        self._ids = IdAllocator(clock_ms)
        for t in self._tasks:
            self._ids.observe(t.id)
        logger.info(
            "TaskStore ready tasks=%d phase=%s filter=%s",
            len(self._tasks),
            self.phase.value,
            self._filter.value,
        )

    # ---- low-level helpers ----

    def _now_iso(self) -> str:
        return utc_now_iso(datetime.fromtimestamp(self._clock_ms() / 1000, UTC))

    def _save(self) -> None:
        self._settings.last_filter = self._filter
        self._repo.save(self._tasks, self._settings)

    def _find(self, task_id: int) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def _go_live(self) -> None:
        """SEEDED -> LIVE: drop the demo tasks. Happens at most once."""
        dropped = len(self._tasks)
        self._tasks = []
        self._settings.show_welcome = False
        logger.info("Demo data evicted (%d tasks).", dropped)

    # ---- read API ----

    @property
    def phase(self) -> StorePhase:
        return self._settings.phase

    @property
    def current_filter(self) -> TaskFilter:
        return self._filter

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def settings(self) -> AppSettings:
        s = self._settings
        return AppSettings(
            last_filter=self._filter,
            show_welcome=s.show_welcome,
            total_tasks_created=s.total_tasks_created,
            total_tasks_completed=s.total_tasks_completed,
        )

    def get_task(self, task_id: int) -> Task | None:
        return self._find(task_id)

    def visible_tasks(self) -> list[Task]:
        return [t for t in self._tasks if self._filter.matches(t)]

    def stats(self) -> TaskStats:
        done = sum(1 for t in self._tasks if t.completed)
        return TaskStats(active_count=len(self._tasks) - done, completed_count=done)

    # ---- mutations ----

    def add(self, raw_text: str) -> Task | None:
        text = (raw_text or "").strip()
        if not text:
            return None

        if self.phase is StorePhase.SEEDED:
            self._go_live()

        task = Task(id=self._ids.next_id(), text=text, created_at=self._now_iso())
        self._tasks.insert(0, task)
        self._settings.total_tasks_created += 1
        self._save()
        logger.debug("Task added id=%s", task.id)
        return task

    def toggle(self, task_id: int) -> Task | None:
        task = self._find(task_id)
        if task is None:
            logger.debug("toggle: no task id=%s", task_id)
            return None

        if task.completed:
            task.mark_active()
            self._settings.total_tasks_completed = max(0, self._settings.total_tasks_completed - 1)
        else:
            task.mark_completed(self._now_iso())
            self._settings.total_tasks_completed += 1
        self._save()
        logger.debug("Task toggled id=%s completed=%s", task.id, task.completed)
        return task

    def delete(self, task_id: int) -> bool:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        removed = len(self._tasks) != before
        self._save()
        logger.debug("Task delete id=%s removed=%s", task_id, removed)
        return removed

    def clear_completed(self) -> int:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if not t.completed]
        count = before - len(self._tasks)
        self._save()
        logger.debug("Cleared %d completed tasks", count)
        return count

    def set_filter(self, f: TaskFilter | str) -> None:
        self._filter = TaskFilter.parse(f)
        self._save()
        logger.debug("Filter set to %s", self._filter.value)

    def flush(self) -> None:
        """Re-write the current state unchanged."""
        self._save()
