# src/taskflow/connectors/view.py

"""Plain-text projections of the task store (pull model: call after each mutation)."""

from __future__ import annotations

from ..core.ports import TaskRepo
from ..tasks.task_models import Task, TaskFilter


def render_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    return f"[{mark}] #{task.id}  {task.text}"


def render_tasks(store: TaskRepo) -> str:
    tasks = store.visible_tasks()
    if not tasks:
        current = store.current_filter
        return "No tasks yet" if current is TaskFilter.ALL else f"No {current.value} tasks"
    return "\n".join(render_task(t) for t in tasks)


def render_stats(store: TaskRepo) -> str:
    stats = store.stats()
    if stats.total == 0:
        return "No tasks yet"
    return f"{stats.active_count} active • {stats.completed_count} completed"
