# src/taskflow/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..connectors.view import render_stats, render_tasks
from ..core.state import AppState
from ..storage.persistence import PersistenceUnavailable
from ..tasks.task_models import TaskFilter

CommandHandler = Callable[[AppState, list[str], str], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Handlers get the split args and the raw remainder (whitespace inside
        task text is kept as typed).
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        raw = parts[1] if len(parts) > 1 else ""
        args = raw.split()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args, raw)
        except PersistenceUnavailable as e:
            logger.error("Command /%s could not persist: %s", name, e)
            return f"Could not save your tasks: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def clear_notification(count: int) -> str:
    return f"Cleared {count} completed task{'' if count == 1 else 's'}"


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0])
    except ValueError:
        return None


def cmd_help(state: AppState, args: list[str], raw: str) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str], raw: str) -> str:
    with state.lock:
        task = state.store.add(raw)
    if task is None:
        return "Nothing to add: task text is empty."
    return f"Added #{task.id}: {task.text}"


def cmd_toggle(state: AppState, args: list[str], raw: str) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /toggle <id>"
    with state.lock:
        task = state.store.toggle(task_id)
    if task is None:
        return f"No task #{task_id}."
    return f"#{task.id} marked {'completed' if task.completed else 'active'}."


def cmd_delete(state: AppState, args: list[str], raw: str) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /del <id>"
    with state.lock:
        task = state.store.get_task(task_id)
        state.store.delete(task_id)
    if task is None:
        return f"No task #{task_id}."
    return f"Deleted #{task.id}: {task.text}"


def cmd_clear(state: AppState, args: list[str], raw: str) -> str:
    with state.lock:
        count = state.store.clear_completed()
    return clear_notification(count)


def cmd_filter(state: AppState, args: list[str], raw: str) -> str:
    """
    /filter            -> show current filter
    /filter <name>     -> all | active | completed
    """
    if not args:
        return f"Filter is {state.store.current_filter.value}. Use /filter all|active|completed."
    try:
        f = TaskFilter.parse(args[0])
    except ValueError:
        return "Usage: /filter all|active|completed"
    with state.lock:
        state.store.set_filter(f)
    return f"Showing {f.value} tasks."


def cmd_list(state: AppState, args: list[str], raw: str) -> str:
    return render_tasks(state.store)


def cmd_stats(state: AppState, args: list[str], raw: str) -> str:
    return render_stats(state.store)


def cmd_status(state: AppState, args: list[str], raw: str) -> str:
    s = state.store.settings
    backend = getattr(state.settings, "storage_backend", "?")
    variant = state.persistence.variant.value
    return (
        "Status:\n"
        f"  Storage: {backend} ({variant})\n"
        f"  Phase: {state.store.phase.value}\n"
        f"  Filter: {s.last_filter.value}\n"
        f"  Tasks created (lifetime): {s.total_tasks_created}\n"
        f"  Tasks completed (lifetime): {s.total_tasks_completed}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add <text> (plain text works too).")
registry.register("toggle", cmd_toggle, help_text="Mark a task done/undone: /toggle <id>.", aliases=["t"])
registry.register("del", cmd_delete, help_text="Delete a task: /del <id>.", aliases=["rm", "delete"])
registry.register("clear", cmd_clear, help_text="Remove all completed tasks.")
registry.register("filter", cmd_filter, help_text="Filter the list: /filter all | active | completed.", aliases=["f"])
registry.register("list", cmd_list, help_text="Show the current view.", aliases=["ls"])
registry.register("stats", cmd_stats, help_text="Show active/completed counts.")
registry.register("status", cmd_status, help_text="Show storage, filter and lifetime counters.")
