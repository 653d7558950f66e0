# src/taskflow/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_models import StorePhase
from .view import render_stats, render_tasks

logger = logging.getLogger(__name__)

WELCOME_TEXT = "Welcome to TaskFlow! Your tasks are auto-saved."


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def redraw(state: AppState, out: Callable[[str], None] = print) -> None:
    """Pull the current view from the store and print it."""
    store = state.store
    out(f"--- {store.current_filter.value} ---")
    out(render_tasks(store))
    out(render_stats(store))


def maybe_welcome(state: AppState) -> str | None:
    """One-time greeting while the untouched demo list is still showing."""
    if state.welcome_shown:
        return None
    store = state.store
    if store.phase is StorePhase.SEEDED and store.stats().total == 3:
        state.welcome_shown = True
        return WELCOME_TEXT
    return None


def handle_line(state: AppState, line: str) -> str | None:
    """
    Route one line of input: slash commands go to the registry,
    anything else is a new task.
    """
    text = line.strip()
    if not text:
        return None
    if text.startswith("/"):
        return command_registry.handle(state, text)
    return command_registry.handle(state, f"/add {text}")


def run_console_loop(state: AppState) -> None:
    app_name = str(getattr(state.settings, "app_name", "TaskFlow"))
    logger.info("Console connector started.")
    _print_ts(f"[{app_name}] Type a task to add it. Use /help for commands. Use /exit to quit.\n")
    redraw(state)

    note = maybe_welcome(state)
    if note:
        _print_ts(note)

    while True:
        try:
            user_input = input("> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = handle_line(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            _print_ts(reply)
        redraw(state)

    logger.info("Console connector finished.")
