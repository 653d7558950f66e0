# tests/test_console.py

from __future__ import annotations

import builtins
from types import SimpleNamespace

import pytest

from taskflow.cli.bootstrap import create_initial_state
from taskflow.connectors.console_connector import (
    WELCOME_TEXT,
    handle_line,
    maybe_welcome,
    redraw,
    run_console_loop,
)
from taskflow.core.state import AppState
from taskflow.tasks.task_models import StorePhase


def test_plain_text_adds_a_task(state: AppState) -> None:
    reply = handle_line(state, "  water plants ")
    assert reply is not None and "water plants" in reply
    assert [t.text for t in state.store.tasks] == ["water plants"]
    assert handle_line(state, "   ") is None


def test_welcome_shown_once_while_seeded(state: AppState) -> None:
    assert state.store.phase is StorePhase.SEEDED
    assert maybe_welcome(state) == WELCOME_TEXT
    assert maybe_welcome(state) is None


def test_no_welcome_after_first_add(state: AppState) -> None:
    handle_line(state, "real task")
    assert maybe_welcome(state) is None


def test_redraw_prints_view_and_stats(state: AppState) -> None:
    lines: list[str] = []
    redraw(state, lines.append)
    assert lines[0] == "--- all ---"
    assert lines[-1] == "2 active • 1 completed"


def test_console_loop_runs_commands_until_exit(state: AppState, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    inputs = iter(["first task", "/filter active", "/exit"])
    monkeypatch.setattr(builtins, "input", lambda _prompt="": next(inputs))

    run_console_loop(state)

    out = capsys.readouterr().out
    assert "Added #" in out
    assert "Showing active tasks." in out
    assert [t.text for t in state.store.tasks] == ["first task"]


def test_console_loop_stops_on_eof(state: AppState, monkeypatch: pytest.MonkeyPatch) -> None:
    def _eof(_prompt: str = "") -> str:
        raise EOFError

    monkeypatch.setattr(builtins, "input", _eof)
    run_console_loop(state)


def test_bootstrap_wires_memory_backend(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)
    assert state.store.phase is StorePhase.SEEDED
    assert state.persistence.variant.value == "full"
    assert state.store.add("wired") is not None


def test_bootstrap_sqlite_backend_persists(settings: SimpleNamespace) -> None:
    settings.storage_backend = "sqlite"
    first = create_initial_state(settings=settings)
    first.store.add("kept")

    second = create_initial_state(settings=settings)
    assert [t.text for t in second.store.tasks] == ["kept"]
    assert settings.storage_path.exists()
