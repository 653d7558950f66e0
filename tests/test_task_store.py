# tests/test_task_store.py

from __future__ import annotations

import json

import pytest

from taskflow.storage.persistence import PersistenceAdapter, PersistenceUnavailable
from taskflow.tasks.task_models import StorePhase, TaskFilter
from taskflow.tasks.task_store import IdAllocator, TaskStore

from .fakes import FailingKVStore, FakeClock


def _live_store(store: TaskStore, *texts: str) -> TaskStore:
    """Add texts in order (first add evicts the demo tasks)."""
    for text in texts:
        assert store.add(text) is not None
    return store


def test_fresh_store_is_seeded_with_demo_tasks(store: TaskStore) -> None:
    assert store.phase is StorePhase.SEEDED
    assert [t.completed for t in store.tasks] == [False, False, True]
    assert store.stats().active_count == 2
    assert store.stats().completed_count == 1


def test_blank_input_is_ignored_and_not_persisted(store: TaskStore, kv: FailingKVStore) -> None:
    before = store.tasks
    assert store.add("") is None
    assert store.add("   ") is None
    assert store.tasks == before
    assert kv.writes == 0
    assert store.phase is StorePhase.SEEDED


def test_add_prepends_trimmed_task(store: TaskStore) -> None:
    _live_store(store, "first")
    task = store.add("  buy milk  ")
    assert task is not None
    assert task.text == "buy milk"
    assert task.completed is False
    assert task.completed_at is None

    visible = store.visible_tasks()
    assert store.current_filter is TaskFilter.ALL
    assert visible[0].text == "buy milk"
    assert visible[1].text == "first"


def test_first_add_evicts_demo_data_once(store: TaskStore, kv: FailingKVStore, clock: FakeClock) -> None:
    task = store.add("real work")
    assert task is not None
    assert store.tasks == [task]
    assert store.phase is StorePhase.LIVE
    assert store.settings.show_welcome is False

    store.add("more work")
    assert len(store.tasks) == 2

    # The flag stays cleared after a reload.
    reloaded = TaskStore(PersistenceAdapter(kv, clock_ms=clock), clock_ms=clock)
    assert reloaded.phase is StorePhase.LIVE
    assert [t.text for t in reloaded.tasks] == ["more work", "real work"]


def test_ids_unique_within_same_millisecond(store: TaskStore) -> None:
    _live_store(store, "a", "b", "c")
    ids = [t.id for t in store.tasks]
    assert len(set(ids)) == 3
    assert ids == sorted(ids, reverse=True)


def test_id_allocator_never_goes_backwards() -> None:
    clock = FakeClock(now_ms=100)
    ids = IdAllocator(clock, last_issued=500)
    assert ids.next_id() == 501
    clock.now_ms = 1000
    assert ids.next_id() == 1000
    assert ids.next_id() == 1001


def test_new_ids_do_not_collide_with_loaded_ids(kv: FailingKVStore) -> None:
    clock = FakeClock(now_ms=10)
    store = TaskStore(PersistenceAdapter(kv, clock_ms=clock), clock_ms=clock)
    first = store.add("x")
    assert first is not None

    clock.now_ms = 5  # clock went backwards across a restart
    reloaded = TaskStore(PersistenceAdapter(kv, clock_ms=clock), clock_ms=clock)
    second = reloaded.add("y")
    assert second is not None
    assert second.id > first.id


def test_toggle_twice_restores_state(store: TaskStore, clock: FakeClock) -> None:
    task = store.add("walk dog")
    assert task is not None

    clock.advance(500)
    toggled = store.toggle(task.id)
    assert toggled is not None
    assert toggled.completed is True
    assert toggled.completed_at is not None
    assert store.settings.total_tasks_completed == 1

    again = store.toggle(task.id)
    assert again is not None
    assert again.completed is False
    assert again.completed_at is None
    assert store.settings.total_tasks_completed == 0


def test_toggle_unknown_id_is_noop(store: TaskStore, kv: FailingKVStore) -> None:
    assert store.toggle(424242) is None
    assert kv.writes == 0


def test_completed_counter_never_negative(store: TaskStore) -> None:
    demo_done = next(t for t in store.tasks if t.completed)
    store.toggle(demo_done.id)
    assert store.settings.total_tasks_completed == 0


def test_delete_removes_task_and_ignores_unknown(store: TaskStore) -> None:
    _live_store(store, "a", "b")
    target = store.tasks[0]
    assert store.delete(target.id) is True
    assert [t.text for t in store.tasks] == ["a"]
    assert store.delete(target.id) is False
    assert len(store.tasks) == 1


def test_get_task_looks_up_by_id(store: TaskStore) -> None:
    _live_store(store, "a", "b")
    newest = store.tasks[0]
    found = store.get_task(newest.id)
    assert found is not None and found.text == "b"
    assert store.get_task(-1) is None


def test_created_counter_survives_delete(store: TaskStore) -> None:
    _live_store(store, "a", "b")
    store.delete(store.tasks[0].id)
    assert store.settings.total_tasks_created == 2


def test_stats_three_added_one_completed(store: TaskStore) -> None:
    _live_store(store, "a", "b", "c")
    store.toggle(store.tasks[1].id)
    stats = store.stats()
    assert (stats.active_count, stats.completed_count) == (2, 1)


def test_clear_completed_returns_count(store: TaskStore) -> None:
    _live_store(store, "1", "2", "3", "4", "5")
    store.toggle(store.tasks[0].id)
    store.toggle(store.tasks[3].id)

    assert store.clear_completed() == 2
    assert len(store.tasks) == 3
    assert all(not t.completed for t in store.tasks)


def test_clear_completed_zero_still_persists(store: TaskStore, kv: FailingKVStore) -> None:
    _live_store(store, "only active")
    writes = kv.writes
    assert store.clear_completed() == 0
    assert kv.writes > writes


def test_filter_completed_keeps_relative_order(store: TaskStore) -> None:
    _live_store(store, "a", "b", "c", "d")
    # newest first: d, c, b, a
    store.toggle(store.tasks[0].id)
    store.toggle(store.tasks[2].id)

    store.set_filter("completed")
    assert [t.text for t in store.visible_tasks()] == ["d", "b"]

    store.set_filter(TaskFilter.ACTIVE)
    assert [t.text for t in store.visible_tasks()] == ["c", "a"]

    store.set_filter("all")
    assert len(store.visible_tasks()) == 4


def test_set_filter_persists_without_touching_tasks(store: TaskStore, kv: FailingKVStore) -> None:
    before = store.tasks
    store.set_filter("active")
    assert store.tasks == before
    saved = json.loads(kv.get("taskflow_settings") or "{}")
    assert saved["lastFilter"] == "active"


def test_set_filter_rejects_unknown_value(store: TaskStore) -> None:
    with pytest.raises(ValueError):
        store.set_filter("someday")
    assert store.current_filter is TaskFilter.ALL


def test_filter_restored_on_reload(store: TaskStore, kv: FailingKVStore, clock: FakeClock) -> None:
    store.set_filter("completed")
    reloaded = TaskStore(PersistenceAdapter(kv, clock_ms=clock), clock_ms=clock)
    assert reloaded.current_filter is TaskFilter.COMPLETED


def test_write_failure_is_surfaced(store: TaskStore, kv: FailingKVStore) -> None:
    kv.fail_writes = True
    with pytest.raises(PersistenceUnavailable):
        store.add("will not save")
