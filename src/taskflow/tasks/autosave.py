# src/taskflow/tasks/autosave.py

from __future__ import annotations

"""
Periodic safety-net flush.

Every mutation already saves synchronously; this loop only re-writes the same
state on a timer so an externally clobbered storage file gets restored.
"""

import asyncio
import contextlib
import logging
import threading
from contextlib import AbstractContextManager
from dataclasses import dataclass

from ..core.ports import TaskRepo

logger = logging.getLogger(__name__)


async def run_autosave(
        store: TaskRepo,
        *,
        interval_seconds: float = 30.0,
        lock: AbstractContextManager[object] | None = None,
) -> None:
    """
    Call store.flush() every interval_seconds.

    Flush failures are logged and the loop keeps going.
    To stop it, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        await asyncio.sleep(sleep_s)
        try:
            if lock is not None:
                with lock:
                    store.flush()
            else:
                store.flush()
            logger.debug("Autosave flushed.")
        except Exception:
            logger.exception("Autosave flush failed")


async def _run_until_stopped(
        store: TaskRepo,
        stop_event: asyncio.Event,
        *,
        interval_seconds: float,
        lock: AbstractContextManager[object] | None,
) -> None:
    saver = asyncio.create_task(run_autosave(store, interval_seconds=interval_seconds, lock=lock))
    try:
        await stop_event.wait()
    finally:
        saver.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await saver
        logger.info("Autosave stopped.")


@dataclass
class AutosaveRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except RuntimeError:
            logger.debug("Failed to signal autosave stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_autosave_in_background(
        store: TaskRepo,
        *,
        interval_seconds: float,
        lock: AbstractContextManager[object] | None = None,
) -> AutosaveRunner | None:
    """
    Start the autosave loop in a daemon thread with its own event loop.

    The console REPL blocks on input(), so the timer cannot share its thread.
    interval_seconds <= 0 disables autosave.
    """
    if interval_seconds <= 0:
        logger.info("Autosave disabled.")
        return None

    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(
                _run_until_stopped(store, stop_event, interval_seconds=interval_seconds, lock=lock)
            )
        finally:
            loop.close()

    t = threading.Thread(target=runner, name="taskflow-autosave", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Autosave thread did not initialize properly.")
        return None

    logger.info("Autosave started (every %.1fs).", interval_seconds)
    return AutosaveRunner(thread=t, loop=loop, stop_event=stop_event)
