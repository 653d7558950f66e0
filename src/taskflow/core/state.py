# src/taskflow/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..storage.persistence import PersistenceAdapter
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    """
    Everything a connector needs, passed in explicitly.

    `lock` serializes console mutations against the background autosave flush.
    """

    settings: Any
    store: TaskStore
    persistence: PersistenceAdapter
    lock: threading.RLock = field(default_factory=threading.RLock)
    welcome_shown: bool = False
