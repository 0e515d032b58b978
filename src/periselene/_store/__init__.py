# Area: Store
"""
Adapter contracts and reference adapters.

This package contains:
- StateStore / BroadcastChannel protocols and RecordKey
- In-memory adapters for tests and single-process simulations
- A SQLite-backed StateStore
"""

from .adapters import (
    BroadcastChannel,
    RecordKey,
    StateStore,
    CHANGE_INSERT,
    CHANGE_UPDATE,
    CHANGE_DELETE,
)
from .memory import InMemoryBroadcastChannel, InMemoryStateStore
from .sqlite_store import SqliteStateStore

__all__ = [
    "BroadcastChannel",
    "RecordKey",
    "StateStore",
    "CHANGE_INSERT",
    "CHANGE_UPDATE",
    "CHANGE_DELETE",
    "InMemoryBroadcastChannel",
    "InMemoryStateStore",
    "SqliteStateStore",
]
