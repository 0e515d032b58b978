# Area: Store
"""
periselene._store.adapters — External adapter contracts
=======================================================

The core never talks to a backend directly. It consumes two
structural interfaces:

- ``StateStore``: named records grouped in tables, merge-upsert,
  change subscriptions that may drop notifications (callers poll too).
- ``BroadcastChannel``: best-effort, unordered publish/subscribe with
  no persistence.

Any object with these methods works; the reference implementations
live in ``memory.py`` and ``sqlite_store.py``.
"""

from typing import Any, Callable, Dict, List, NamedTuple, Optional, Protocol

Record = Dict[str, Any]
ChangeHandler = Callable[[Dict[str, Any]], None]
MessageHandler = Callable[[Dict[str, Any]], None]
Unsubscribe = Callable[[], None]

CHANGE_INSERT = "INSERT"
CHANGE_UPDATE = "UPDATE"
CHANGE_DELETE = "DELETE"


class RecordKey(NamedTuple):
    """Address of a single record: table name plus record id."""

    table: str
    record_id: str


def build_change_event(key: RecordKey, event: str, record: Optional[Record]) -> Dict[str, Any]:
    """Change notification delivered to ``StateStore.subscribe`` handlers."""
    return {
        "table": key.table,
        "record_id": key.record_id,
        "event": event,
        "record": dict(record) if record is not None else None,
    }


class StateStore(Protocol):
    """Protocol for the shared record store."""

    def read(self, key: RecordKey) -> Optional[Record]:
        """Return a copy of the record, or None if it does not exist."""
        ...

    def read_all(self, table: str) -> List[Record]:
        """Return copies of every record in *table*, oldest first."""
        ...

    def upsert(self, key: RecordKey, fields: Record) -> None:
        """Insert the record or merge *fields* into the existing one."""
        ...

    def subscribe(self, table: str, handler: ChangeHandler) -> Unsubscribe:
        """Register *handler* for insert/update/delete events on *table*."""
        ...


class BroadcastChannel(Protocol):
    """Protocol for the best-effort broadcast bus."""

    def publish(self, topic: str, message: Dict[str, Any]) -> None:
        """Publish a message built by ``protocol.build_message``."""
        ...

    def on(self, topic: str, event: str, handler: MessageHandler) -> Unsubscribe:
        """Register *handler* for *event* messages on *topic*."""
        ...
