# Area: Store
"""
periselene._store.memory — In-process adapters
==============================================

Reference implementations of ``StateStore`` and ``BroadcastChannel``
that live in a single process. Several clients can share one
instance to simulate a director, pilots and judges side by side.

Both can be switched offline to simulate an outage: every call then
raises ``AdapterUnavailableError``.
"""

from __future__ import annotations

import copy
import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional, Tuple

from ..errors import AdapterUnavailableError
from .adapters import (
    CHANGE_INSERT,
    CHANGE_UPDATE,
    ChangeHandler,
    MessageHandler,
    Record,
    RecordKey,
    Unsubscribe,
    build_change_event,
)

logger = logging.getLogger("periselene.store.memory")


class InMemoryStateStore:
    """Dict-backed store with synchronous change notifications.

    Records keep insertion order per table. ``drop_notifications``
    simulates a push channel that silently loses events.
    """

    def __init__(self) -> None:
        self._tables: Dict[str, Dict[str, Record]] = defaultdict(dict)
        self._subscribers: Dict[str, List[ChangeHandler]] = defaultdict(list)
        self.online = True
        self.drop_notifications = False

    def _check_online(self, operation: str) -> None:
        if not self.online:
            raise AdapterUnavailableError("InMemoryStateStore", operation)

    def read(self, key: RecordKey) -> Optional[Record]:
        self._check_online("read")
        record = self._tables[key.table].get(key.record_id)
        return copy.deepcopy(record) if record is not None else None

    def read_all(self, table: str) -> List[Record]:
        self._check_online("read_all")
        return [copy.deepcopy(r) for r in self._tables[table].values()]

    def upsert(self, key: RecordKey, fields: Record) -> None:
        self._check_online("upsert")
        table = self._tables[key.table]
        existing = table.get(key.record_id)
        if existing is None:
            record = {"id": key.record_id}
            record.update(copy.deepcopy(fields))
            table[key.record_id] = record
            event = CHANGE_INSERT
        else:
            existing.update(copy.deepcopy(fields))
            record = existing
            event = CHANGE_UPDATE
        self._notify(key, event, record)

    def subscribe(self, table: str, handler: ChangeHandler) -> Unsubscribe:
        self._check_online("subscribe")
        self._subscribers[table].append(handler)

        def unsubscribe() -> None:
            if handler in self._subscribers[table]:
                self._subscribers[table].remove(handler)

        return unsubscribe

    def _notify(self, key: RecordKey, event: str, record: Record) -> None:
        if self.drop_notifications:
            logger.debug("Dropped %s notification for %s", event, key)
            return
        change = build_change_event(key, event, record)
        for handler in list(self._subscribers[key.table]):
            try:
                handler(copy.deepcopy(change))
            except Exception:
                logger.error("Change handler failed for %s", key, exc_info=True)


class InMemoryBroadcastChannel:
    """Synchronous broadcast bus.

    Messages are delivered immediately to handlers registered at
    publish time; later subscribers never see them. Every published
    message is kept in ``history`` for inspection.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Tuple[str, str], List[MessageHandler]] = defaultdict(list)
        self.history: List[Tuple[str, Dict[str, Any]]] = []
        self.online = True

    def publish(self, topic: str, message: Dict[str, Any]) -> None:
        if not self.online:
            raise AdapterUnavailableError("InMemoryBroadcastChannel", "publish")
        self.history.append((topic, copy.deepcopy(message)))
        event = message.get("event", "")
        for handler in list(self._handlers[(topic, event)]):
            try:
                handler(copy.deepcopy(message.get("payload") or {}))
            except Exception:
                logger.error("Broadcast handler failed for %s/%s", topic, event, exc_info=True)

    def on(self, topic: str, event: str, handler: MessageHandler) -> Unsubscribe:
        if not self.online:
            raise AdapterUnavailableError("InMemoryBroadcastChannel", "on")
        self._handlers[(topic, event)].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[(topic, event)]:
                self._handlers[(topic, event)].remove(handler)

        return unsubscribe

    def published(self, event: str) -> List[Dict[str, Any]]:
        """Payloads of every published message with *event*."""
        return [
            msg.get("payload") or {}
            for _, msg in self.history
            if msg.get("event") == event
        ]
