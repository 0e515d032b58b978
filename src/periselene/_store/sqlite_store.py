# Area: Store
"""
periselene._store.sqlite_store — SQLite-backed State Store
==========================================================

A durable ``StateStore`` for a single host (e.g. the director's
laptop running a local event). Change notifications are delivered to
subscribers registered on this instance only; other processes must
poll, which the core does anyway.
"""

import json
import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional

from .adapters import (
    CHANGE_INSERT,
    CHANGE_UPDATE,
    ChangeHandler,
    Record,
    RecordKey,
    Unsubscribe,
    build_change_event,
)
from .database import BaseRepository, init_database

logger = logging.getLogger("periselene.store.sqlite")


class SqliteStateStore(BaseRepository):
    """
    Repository for the records table.

    Records are JSON documents; ``upsert`` merges fields into the
    stored document and bumps a per-store sequence so ``read_all``
    returns records in insertion order.
    """

    def __init__(self, db_path: str = "periselene.db"):
        super().__init__(db_path)
        init_database(db_path)
        self._subscribers: Dict[str, List[ChangeHandler]] = defaultdict(list)

    def read(self, key: RecordKey) -> Optional[Record]:
        """
        Read one record.

        Args:
            key: Record address

        Returns:
            The record dict, or None if missing
        """
        query = "SELECT fields_json FROM records WHERE table_name = ? AND record_id = ?"
        rows = self._fetch("read", query, (key.table, key.record_id))
        return json.loads(rows[0]["fields_json"]) if rows else None

    def read_all(self, table: str) -> List[Record]:
        """
        Read every record of a table, oldest first.

        Args:
            table: Table name

        Returns:
            List of record dicts
        """
        query = "SELECT fields_json FROM records WHERE table_name = ? ORDER BY seq ASC"
        rows = self._fetch("read_all", query, (table,))
        return [json.loads(row["fields_json"]) for row in rows]

    def upsert(self, key: RecordKey, fields: Record) -> None:
        """
        Insert a record or merge fields into an existing one.

        Args:
            key: Record address
            fields: Fields to set
        """
        existing = self.read(key)
        if existing is None:
            record: Dict[str, Any] = {"id": key.record_id}
            record.update(fields)
            event = CHANGE_INSERT
            query = """
                INSERT INTO records (table_name, record_id, fields_json, seq)
                VALUES (?, ?, ?, (SELECT COALESCE(MAX(seq), 0) + 1 FROM records))
            """
            params: tuple = (key.table, key.record_id, json.dumps(record))
        else:
            record = existing
            record.update(fields)
            event = CHANGE_UPDATE
            query = """
                UPDATE records
                SET fields_json = ?, updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now')
                WHERE table_name = ? AND record_id = ?
            """
            params = (json.dumps(record), key.table, key.record_id)
        self._execute("upsert", query, params)
        self._notify(key, event, record)

    def subscribe(self, table: str, handler: ChangeHandler) -> Unsubscribe:
        """Register a change handler for a table on this instance."""
        self._subscribers[table].append(handler)

        def unsubscribe() -> None:
            if handler in self._subscribers[table]:
                self._subscribers[table].remove(handler)

        return unsubscribe

    def _notify(self, key: RecordKey, event: str, record: Record) -> None:
        change = build_change_event(key, event, record)
        for handler in list(self._subscribers[key.table]):
            try:
                handler(dict(change))
            except Exception:
                logger.error("Change handler failed for %s", key, exc_info=True)
