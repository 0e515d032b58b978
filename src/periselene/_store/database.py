# Area: Store
"""
periselene._store.database — SQLite connection management
=========================================================

Connection helpers and the repository base class behind the
SQLite-backed ``StateStore``. Records are stored as JSON documents
keyed by (table_name, record_id).
"""

import sqlite3
import logging
from typing import List

from ..errors import AdapterUnavailableError

logger = logging.getLogger("periselene.store.database")

SCHEMA = """
CREATE TABLE IF NOT EXISTS records (
    table_name  TEXT    NOT NULL,
    record_id   TEXT    NOT NULL,
    fields_json TEXT    NOT NULL,
    seq         INTEGER NOT NULL,
    updated_at  TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    PRIMARY KEY (table_name, record_id)
);
CREATE INDEX IF NOT EXISTS idx_records_table_seq ON records (table_name, seq);
"""


def get_connection(db_path: str = "periselene.db") -> sqlite3.Connection:
    """
    Get a database connection.

    Args:
        db_path: Path to the SQLite database file

    Returns:
        SQLite connection with row factory set
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_database(db_path: str = "periselene.db") -> None:
    """
    Initialize the database with schema.

    Args:
        db_path: Path to the SQLite database file
    """
    conn = get_connection(db_path)
    try:
        conn.executescript(SCHEMA)
        conn.commit()
        logger.info(f"Database initialized at {db_path}")
    finally:
        conn.close()


class BaseRepository:
    """
    Base class for SQLite-backed stores.

    Opens one short-lived connection per statement, so a store instance
    can be shared by the director loop and change handlers. Any
    ``sqlite3.Error`` surfaces as ``AdapterUnavailableError`` naming the
    failed operation.

    Attributes:
        db_path: Path to the SQLite database file
        adapter_name: Name reported in adapter errors
    """

    adapter_name = "SqliteStateStore"

    def __init__(self, db_path: str = "periselene.db"):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        return get_connection(self.db_path)

    def _execute(self, operation: str, query: str, params: tuple = ()) -> None:
        """Run a write statement and commit it."""
        conn = self._get_conn()
        try:
            conn.execute(query, params)
            conn.commit()
        except sqlite3.Error as e:
            raise AdapterUnavailableError(self.adapter_name, operation, str(e)) from e
        finally:
            conn.close()

    def _fetch(self, operation: str, query: str, params: tuple = ()) -> List[dict]:
        """
        Run a query and return its rows.

        Args:
            operation: Store operation name for error reports
            query: SQL query string
            params: Query parameters

        Returns:
            Rows as plain dicts (empty when nothing matches)
        """
        conn = self._get_conn()
        try:
            return [dict(row) for row in conn.execute(query, params).fetchall()]
        except sqlite3.Error as e:
            raise AdapterUnavailableError(self.adapter_name, operation, str(e)) from e
        finally:
            conn.close()
