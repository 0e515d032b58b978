# Area: Store Tests
"""Tests for the SQLite-backed State Store."""

import os
import sqlite3
import tempfile

import pytest

from periselene._store.adapters import CHANGE_INSERT, CHANGE_UPDATE, RecordKey
from periselene._store.sqlite_store import SqliteStateStore
from periselene.errors import AdapterUnavailableError

KEY = RecordKey("participants", "p1")


class TestSqliteStateStore:
    """Tests for SqliteStateStore."""

    @pytest.fixture
    def db_path(self):
        """Create a temporary database file."""
        with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
            path = f.name
        yield path
        if os.path.exists(path):
            os.unlink(path)

    def test_read_missing_returns_none(self, db_path):
        """Test reading a record that does not exist."""
        store = SqliteStateStore(db_path)
        assert store.read(KEY) is None

    def test_upsert_and_read(self, db_path):
        """Test inserting a record."""
        store = SqliteStateStore(db_path)
        store.upsert(KEY, {"display_name": "Eagle", "flight_start": None})
        assert store.read(KEY) == {"id": "p1", "display_name": "Eagle", "flight_start": None}

    def test_upsert_merges(self, db_path):
        """Test that upsert merges into an existing record."""
        store = SqliteStateStore(db_path)
        store.upsert(KEY, {"display_name": "Eagle", "status": "WAITING"})
        store.upsert(KEY, {"status": "FLYING", "flight_start": 1000})
        record = store.read(KEY)
        assert record["display_name"] == "Eagle"
        assert record["status"] == "FLYING"
        assert record["flight_start"] == 1000

    def test_nested_fields_round_trip(self, db_path):
        """Test that nested mission fields survive JSON storage."""
        store = SqliteStateStore(db_path)
        key = RecordKey("mission_state", "current")
        store.upsert(key, {"phase": "BUILD", "pending_launch": {"ends_at": 5000, "label": "FLIGHT"}})
        assert store.read(key)["pending_launch"] == {"ends_at": 5000, "label": "FLIGHT"}

    def test_read_all_order_and_table(self, db_path):
        """Test that read_all filters by table and keeps insertion order."""
        store = SqliteStateStore(db_path)
        store.upsert(RecordKey("participants", "b"), {})
        store.upsert(RecordKey("mission_state", "current"), {})
        store.upsert(RecordKey("participants", "a"), {})
        store.upsert(RecordKey("participants", "b"), {"status": "LANDED"})
        assert [r["id"] for r in store.read_all("participants")] == ["b", "a"]

    def test_persists_across_instances(self, db_path):
        """Test that a second store on the same file sees the data."""
        SqliteStateStore(db_path).upsert(KEY, {"status": "LANDED"})
        assert SqliteStateStore(db_path).read(KEY)["status"] == "LANDED"

    def test_subscribe_notifies(self, db_path):
        """Test change notifications on this instance."""
        store = SqliteStateStore(db_path)
        events = []
        unsubscribe = store.subscribe("participants", events.append)
        store.upsert(KEY, {"status": "WAITING"})
        store.upsert(KEY, {"status": "BUILDING"})
        unsubscribe()
        store.upsert(KEY, {"status": "FLYING"})
        assert [e["event"] for e in events] == [CHANGE_INSERT, CHANGE_UPDATE]

    def test_sqlite_error_reported_as_unavailable(self, db_path):
        """Test that a failing statement raises AdapterUnavailableError."""
        store = SqliteStateStore(db_path)
        conn = sqlite3.connect(db_path)
        conn.execute("DROP TABLE records")
        conn.commit()
        conn.close()

        with pytest.raises(AdapterUnavailableError) as exc_info:
            store.read(KEY)
        assert exc_info.value.operation == "read"
        with pytest.raises(AdapterUnavailableError) as exc_info:
            store.upsert(KEY, {"status": "LANDED"})
        assert exc_info.value.operation == "read"
