# Area: Launch Tests
"""Tests for sync message handlers."""

from unittest.mock import Mock

import pytest

from periselene._clock.engine import ClockSyncEngine
from periselene._clock.enums import ClockSource, ClockStatus
from periselene._launch.countdown import LocalCountdown
from periselene._launch.handler_sync_commit import SyncCommitHandler
from periselene._launch.handler_sync_probe import SyncProbeHandler
from periselene._launch.handler_sync_response import SyncResponseHandler
from periselene._launch.session import KnownSessions
from periselene._shared.protocol import (
    EVENT_SYNC_COMMIT,
    EVENT_SYNC_REQUEST,
    EVENT_SYNC_RESPONSE,
    build_message,
)


def probe(session_id="s1", director_ms=0, key="directorEpochMs", phase="BUILD"):
    return build_message(EVENT_SYNC_REQUEST, {"sessionId": session_id, "phase": phase, key: director_ms})


def commit(session_id="s1", offsets=None, ends_at=None, committed_at=None, phase="BUILD"):
    payload = {"sessionId": session_id, "phase": phase, "offsetsByParticipantId": offsets or {}}
    if ends_at is not None:
        payload["endsAt"] = ends_at
    if committed_at is not None:
        payload["committedAt"] = committed_at
    return build_message(EVENT_SYNC_COMMIT, payload)


class TestSyncProbeHandler:
    """Tests for SyncProbeHandler."""

    @pytest.fixture
    def engine(self, clock):
        return ClockSyncEngine(local_clock=clock)

    def test_measures_offset_and_replies(self, engine, clock):
        """Test offset = director epoch minus local now."""
        sessions = KnownSessions()
        handler = SyncProbeHandler(engine, sessions, "p1", "Eagle")

        reply = handler.handle(probe(director_ms=clock.now - 10_000))

        assert reply["event"] == EVENT_SYNC_RESPONSE
        payload = reply["payload"]
        assert payload["offsetMs"] == -10_000
        assert payload["participantId"] == "p1"
        assert payload["displayName"] == "Eagle"
        assert payload["clientEpochMs"] == clock.now
        assert sessions.offset_for("s1") == -10_000

    def test_probe_does_not_move_clock(self, engine, clock):
        """Test that only the commit applies an offset."""
        SyncProbeHandler(engine, KnownSessions(), "p1").handle(probe(director_ms=clock.now + 500))
        assert engine.offset_ms == 0

    def test_marks_syncing(self, engine, clock):
        """Test the SYNCING indicator."""
        SyncProbeHandler(engine, KnownSessions(), "p1").handle(probe(director_ms=clock.now, phase="FLIGHT"))
        assert engine.status is ClockStatus.SYNCING
        assert engine.status_text == "SYNCING FLIGHT..."

    def test_admin_epoch_alias(self, engine, clock):
        """Test the legacy adminEpochMs key."""
        sessions = KnownSessions()
        SyncProbeHandler(engine, sessions, "p1").handle(probe(director_ms=clock.now + 5, key="adminEpochMs"))
        assert sessions.offset_for("s1") == 5

    def test_malformed_probe_ignored(self, engine):
        """Test probes without a session or timestamp."""
        handler = SyncProbeHandler(engine, KnownSessions(), "p1")
        assert handler.handle(build_message(EVENT_SYNC_REQUEST, {"sessionId": "s1"})) is None
        assert handler.handle(build_message(EVENT_SYNC_REQUEST, {"directorEpochMs": 1})) is None
        assert handler.handle({"event": EVENT_SYNC_REQUEST, "payload": "junk"}) is None


class TestSyncCommitHandler:
    """Tests for SyncCommitHandler."""

    @pytest.fixture
    def parts(self, clock):
        engine = ClockSyncEngine(local_clock=clock)
        sessions = KnownSessions()
        countdown = LocalCountdown()
        handler = SyncCommitHandler(engine, sessions, countdown, "p1")
        return engine, sessions, countdown, handler

    def test_applies_assigned_offset(self, parts, clock):
        """Test that the director-assigned offset is applied."""
        engine, sessions, countdown, handler = parts
        sessions.remember("s1", -9_000)

        handler.handle(commit(offsets={"p1": -10_000}, ends_at=clock.now - 7_000))

        assert engine.offset_ms == -10_000
        assert engine.source is ClockSource.BROADCAST_COMMIT
        assert countdown.ends_at == clock.now - 7_000
        assert countdown.label == "BUILD"

    def test_falls_back_to_own_measurement(self, parts):
        """Test the remembered offset when the commit lacks ours."""
        engine, sessions, _, handler = parts
        sessions.remember("s1", 420)
        handler.handle(commit(offsets={"other": 5}, ends_at=10))
        assert engine.offset_ms == 420

    def test_unknown_session_ignored(self, parts):
        """Test that commits for sessions we were never probed in are ignored."""
        engine, _, countdown, handler = parts
        handler.handle(commit(session_id="s9", offsets={"p1": 100}, ends_at=10))
        assert engine.offset_ms == 0
        assert countdown.is_active() is False

    def test_repeated_commit_ignored(self, parts):
        """Test that a commit is applied once per session."""
        engine, sessions, countdown, handler = parts
        sessions.remember("s1", 0)
        handler.handle(commit(offsets={"p1": 100}, ends_at=10))
        countdown.cancel()
        handler.handle(commit(offsets={"p1": 999}, ends_at=20))
        assert engine.offset_ms == 100
        assert countdown.is_active() is False

    def test_end_from_committed_at(self, parts):
        """Test endsAt derived from committedAt plus the countdown."""
        _, sessions, countdown, handler = parts
        sessions.remember("s1", 0)
        handler.handle(commit(committed_at=50_000))
        assert countdown.ends_at == 53_000

    def test_no_end_instant(self, parts):
        """Test a commit without any instant applies the offset only."""
        engine, sessions, countdown, handler = parts
        sessions.remember("s1", 0)
        handler.handle(commit(offsets={"p1": 7}))
        assert engine.offset_ms == 7
        assert countdown.is_active() is False


class TestSyncResponseHandler:
    """Tests for SyncResponseHandler."""

    def test_records_response(self):
        """Test that replies reach the coordinator."""
        coordinator = Mock()
        handler = SyncResponseHandler(coordinator)
        handler.handle(build_message(EVENT_SYNC_RESPONSE, {
            "sessionId": "s1", "participantId": "p1", "offsetMs": -12,
        }))
        coordinator.record_response.assert_called_once_with("s1", "p1", -12)

    def test_malformed_response_ignored(self):
        """Test replies without participant or offset."""
        coordinator = Mock()
        handler = SyncResponseHandler(coordinator)
        handler.handle(build_message(EVENT_SYNC_RESPONSE, {"sessionId": "s1", "offsetMs": 1}))
        handler.handle(build_message(EVENT_SYNC_RESPONSE, {"sessionId": "s1", "participantId": "p1"}))
        coordinator.record_response.assert_not_called()
