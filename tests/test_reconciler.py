# Area: Mission Tests
"""Tests for mission record reconciliation."""

import pytest

from periselene._clock.engine import ClockSyncEngine
from periselene._launch.countdown import LocalCountdown
from periselene._mission.enums import MissionPhase
from periselene._mission.reconciler import MissionReconciler
from periselene._mission.state import MissionState, PendingLaunch, WinnerAnnouncement
from periselene._mission.state_machine import PhaseStateMachine
from periselene._reveal.sequencer import WinnerRevealSequencer


@pytest.fixture
def reconciler(clock):
    engine = ClockSyncEngine(local_clock=clock)
    return MissionReconciler(
        PhaseStateMachine(), LocalCountdown(), WinnerRevealSequencer(engine),
    )


def record(**fields):
    return MissionState(**fields).to_record()


class TestMissionReconciler:
    """Tests for MissionReconciler."""

    def test_none_ignored(self, reconciler):
        """Test that a missing record changes nothing."""
        result = reconciler.reconcile(None)
        assert result.changed is False
        assert reconciler.machine.phase is MissionPhase.IDLE

    def test_phase_adopted(self, reconciler):
        """Test that the store phase replaces the local one."""
        result = reconciler.reconcile(record(phase=MissionPhase.BUILD, phase_started_at=1_000))
        assert result.phase_changed is True
        assert result.timeline_changed is True
        assert reconciler.machine.phase_started_at == 1_000

    def test_idempotent(self, reconciler):
        """Test that the same record twice changes nothing the second time."""
        data = record(
            phase=MissionPhase.BUILD,
            phase_started_at=1_000,
            pending_launch=PendingLaunch(ends_at=9_000, label="FLIGHT"),
        )
        assert reconciler.reconcile(data).changed is True
        assert reconciler.reconcile(data).changed is False

    def test_pending_launch_starts_countdown(self, reconciler):
        """Test that a client that missed the commit still counts down."""
        result = reconciler.reconcile(record(pending_launch=PendingLaunch(ends_at=9_000, label="BUILD")))
        assert result.countdown_started is True
        assert reconciler.countdown.ends_at == 9_000
        assert reconciler.countdown.label == "BUILD"

    def test_poll_does_not_restart_running_countdown(self, reconciler):
        """Test that an active countdown is left alone."""
        reconciler.countdown.start(9_100, "BUILD")
        result = reconciler.reconcile(record(pending_launch=PendingLaunch(ends_at=9_000, label="BUILD")))
        assert result.countdown_started is False
        assert reconciler.countdown.ends_at == 9_100

    def test_withdrawn_launch_cancels(self, reconciler):
        """Test that an aborted launch cancels the countdown."""
        reconciler.reconcile(record(pending_launch=PendingLaunch(ends_at=9_000, label="BUILD")))
        result = reconciler.reconcile(record())
        assert result.countdown_cancelled is True
        assert reconciler.countdown.is_active() is False

    def test_phase_change_cancels(self, reconciler):
        """Test that a phase change ends the countdown."""
        reconciler.countdown.start(9_000, "BUILD")
        result = reconciler.reconcile(record(phase=MissionPhase.BUILD, phase_started_at=9_000))
        assert result.countdown_cancelled is True
        assert reconciler.countdown.is_active() is False

    def test_winner_observed(self, reconciler):
        """Test that the winner announcement reaches the reveal."""
        winner = WinnerAnnouncement(winner={"participant_id": "p1"}, announced_at=5)
        result = reconciler.reconcile(record(winner_announcement=winner))
        assert result.reveal_changed is True
        assert reconciler.reveal.announcement == winner

    def test_legacy_record(self, reconciler):
        """Test that legacy column names are understood."""
        reconciler.reconcile({"timer_mode": "BUILD", "timer_start_time": 2_000})
        assert reconciler.machine.phase is MissionPhase.BUILD
        assert reconciler.machine.phase_started_at == 2_000
