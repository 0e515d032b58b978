# Area: Runner Tests
"""Tests for the Mission Runner."""

from unittest.mock import Mock, patch

import pytest

from periselene._mission.enums import MissionPhase
from periselene.client import MissionClient
from periselene.errors import AdapterUnavailableError
from periselene.runner import MissionRunner


def make_target(*names):
    target = Mock(spec=list(names))
    target.tick.return_value = "view"
    return target


class TestRunOnce:
    """Tests for a single iteration."""

    def test_polls_then_ticks(self):
        """Test the order of calls."""
        target = make_target("poll", "tick")
        calls = []
        target.poll.side_effect = lambda: calls.append("poll")
        target.tick.side_effect = lambda: calls.append("tick") or "view"

        runner = MissionRunner(target)
        assert runner.run_once() == "view"
        assert calls == ["poll", "tick"]
        assert runner.iterations == 1

    def test_tick_only_target(self):
        """Test a target without poll."""
        target = make_target("tick")
        MissionRunner(target).run_once()
        target.tick.assert_called_once()

    def test_poll_paced_by_poll_interval(self):
        """Test that poll runs once per poll interval while tick runs every iteration."""
        target = make_target("poll", "tick")
        now = [0.0]
        runner = MissionRunner(
            target, config={"poll_interval_seconds": 3, "tick_interval_seconds": 1},
            clock=lambda: now[0],
        )
        for _ in range(7):
            runner.run_once()
            now[0] += 1.0
        # polls at t=0, 3 and 6
        assert target.poll.call_count == 3
        assert target.tick.call_count == 7

    def test_poll_every_tick_by_default(self):
        """Test that equal intervals poll on every iteration."""
        target = make_target("poll", "tick")
        now = [0.0]
        runner = MissionRunner(target, clock=lambda: now[0])
        for _ in range(3):
            runner.run_once()
            now[0] += 1.0
        assert target.poll.call_count == 3

    def test_on_view_callback(self):
        """Test that each view is published."""
        on_view = Mock()
        MissionRunner(make_target("tick"), on_view=on_view).run_once()
        on_view.assert_called_once_with("view")


class TestRun:
    """Tests for the loop."""

    @pytest.fixture(autouse=True)
    def no_signal(self):
        with patch("periselene.runner.signal.signal"):
            yield

    def run_for(self, target, iterations, config=None):
        runner = MissionRunner(target, config=config)
        sleeps = []

        def fake_sleep(seconds):
            sleeps.append(seconds)
            if len(sleeps) >= iterations:
                runner.stop()

        runner._sleep = fake_sleep
        runner.run()
        return runner, sleeps

    def test_client_lifecycle(self):
        """Test start, loop and stop for a client."""
        target = make_target("start", "stop", "poll", "tick")
        runner, sleeps = self.run_for(target, 3, config={"tick_interval_seconds": 0.5})
        target.start.assert_called_once()
        target.stop.assert_called_once()
        assert runner.iterations == 3
        assert sleeps == [0.5, 0.5, 0.5]

    def test_director_lifecycle(self):
        """Test that the director is bootstrapped and closed, never stopped."""
        target = make_target("bootstrap", "close", "stop", "tick")
        self.run_for(target, 1)
        target.bootstrap.assert_called_once()
        target.close.assert_called_once()
        target.stop.assert_not_called()

    def test_loop_survives_errors(self):
        """Test that a failing iteration is logged and the loop continues."""
        target = make_target("tick")
        target.tick.side_effect = [RuntimeError("boom"), "view", "view"]
        with patch("periselene.runner.logger") as mock_logger:
            runner, _ = self.run_for(target, 3)
        assert runner.iterations == 2
        assert any("Loop error" in str(c) for c in mock_logger.error.call_args_list)

    def test_package_errors_logged_as_blocks(self):
        """Test that a package error goes through log_error and the loop continues."""
        target = make_target("tick")
        error = AdapterUnavailableError("InMemoryStateStore", "read")
        target.tick.side_effect = [error, "view"]
        with patch("periselene.runner.log_error") as mock_log_error:
            runner, _ = self.run_for(target, 2)
        mock_log_error.assert_called_once_with(error)
        assert runner.iterations == 1

    def test_drives_real_client(self, store, clock):
        """Test the loop against a spectator client."""
        client = MissionClient(store, clock=clock)
        views = []
        runner = MissionRunner(client, on_view=views.append)
        runner._sleep = lambda s: runner.stop()
        runner.run()
        assert views[0].phase is MissionPhase.IDLE
