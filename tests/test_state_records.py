# Area: Mission Tests
"""Tests for mission and participant record parsing."""

from periselene._mission.enums import MissionPhase, ParticipantStatus
from periselene._mission.state import (
    NEW_HEAT_RESET,
    MissionState,
    Participant,
    PendingLaunch,
    WinnerAnnouncement,
)
from periselene._scoring.inputs import LandingGrade, ScoringInputs


class TestMissionState:
    """Tests for MissionState records."""

    def test_missing_record_is_idle(self):
        """Test that an absent record reads as IDLE."""
        assert MissionState.from_record(None) == MissionState()
        assert MissionState.from_record({}) == MissionState()

    def test_round_trip(self):
        """Test that to_record carries every field."""
        state = MissionState(
            phase=MissionPhase.BUILD,
            phase_started_at=1_000,
            pending_launch=PendingLaunch(ends_at=4_000, label="FLIGHT"),
            updated_at=1_000,
        )
        record = state.to_record()
        assert set(record) == {
            "phase", "phase_started_at", "pending_launch", "winner_announcement", "updated_at",
        }
        assert MissionState.from_record(record) == state

    def test_idle_forces_no_start(self):
        """Test that IDLE never carries a start instant."""
        state = MissionState.from_record({"phase": "IDLE", "phase_started_at": 5_000})
        assert state.phase_started_at is None

    def test_legacy_columns(self):
        """Test legacy timer_mode / timer_start_time with ISO timestamps."""
        state = MissionState.from_record({
            "timer_mode": "flight",
            "timer_start_time": "1970-01-01T00:00:10Z",
        })
        assert state.phase is MissionPhase.FLIGHT
        assert state.phase_started_at == 10_000

    def test_malformed_pending_launch_dropped(self):
        """Test that a pending launch without an end instant is ignored."""
        state = MissionState.from_record({"phase": "IDLE", "pending_launch": {"label": "BUILD"}})
        assert state.pending_launch is None

    def test_camel_case_pending_launch(self):
        """Test the endsAt alias."""
        launch = PendingLaunch.from_record({"endsAt": 7_000, "label": "BUILD"})
        assert launch == PendingLaunch(ends_at=7_000, label="BUILD")


class TestWinnerAnnouncement:
    """Tests for WinnerAnnouncement."""

    def test_key(self):
        """Test that the key combines instant and winner id."""
        announcement = WinnerAnnouncement(winner={"participant_id": "p1"}, announced_at=9)
        assert announcement.key == "9:p1"

    def test_from_record_requires_winner(self):
        """Test that incomplete announcements are ignored."""
        assert WinnerAnnouncement.from_record({"announced_at": 9}) is None
        assert WinnerAnnouncement.from_record("nope") is None


class TestParticipant:
    """Tests for Participant records."""

    def test_round_trip(self):
        """Test that to_record and from_record agree."""
        participant = Participant(
            id="p1",
            display_name="Eagle",
            registered_at=100,
            status=ParticipantStatus.LANDED,
            flight_start=1_000,
            land_time=126_000,
            flight_duration=125,
            scoring=ScoringInputs(used_budget=49_000, rover_bonus_granted=True),
        )
        assert Participant.from_record(participant.to_record()) == participant

    def test_legacy_aliases(self):
        """Test legacy team_name, created_at and start_time columns."""
        participant = Participant.from_record({
            "id": "p1",
            "team_name": "Eagle",
            "created_at": "1970-01-01T00:00:01Z",
            "start_time": 2_000,
            "landing_status": "Exploded on impact",
        })
        assert participant.display_name == "Eagle"
        assert participant.registered_at == 1_000
        assert participant.flight_start == 2_000
        assert participant.is_disqualified is True

    def test_scoring_sanitized_on_read(self):
        """Test that stored junk is cleaned when read."""
        participant = Participant.from_record({
            "id": "p1", "aesthetics_bonus": 45, "used_budget": "lots", "status": "???",
        })
        assert participant.scoring.aesthetics_bonus == 30
        assert participant.scoring.used_budget is None
        assert participant.status is ParticipantStatus.WAITING

    def test_took_part_in_flight(self):
        """Test the flight participation predicate."""
        assert Participant(id="a", flight_start=1).took_part_in_flight is True
        assert Participant(id="b", status=ParticipantStatus.FLYING).took_part_in_flight is True
        assert Participant(id="c").took_part_in_flight is False


class TestNewHeatReset:
    """Tests for the new-heat reset fields."""

    def test_reset_fields(self):
        """Test that a new heat clears timing and scoring."""
        assert NEW_HEAT_RESET["status"] == "WAITING"
        assert NEW_HEAT_RESET["flight_start"] is None
        assert NEW_HEAT_RESET["land_time"] is None
        assert NEW_HEAT_RESET["flight_duration"] is None
        assert NEW_HEAT_RESET["used_budget"] is None
        assert NEW_HEAT_RESET["rover_bonus_granted"] is False
        assert NEW_HEAT_RESET["landing_grade"] == LandingGrade.UNSET.value
        assert NEW_HEAT_RESET["notes"] == ""
