# Area: Mission
"""
periselene._mission.state — Shared records
==========================================

Dataclasses for the single mission record and the participant
records, with lenient parsing from whatever the store hands back.

Parsing never raises: a record written by an older client, or with
ISO timestamps instead of epoch ms, still yields a usable object.
Legacy column names (``timer_mode``, ``timer_start_time``,
``team_name``, ``created_at``, ``start_time``) are read as aliases.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .._scoring.inputs import LandingGrade, ScoringInputs, sanitize_scoring
from .._shared.timeutil import to_epoch_ms, to_finite_number
from .._store.adapters import RecordKey
from .enums import MissionPhase, ParticipantStatus

MISSION_STATE_KEY = RecordKey("mission_state", "current")
PARTICIPANTS_TABLE = "participants"


def _first(record: Dict[str, Any], *names: str) -> Any:
    for name in names:
        if record.get(name) is not None:
            return record[name]
    return None


@dataclass
class PendingLaunch:
    """A synchronized countdown in progress."""
    ends_at: int
    label: str

    def to_record(self) -> Dict[str, Any]:
        return {"ends_at": self.ends_at, "label": self.label}

    @classmethod
    def from_record(cls, data: Any) -> Optional["PendingLaunch"]:
        if not isinstance(data, dict):
            return None
        ends_at = to_epoch_ms(_first(data, "ends_at", "endsAt"))
        if ends_at is None:
            return None
        return cls(ends_at=ends_at, label=str(data.get("label") or ""))


@dataclass
class WinnerAnnouncement:
    """Rank-1 summary plus the director instant it was announced."""
    winner: Dict[str, Any]
    announced_at: int

    @property
    def key(self) -> str:
        """Identity of this announcement; a new key restarts the reveal."""
        return f"{self.announced_at}:{self.winner.get('participant_id') or ''}"

    def to_record(self) -> Dict[str, Any]:
        return {"winner": dict(self.winner), "announced_at": self.announced_at}

    @classmethod
    def from_record(cls, data: Any) -> Optional["WinnerAnnouncement"]:
        if not isinstance(data, dict):
            return None
        announced_at = to_epoch_ms(_first(data, "announced_at", "announcedAt"))
        winner = data.get("winner")
        if announced_at is None or not isinstance(winner, dict):
            return None
        return cls(winner=dict(winner), announced_at=announced_at)


@dataclass
class MissionState:
    """
    The single shared mission record.

    ``phase_started_at`` is set exactly when the phase is not IDLE.
    ``to_record`` always carries every field so a write fully replaces
    the previous mission state.
    """
    phase: MissionPhase = MissionPhase.IDLE
    phase_started_at: Optional[int] = None
    pending_launch: Optional[PendingLaunch] = None
    winner_announcement: Optional[WinnerAnnouncement] = None
    updated_at: Optional[int] = None

    def to_record(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "phase_started_at": self.phase_started_at,
            "pending_launch": self.pending_launch.to_record() if self.pending_launch else None,
            "winner_announcement": (
                self.winner_announcement.to_record() if self.winner_announcement else None
            ),
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_record(cls, record: Optional[Dict[str, Any]]) -> "MissionState":
        if not record:
            return cls()
        phase = MissionPhase.parse(_first(record, "phase", "timer_mode"))
        started = to_epoch_ms(_first(record, "phase_started_at", "timer_start_time"))
        if phase is MissionPhase.IDLE:
            started = None
        return cls(
            phase=phase,
            phase_started_at=started,
            pending_launch=PendingLaunch.from_record(record.get("pending_launch")),
            winner_announcement=WinnerAnnouncement.from_record(
                record.get("winner_announcement")
            ),
            updated_at=to_epoch_ms(record.get("updated_at")),
        )


# Fields a new heat writes to every participant record
NEW_HEAT_RESET: Dict[str, Any] = {
    "status": ParticipantStatus.WAITING.value,
    "flight_start": None,
    "land_time": None,
    "flight_duration": None,
    **ScoringInputs().to_record(),
}


@dataclass
class Participant:
    """One pilot's record: identity, timing and judge inputs."""
    id: str
    display_name: str = ""
    registered_at: Optional[int] = None
    status: ParticipantStatus = ParticipantStatus.WAITING
    flight_start: Optional[int] = None
    land_time: Optional[int] = None
    flight_duration: Optional[float] = None
    scoring: ScoringInputs = field(default_factory=ScoringInputs)

    @property
    def is_disqualified(self) -> bool:
        return self.scoring.landing_grade is LandingGrade.DISQUALIFIED

    @property
    def took_part_in_flight(self) -> bool:
        return self.flight_start is not None or self.status is ParticipantStatus.FLYING

    def to_record(self) -> Dict[str, Any]:
        record = {
            "id": self.id,
            "display_name": self.display_name,
            "registered_at": self.registered_at,
            "status": self.status.value,
            "flight_start": self.flight_start,
            "land_time": self.land_time,
            "flight_duration": self.flight_duration,
        }
        record.update(self.scoring.to_record())
        return record

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Participant":
        scoring, _ = sanitize_scoring(record, participant_id=record.get("id"))
        return cls(
            id=str(record.get("id") or ""),
            display_name=str(_first(record, "display_name", "team_name", "name") or ""),
            registered_at=to_epoch_ms(_first(record, "registered_at", "created_at")),
            status=ParticipantStatus.parse(record.get("status")),
            flight_start=to_epoch_ms(_first(record, "flight_start", "start_time")),
            land_time=to_epoch_ms(record.get("land_time")),
            flight_duration=to_finite_number(record.get("flight_duration")),
            scoring=scoring,
        )
