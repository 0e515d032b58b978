"""
periselene.types — TypedDict schemas for wire payloads and records
==================================================================

This module documents the exact structure of the plain dicts that
cross the two adapters: broadcast payloads on the sync topic and the
records kept in the State Store.

Inside the core these are parsed into dataclasses; the TypedDicts are
for UI code and adapter authors. All types are exported from the main
package:

    from periselene import SyncProbe, MissionStateRecord, ...

Use __annotations__ to inspect fields:

    >>> SyncProbe.__annotations__
    {'sessionId': <class 'str'>, 'phase': <class 'str'>, 'directorEpochMs': <class 'int'>}
"""

from typing import Dict, Optional, TypedDict


# ============================================
# Broadcast payloads (topic "timer-sync-control-v1")
# ============================================

class SyncProbe(TypedDict):
    """sync-request: director → participants, once per second.

    Fields
    ------
    sessionId : str
        Opaque launch session id, e.g. "sync-20260101120000-a1b2c3".
    phase : str
        Phase being launched, "BUILD" or "FLIGHT".
    directorEpochMs : int
        Director's local clock at send time.
    """
    sessionId: str
    phase: str
    directorEpochMs: int


class SyncResponse(TypedDict):
    """sync-response: participant → director.

    Fields
    ------
    offsetMs : int
        directorEpochMs minus the participant's local clock at receipt.
    respondedAt : str
        ISO-8601 timestamp, informational only.
    """
    sessionId: str
    phase: Optional[str]
    participantId: str
    displayName: str
    offsetMs: int
    clientEpochMs: int
    respondedAt: str


class SyncCommit(TypedDict):
    """sync-commit: director → participants, once per session.

    Fields
    ------
    offsetsByParticipantId : Dict[str, int]
        Offset each participant reported; absent ones fall back to
        their own measurement.
    committedAt : int
        Director time of the commit.
    endsAt : int
        Director time the countdown reaches zero.
    """
    sessionId: str
    phase: str
    offsetsByParticipantId: Dict[str, int]
    committedAt: int
    endsAt: int


# ============================================
# State Store records
# ============================================

class PendingLaunchRecord(TypedDict):
    ends_at: int        # director epoch ms
    label: str          # "BUILD" / "FLIGHT"


class WinnerBonuses(TypedDict):
    budget_bonus: int
    rover_bonus: int
    return_bonus: int
    aesthetics_bonus: int


class WinnerPenalties(TypedDict):
    landing_adjustment: int
    extra_penalty: int


class WinnerSummary(TypedDict):
    """Rank-1 summary carried by the winner announcement."""
    participant_id: str
    display_name: str
    rank: int
    flight_seconds: Optional[int]
    flight_label: str               # "MM:SS"
    final_score: int
    final_score_label: str          # e.g. "35s"
    bonuses: WinnerBonuses
    penalties: WinnerPenalties
    total_bonus: int
    total_penalty: int


class WinnerAnnouncementRecord(TypedDict):
    winner: WinnerSummary
    announced_at: int               # director epoch ms


class MissionStateRecord(TypedDict):
    """The single shared mission record.

    Fields
    ------
    phase : str
        "IDLE", "BUILD" or "FLIGHT".
    phase_started_at : Optional[int]
        Set exactly when phase is not IDLE.
    pending_launch : Optional[PendingLaunchRecord]
        Countdown in progress, cleared when the phase changes.
    winner_announcement : Optional[WinnerAnnouncementRecord]
        Set by the director; cleared by a new heat.
    """
    phase: str
    phase_started_at: Optional[int]
    pending_launch: Optional[PendingLaunchRecord]
    winner_announcement: Optional[WinnerAnnouncementRecord]
    updated_at: Optional[int]


class ParticipantRecord(TypedDict, total=False):
    """One participant. Scoring fields are written by judges only."""
    id: str
    display_name: str
    registered_at: int
    status: str                     # WAITING / BUILDING / FLYING / LANDED
    flight_start: Optional[int]
    land_time: Optional[int]
    flight_duration: Optional[float]
    used_budget: Optional[float]
    rover_bonus_granted: bool
    return_bonus_granted: bool
    aesthetics_bonus: Optional[int]  # 0..30
    landing_grade: str              # UNSET / PERFECT_SOFT / HARD / CRUNCH / DISQUALIFIED
    extra_penalty_seconds: Optional[int]
    notes: str
