# Area: Mission
"""
periselene._mission.status — Participant status clamp
=====================================================

A participant record can briefly contradict the mission phase while a
phase change propagates (e.g. FLYING while the store still says
BUILD). Clients never fail on that: they clamp the status they show
to the nearest one the current phase allows.
"""

from .enums import MissionPhase, ParticipantStatus

ALLOWED_STATUSES = {
    MissionPhase.IDLE: {ParticipantStatus.WAITING, ParticipantStatus.LANDED},
    MissionPhase.BUILD: {ParticipantStatus.WAITING, ParticipantStatus.BUILDING},
    MissionPhase.FLIGHT: {ParticipantStatus.FLYING, ParticipantStatus.LANDED},
}

# Where a disallowed status lands for each phase
FALLBACK_STATUS = {
    MissionPhase.IDLE: ParticipantStatus.WAITING,
    MissionPhase.BUILD: ParticipantStatus.BUILDING,
    MissionPhase.FLIGHT: ParticipantStatus.FLYING,
}


def reconcile_status(status: ParticipantStatus, phase: MissionPhase) -> ParticipantStatus:
    """Return *status* if *phase* allows it, otherwise the phase fallback."""
    if status in ALLOWED_STATUSES[phase]:
        return status
    return FALLBACK_STATUS[phase]


def is_consistent(status: ParticipantStatus, phase: MissionPhase) -> bool:
    return status in ALLOWED_STATUSES[phase]
