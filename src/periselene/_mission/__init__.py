# Area: Mission
"""
Mission phase state.

This package contains:
- MissionPhase / ParticipantStatus enums
- MissionState / Participant records
- PhaseStateMachine and the display derivation
- Participant status clamping
- MissionReconciler (import from ``periselene._mission.reconciler``)
"""

from .display import PhaseDisplay, compute_display
from .enums import MissionPhase, ParticipantStatus
from .state import (
    MISSION_STATE_KEY,
    NEW_HEAT_RESET,
    PARTICIPANTS_TABLE,
    MissionState,
    Participant,
    PendingLaunch,
    WinnerAnnouncement,
)
from .state_machine import TRANSITIONS, PhaseStateMachine
from .status import reconcile_status

__all__ = [
    "PhaseDisplay",
    "compute_display",
    "MissionPhase",
    "ParticipantStatus",
    "MISSION_STATE_KEY",
    "NEW_HEAT_RESET",
    "PARTICIPANTS_TABLE",
    "MissionState",
    "Participant",
    "PendingLaunch",
    "WinnerAnnouncement",
    "TRANSITIONS",
    "PhaseStateMachine",
    "reconcile_status",
]
