# Area: Mission
"""
periselene._mission.state_machine — Phase State Machine
=======================================================

Tracks the mission phase and the instant it started. Only the
director transitions it; every other client just replaces its copy
with whatever the store says.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import InvalidPhaseTransitionError
from .enums import MissionPhase
from .state import MissionState

logger = logging.getLogger("periselene.mission.state_machine")


# Valid phase transitions: {current_phase: {allowed targets}}
# Any phase may also go to IDLE (STOP).
TRANSITIONS = {
    MissionPhase.IDLE: {MissionPhase.BUILD},
    MissionPhase.BUILD: {MissionPhase.FLIGHT},
    MissionPhase.FLIGHT: set(),
}


class PhaseStateMachine:
    """
    State machine for the mission phase.

    Attributes:
        state: The current mission state (phase, start, pending launch)
    """

    def __init__(self, state: Optional[MissionState] = None):
        """Initialize in IDLE unless a known state is given."""
        self.state = state or MissionState()

    @property
    def phase(self) -> MissionPhase:
        return self.state.phase

    @property
    def phase_started_at(self) -> Optional[int]:
        return self.state.phase_started_at

    def can_transition(self, target: MissionPhase) -> bool:
        """
        Check if moving to *target* is legal from the current phase.

        Args:
            target: The requested phase

        Returns:
            True if the transition is valid, False otherwise
        """
        if target is MissionPhase.IDLE:
            return True
        return target in TRANSITIONS.get(self.state.phase, set())

    def transition(self, target: MissionPhase, now: int) -> MissionState:
        """
        Execute a phase transition.

        Entering BUILD or FLIGHT stamps ``phase_started_at = now``.
        Entering IDLE clears the start and any pending launch. Either
        way the pending launch is resolved.

        Args:
            target: The requested phase
            now: Director time in epoch ms

        Returns:
            The new mission state

        Raises:
            InvalidPhaseTransitionError: If the transition is not valid
        """
        if not self.can_transition(target):
            raise InvalidPhaseTransitionError(self.state.phase.value, target.value)

        previous = self.state.phase
        self.state = MissionState(
            phase=target,
            phase_started_at=None if target is MissionPhase.IDLE else now,
            pending_launch=None,
            winner_announcement=self.state.winner_announcement,
            updated_at=now,
        )
        logger.info(f"Phase {previous.value} → {target.value}")
        return self.state

    def replace(self, state: MissionState) -> bool:
        """
        Adopt a state observed in the store.

        Returns:
            True if the phase or its start instant changed
        """
        changed = (
            state.phase is not self.state.phase
            or state.phase_started_at != self.state.phase_started_at
        )
        self.state = state
        return changed

    def reset(self) -> None:
        """Reset to IDLE."""
        self.state = MissionState()
