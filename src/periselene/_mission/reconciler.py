# Area: Mission
"""
periselene._mission.reconciler — Mission record reconciliation
==============================================================

Both the fixed-interval poll and the store's push subscription hand
the latest mission record to ``MissionReconciler.reconcile``. It is
idempotent: feeding the same record twice changes nothing the second
time, so either trigger alone is enough and both together never
double-apply.

The store always wins. A phase that differs from the local one
replaces it and cancels any local countdown; a pending launch that
vanishes without a phase change cancels the countdown as well.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .._clock.passive_filter import PassiveOffsetFilter
from .._launch.countdown import LocalCountdown
from .._reveal.sequencer import WinnerRevealSequencer
from .state import MissionState
from .state_machine import PhaseStateMachine

logger = logging.getLogger("periselene.mission.reconciler")


@dataclass(frozen=True)
class ReconcileResult:
    """What a single reconcile pass changed."""
    phase_changed: bool = False
    timeline_changed: bool = False
    countdown_started: bool = False
    countdown_cancelled: bool = False
    reveal_changed: bool = False

    @property
    def changed(self) -> bool:
        return (
            self.timeline_changed
            or self.countdown_started
            or self.countdown_cancelled
            or self.reveal_changed
        )


class MissionReconciler:
    """
    Applies observed mission records to one client's local state.

    Attributes:
        machine: Local copy of the phase state
        countdown: Local launch countdown
        passive_filter: Poll-inferred clock correction (None disables it)
        reveal: Winner reveal sequencer
    """

    def __init__(
        self,
        machine: PhaseStateMachine,
        countdown: LocalCountdown,
        reveal: WinnerRevealSequencer,
        passive_filter: Optional[PassiveOffsetFilter] = None,
    ):
        self.machine = machine
        self.countdown = countdown
        self.reveal = reveal
        self.passive_filter = passive_filter

    def reconcile(self, record: Optional[Dict[str, Any]]) -> ReconcileResult:
        """
        Apply the latest mission record.

        Args:
            record: Mission record as read or pushed; None is ignored

        Returns:
            ReconcileResult describing what changed
        """
        if record is None:
            return ReconcileResult()

        incoming = MissionState.from_record(record)
        previous = self.machine.state

        if self.passive_filter is not None:
            self.passive_filter.observe(incoming)

        phase_changed = incoming.phase is not previous.phase
        countdown_cancelled = False
        countdown_started = False

        if phase_changed:
            logger.info(f"Store phase {previous.phase.value} → {incoming.phase.value}")
            if self.countdown.is_active():
                self.countdown.cancel()
                countdown_cancelled = True
        elif previous.pending_launch is not None and incoming.pending_launch is None:
            if self.countdown.is_active():
                logger.info("Pending launch withdrawn; countdown cancelled")
                self.countdown.cancel()
                countdown_cancelled = True

        launch = incoming.pending_launch
        if launch is not None and not self.countdown.is_active():
            is_new = previous.pending_launch is None or previous.pending_launch.ends_at != launch.ends_at
            if is_new:
                # Covers clients that missed the broadcast commit
                countdown_started = self.countdown.start(launch.ends_at, launch.label)

        timeline_changed = self.machine.replace(incoming)
        reveal_changed = self.reveal.observe(incoming.winner_announcement)

        return ReconcileResult(
            phase_changed=phase_changed,
            timeline_changed=timeline_changed,
            countdown_started=countdown_started,
            countdown_cancelled=countdown_cancelled,
            reveal_changed=reveal_changed,
        )
