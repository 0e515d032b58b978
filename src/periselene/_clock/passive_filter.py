# Area: Clock
"""
periselene._clock.passive_filter — Poll-inferred clock corrections
==================================================================

Heuristic, one-shot corrections derived from mission records observed
through the store. Only used while the launch sync protocol has not
produced a recent measurement.

Two triggers, both on a *change* between two observed records:

1. A pending launch just appeared. The director wrote it with a fixed
   lead time, so ``ends_at - now`` should be close to that lead.
2. The phase changed. The director wrote ``phase_started_at`` at the
   moment of the change, so elapsed time should be close to zero.

The first observation only seeds the filter.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from .engine import ClockSyncEngine
from .enums import ClockSource

if TYPE_CHECKING:
    from .._mission.state import MissionState

logger = logging.getLogger("periselene.clock.passive")

EXPECTED_LEAD_MS = 3_000
EARLY_TOLERANCE_MS = 5_000
LATE_TOLERANCE_MS = 1_000
PHASE_SNAP_THRESHOLD_MS = 4_000
ACTIVE_SYNC_TRUST_MS = 120_000


class PassiveOffsetFilter:
    """
    Watches successive mission records and nudges the clock engine.

    Attributes:
        engine: Clock engine to correct
        active_sync_trust_ms: Back-off window after a launch commit
        expected_lead_ms: Lead time of a freshly written pending launch
    """

    def __init__(
        self,
        engine: ClockSyncEngine,
        active_sync_trust_ms: int = ACTIVE_SYNC_TRUST_MS,
        expected_lead_ms: int = EXPECTED_LEAD_MS,
    ):
        self.engine = engine
        self.active_sync_trust_ms = active_sync_trust_ms
        self.expected_lead_ms = expected_lead_ms
        self._previous: Optional["MissionState"] = None

    def observe(self, state: "MissionState") -> Optional[int]:
        """
        Feed one observed mission record.

        Args:
            state: Parsed mission state as just read or pushed

        Returns:
            The applied delta in ms, or None if nothing changed
        """
        previous = self._previous
        self._previous = state
        if previous is None or self.engine.is_director:
            return None
        if self.engine.has_recent_commit(self.active_sync_trust_ms):
            logger.debug("Active sync in effect; skipping passive inference")
            return None

        if state.pending_launch is not None and previous.pending_launch is None:
            return self._check_launch_lead(state.pending_launch.ends_at)

        if state.phase != previous.phase and state.phase_started_at is not None:
            return self._check_phase_start(state.phase_started_at)

        return None

    def reset(self) -> None:
        self._previous = None

    def _check_launch_lead(self, ends_at: int) -> Optional[int]:
        lead = ends_at - self.engine.authoritative_now()
        deviation = lead - self.expected_lead_ms
        if deviation > EARLY_TOLERANCE_MS or deviation < -LATE_TOLERANCE_MS:
            logger.info(f"Launch lead {lead}ms off by {deviation}ms; nudging clock")
            self.engine.nudge(deviation, ClockSource.POLL_INFERRED)
            return deviation
        return None

    def _check_phase_start(self, phase_started_at: int) -> Optional[int]:
        elapsed = self.engine.authoritative_now() - phase_started_at
        if abs(elapsed) > PHASE_SNAP_THRESHOLD_MS:
            logger.info(f"Phase change seen {elapsed}ms after start; snapping clock")
            self.engine.nudge(-elapsed, ClockSource.POLL_INFERRED)
            return -elapsed
        return None
