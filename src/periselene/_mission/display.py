# Area: Mission
"""
periselene._mission.display — Countdown display derivation
==========================================================

Pure function from (phase, start, now) to what the mission clock
shows. Clients call it on every tick, not on every poll, so the clock
keeps moving smoothly between store reads.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .._shared.timeutil import format_mmss
from .enums import MissionPhase

BUILD_DURATION_SECONDS = 1800
ALERT_THRESHOLD_SECONDS = 300

PHASE_LABELS = {
    MissionPhase.IDLE: "LOBBY",
    MissionPhase.BUILD: "BUILD",
    MissionPhase.FLIGHT: "FLIGHT",
}


@dataclass(frozen=True)
class PhaseDisplay:
    """What the mission clock shows right now."""
    display_time: str
    prefix: str
    elapsed_seconds: Optional[int]
    remaining_seconds: Optional[int]
    is_alert: bool
    label: str


def compute_display(
    phase: MissionPhase,
    phase_started_at: Optional[int],
    now: int,
    build_duration_s: int = BUILD_DURATION_SECONDS,
    alert_threshold_s: int = ALERT_THRESHOLD_SECONDS,
) -> PhaseDisplay:
    """
    Derive the clock display.

    BUILD counts down from *build_duration_s* and alerts under
    *alert_threshold_s* (and at zero). FLIGHT counts up. IDLE shows
    00:00. A non-IDLE phase without a start instant shows --:--.

    Args:
        phase: Current mission phase
        phase_started_at: Director instant the phase began (epoch ms)
        now: Authoritative now (epoch ms)
        build_duration_s: Length of the BUILD window
        alert_threshold_s: Remaining seconds below which BUILD alerts

    Returns:
        PhaseDisplay
    """
    label = PHASE_LABELS[phase]

    if phase is MissionPhase.IDLE:
        return PhaseDisplay("00:00", "", None, None, False, label)

    if phase_started_at is None:
        prefix = "T-" if phase is MissionPhase.BUILD else "T+"
        return PhaseDisplay(format_mmss(None), prefix, None, None, False, label)

    # Clock skew can put the start slightly in the future; show zero
    elapsed = max(0, (now - phase_started_at) // 1000)

    if phase is MissionPhase.BUILD:
        remaining = build_duration_s - elapsed
        if remaining <= 0:
            return PhaseDisplay("00:00", "T-", elapsed, 0, True, label)
        return PhaseDisplay(
            format_mmss(remaining), "T-", elapsed, remaining,
            remaining < alert_threshold_s, label,
        )

    return PhaseDisplay(format_mmss(elapsed), "T+", elapsed, None, False, label)
