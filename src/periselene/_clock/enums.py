# Area: Clock
"""
periselene._clock.enums — Clock offset provenance
=================================================
"""

from enum import Enum


class ClockSource(Enum):
    """
    Where the current offset came from, lowest confidence first.

    LOCAL: no correction yet (offset 0, or the director's own clock)
    POLL_INFERRED: one-shot heuristic from a store observation
    BROADCAST_COMMIT: measured by the launch sync protocol
    """
    LOCAL = "LOCAL"
    POLL_INFERRED = "POLL-INFERRED"
    BROADCAST_COMMIT = "BROADCAST-COMMIT"


class ClockStatus(Enum):
    """Operator-facing clock indicator."""
    WAITING = "CLOCK WAITING"
    SYNCED = "CLOCK SYNCED"
    SYNCING = "SYNCING"
    LOST = "SYNC LOST"
