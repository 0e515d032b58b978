# Area: Clock
"""
Clock synchronization against the director's timeline.

This package contains:
- ClockSyncEngine: per-client offset and authoritative time
- PassiveOffsetFilter: poll-inferred fallback corrections
- Provenance and status enums
"""

from .engine import ClockSyncEngine, ClockSyncState, DEFAULT_MAX_OFFSET_MS
from .enums import ClockSource, ClockStatus
from .passive_filter import PassiveOffsetFilter

__all__ = [
    "ClockSyncEngine",
    "ClockSyncState",
    "DEFAULT_MAX_OFFSET_MS",
    "ClockSource",
    "ClockStatus",
    "PassiveOffsetFilter",
]
