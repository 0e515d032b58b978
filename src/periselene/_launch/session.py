# Area: Launch
"""
periselene._launch.session — Launch session bookkeeping
=======================================================

``LaunchSession`` is the director's view of one ready-check: who is
expected, who answered, and with which offset.

``KnownSessions`` is the participant's view: the offset it measured
for each session it was probed in, and which sessions it has already
seen committed. Everything is keyed by session id so repeated probes
and commits are harmless.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Set, Tuple

from .._mission.enums import MissionPhase


@dataclass
class LaunchSession:
    """One ready-check run by the director."""
    session_id: str
    phase: MissionPhase
    opened_at: int
    expected_ids: FrozenSet[str]
    offsets: Dict[str, int] = field(default_factory=dict)
    committed_at: Optional[int] = None
    ends_at: Optional[int] = None

    @property
    def is_committed(self) -> bool:
        return self.committed_at is not None

    def record_response(self, participant_id: str, offset_ms: int) -> bool:
        """
        Store a participant's reply; a later reply replaces an earlier one.

        Returns:
            True if this participant had not answered before
        """
        is_new = participant_id not in self.offsets
        self.offsets[participant_id] = offset_ms
        return is_new

    def ready_status(self) -> Tuple[int, int]:
        """(expected participants that answered, expected participants)."""
        ready = sum(1 for pid in self.expected_ids if pid in self.offsets)
        return ready, len(self.expected_ids)

    @property
    def all_ready(self) -> bool:
        ready, total = self.ready_status()
        return ready == total


class KnownSessions:
    """Participant-side memory of probed sessions, oldest evicted first."""

    def __init__(self, capacity: int = 16):
        self.capacity = capacity
        self._offsets: "OrderedDict[str, int]" = OrderedDict()
        self._committed: Set[str] = set()

    def remember(self, session_id: str, offset_ms: int) -> None:
        self._offsets[session_id] = offset_ms
        self._offsets.move_to_end(session_id)
        while len(self._offsets) > self.capacity:
            evicted, _ = self._offsets.popitem(last=False)
            self._committed.discard(evicted)

    def is_known(self, session_id: str) -> bool:
        return session_id in self._offsets

    def offset_for(self, session_id: str) -> Optional[int]:
        return self._offsets.get(session_id)

    def mark_committed(self, session_id: str) -> bool:
        """
        Record that *session_id* was committed.

        Returns:
            False if it had already been committed
        """
        if session_id in self._committed:
            return False
        self._committed.add(session_id)
        return True

    def is_committed(self, session_id: str) -> bool:
        return session_id in self._committed
