# Area: Launch
"""
periselene._launch.handler_sync_commit — Sync Commit Handler
============================================================

Handles sync-commit messages on a participant client. For a session
this client was probed in, applies the director-assigned offset (or
the one it measured itself) and starts the local countdown. Unknown
sessions and repeated commits are ignored.
"""

import logging
from typing import Any, Dict, Optional

from .._clock.engine import ClockSyncEngine
from .._clock.enums import ClockSource
from .._shared.protocol import EVENT_SYNC_COMMIT
from .._shared.timeutil import to_finite_number
from .countdown import LocalCountdown
from .coordinator import LAUNCH_COUNTDOWN_MS
from .handler_base import BaseSyncHandler
from .session import KnownSessions

logger = logging.getLogger("periselene.launch.handler.sync_commit")


class SyncCommitHandler(BaseSyncHandler):
    """
    Handler for sync-commit messages.

    When the director commits a session this client knows:
    1. Apply offsetsByParticipantId[self], else the remembered offset
    2. Start the local countdown ending at endsAt
    """

    def __init__(
        self,
        clock: ClockSyncEngine,
        sessions: KnownSessions,
        countdown: LocalCountdown,
        participant_id: str,
        countdown_ms: int = LAUNCH_COUNTDOWN_MS,
    ):
        self.clock = clock
        self.sessions = sessions
        self.countdown = countdown
        self.participant_id = participant_id
        self.countdown_ms = countdown_ms

    def handle(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        payload = self.extract_payload(message)
        session_id = self.extract_session_id(payload)
        if session_id is None or not self.sessions.is_known(session_id):
            logger.debug(f"Ignoring commit for unknown session {session_id}")
            return None
        if not self.sessions.mark_committed(session_id):
            logger.debug(f"Ignoring repeated commit for {session_id}")
            return None

        self.log_handling(EVENT_SYNC_COMMIT, session_id)

        offsets = payload.get("offsetsByParticipantId")
        assigned = None
        if isinstance(offsets, dict):
            assigned = to_finite_number(offsets.get(self.participant_id))
        offset_ms = assigned if assigned is not None else self.sessions.offset_for(session_id)
        self.clock.apply_offset(offset_ms, ClockSource.BROADCAST_COMMIT)

        ends_at = self.extract_epoch_ms(payload, "endsAt")
        if ends_at is None:
            committed_at = self.extract_epoch_ms(payload, "committedAt")
            if committed_at is None:
                logger.warning(f"Commit {session_id} has no end instant; no countdown")
                return None
            ends_at = committed_at + self.countdown_ms

        self.countdown.start(ends_at, self.extract_phase(payload))
        return None
