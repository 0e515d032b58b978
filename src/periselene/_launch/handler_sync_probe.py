# Area: Launch
"""
periselene._launch.handler_sync_probe — Sync Probe Handler
==========================================================

Handles sync-request probes on a participant client. Measures the
director-minus-local offset, remembers it for the session and
replies with a sync-response.
"""

import logging
from typing import Any, Dict, Optional

from .._clock.engine import ClockSyncEngine
from .._shared.protocol import EVENT_SYNC_REQUEST, build_sync_response
from .handler_base import BaseSyncHandler
from .session import KnownSessions

logger = logging.getLogger("periselene.launch.handler.sync_probe")


class SyncProbeHandler(BaseSyncHandler):
    """
    Handler for sync-request messages.

    When the director probes:
    1. Compute offset = directorEpochMs - local now
    2. Remember it for the session
    3. Return a sync-response for the director
    """

    def __init__(
        self,
        clock: ClockSyncEngine,
        sessions: KnownSessions,
        participant_id: str,
        display_name: str = "",
    ):
        self.clock = clock
        self.sessions = sessions
        self.participant_id = participant_id
        self.display_name = display_name

    def handle(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        payload = self.extract_payload(message)
        session_id = self.extract_session_id(payload)
        director_epoch_ms = self.extract_epoch_ms(payload, "directorEpochMs", "adminEpochMs")
        if session_id is None or director_epoch_ms is None:
            logger.debug("Ignoring malformed sync probe")
            return None

        self.log_handling(EVENT_SYNC_REQUEST, session_id)
        phase = self.extract_phase(payload)
        client_epoch_ms = self.clock.local_now()
        offset_ms = director_epoch_ms - client_epoch_ms

        self.sessions.remember(session_id, offset_ms)
        self.clock.mark_syncing(phase)

        return build_sync_response(
            session_id,
            self.participant_id,
            self.display_name,
            offset_ms,
            client_epoch_ms,
            phase=phase,
        )
