# Area: Launch
"""
periselene._launch.handler_sync_response — Sync Response Handler
================================================================

Handles sync-response replies on the director's client and records
them in the open launch session.
"""

import logging
from typing import Any, Dict, Optional

from .._shared.protocol import EVENT_SYNC_RESPONSE
from .coordinator import LaunchCoordinator
from .handler_base import BaseSyncHandler

logger = logging.getLogger("periselene.launch.handler.sync_response")


class SyncResponseHandler(BaseSyncHandler):
    """Handler for sync-response messages."""

    def __init__(self, coordinator: LaunchCoordinator):
        self.coordinator = coordinator

    def handle(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        payload = self.extract_payload(message)
        session_id = self.extract_session_id(payload)
        participant_id = payload.get("participantId")
        offset_ms = self.extract_epoch_ms(payload, "offsetMs")
        if session_id is None or not participant_id or offset_ms is None:
            logger.debug("Ignoring malformed sync response")
            return None

        self.log_handling(EVENT_SYNC_RESPONSE, session_id)
        self.coordinator.record_response(session_id, str(participant_id), offset_ms)
        return None
