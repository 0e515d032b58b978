# Area: Launch
"""
periselene._launch.handler_base — Base Sync Handler
===================================================

Abstract base class for launch-protocol message handlers.
Provides common helpers for reading the loosely-typed payloads that
arrive on the Broadcast Channel.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from .._shared.timeutil import to_finite_number

logger = logging.getLogger("periselene.launch.handler")


class BaseSyncHandler(ABC):
    """
    Abstract base class for sync message handlers.

    Handlers receive the whole message (``event`` plus ``payload``)
    and may return a message to publish in reply.

    Provides helper methods for:
    - Extracting the session id, phase and epoch fields
    - Logging that a message is being handled
    """

    @abstractmethod
    def handle(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Handle a sync message.

        Args:
            message: The broadcast message to handle

        Returns:
            Optional message to publish back, or None
        """
        pass

    def extract_payload(self, message: Dict[str, Any]) -> Dict[str, Any]:
        """
        Extract payload from message.

        Args:
            message: The message to extract from

        Returns:
            The payload dict, or empty dict if missing or malformed
        """
        payload = message.get("payload")
        return payload if isinstance(payload, dict) else {}

    def extract_session_id(self, payload: Dict[str, Any]) -> Optional[str]:
        """
        Extract sessionId from payload.

        Returns:
            The session id if it is a non-empty string, None otherwise
        """
        session_id = payload.get("sessionId")
        if isinstance(session_id, str) and session_id:
            return session_id
        return None

    def extract_phase(self, payload: Dict[str, Any]) -> str:
        """Phase label carried by the payload, 'PHASE' when missing."""
        phase = payload.get("phase")
        return phase if isinstance(phase, str) and phase else "PHASE"

    def extract_epoch_ms(self, payload: Dict[str, Any], *keys: str) -> Optional[int]:
        """
        Extract the first finite epoch-ms value among *keys*.

        Returns:
            The value as int, or None if no key holds a number
        """
        for key in keys:
            value = to_finite_number(payload.get(key))
            if value is not None:
                return int(value)
        return None

    def log_handling(self, event: str, session_id: Optional[str]) -> None:
        """
        Log that a message is being handled.

        Args:
            event: The event name
            session_id: The session id if available
        """
        if session_id:
            logger.debug(f"Handling {event} (session_id={session_id})")
        else:
            logger.debug(f"Handling {event}")
