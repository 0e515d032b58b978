# Area: Shared
"""
periselene._shared.protocol — Broadcast message helpers
=======================================================

Topic and event names used on the Broadcast Channel, plus builders
for the plain key-value bundles carried on it.

A message on the wire looks like:

    {"event": "sync-request", "message_id": "...", "payload": {...}}

Payloads are never the sole carrier of state; the store is.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

SYNC_TOPIC = "timer-sync-control-v1"

EVENT_SYNC_REQUEST = "sync-request"
EVENT_SYNC_RESPONSE = "sync-response"
EVENT_SYNC_COMMIT = "sync-commit"

SYNC_EVENTS = (EVENT_SYNC_REQUEST, EVENT_SYNC_RESPONSE, EVENT_SYNC_COMMIT)


def generate_session_id(prefix: str = "sync") -> str:
    """Generate an opaque launch session id.

    Format: prefix-YYYYMMDDHHMMSS-XXXXXX
    """
    date_part = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    unique_part = uuid.uuid4().hex[:6]
    return f"{prefix}-{date_part}-{unique_part}"


def generate_participant_id() -> str:
    """Generate a participant id."""
    return str(uuid.uuid4())


def current_timestamp() -> str:
    """ISO 8601 timestamp with timezone."""
    return datetime.now(timezone.utc).isoformat()


def build_message(
    event: str,
    payload: Dict[str, Any],
    message_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Wrap a payload into a broadcast message.

    Args:
        event: Event name (sync-request, sync-response, sync-commit)
        payload: Event-specific payload
        message_id: Message ID (auto-generated if not provided)

    Returns:
        Message dict ready for ``BroadcastChannel.publish``
    """
    return {
        "event": event,
        "message_id": message_id or str(uuid.uuid4()),
        "payload": dict(payload),
    }


def build_sync_probe(session_id: str, phase: str, director_epoch_ms: int) -> Dict[str, Any]:
    """Director → participants: clock probe for a launch session."""
    return build_message(EVENT_SYNC_REQUEST, {
        "sessionId": session_id,
        "phase": phase,
        "directorEpochMs": director_epoch_ms,
    })


def build_sync_response(
    session_id: str,
    participant_id: str,
    display_name: str,
    offset_ms: int,
    client_epoch_ms: int,
    phase: Optional[str] = None,
) -> Dict[str, Any]:
    """Participant → director: measured offset for a launch session."""
    return build_message(EVENT_SYNC_RESPONSE, {
        "sessionId": session_id,
        "phase": phase,
        "participantId": participant_id,
        "displayName": display_name,
        "offsetMs": offset_ms,
        "clientEpochMs": client_epoch_ms,
        "respondedAt": current_timestamp(),
    })


def build_sync_commit(
    session_id: str,
    phase: str,
    offsets_by_participant_id: Dict[str, int],
    committed_at: int,
    ends_at: int,
) -> Dict[str, Any]:
    """Director → participants: launch commit with per-participant offsets."""
    return build_message(EVENT_SYNC_COMMIT, {
        "sessionId": session_id,
        "phase": phase,
        "offsetsByParticipantId": dict(offsets_by_participant_id),
        "committedAt": committed_at,
        "endsAt": ends_at,
    })
