# Area: Shared
"""
Shared utilities used by every component.

This package contains:
- Logging configuration
- Broadcast message helpers
- Timestamp helpers
- Guarded adapter calls
"""

from .logging_config import (
    setup_logging,
    log_error,
    enable_quiet_mode,
    disable_quiet_mode,
    is_quiet_mode_enabled,
)
from .protocol import (
    SYNC_TOPIC,
    EVENT_SYNC_REQUEST,
    EVENT_SYNC_RESPONSE,
    EVENT_SYNC_COMMIT,
    build_message,
    generate_session_id,
    generate_participant_id,
    current_timestamp,
)
from .guarded import FAILED, guarded_call
from .timeutil import system_clock_ms, to_epoch_ms, round_half_up, format_mmss

__all__ = [
    "setup_logging",
    "log_error",
    "enable_quiet_mode",
    "disable_quiet_mode",
    "is_quiet_mode_enabled",
    "SYNC_TOPIC",
    "EVENT_SYNC_REQUEST",
    "EVENT_SYNC_RESPONSE",
    "EVENT_SYNC_COMMIT",
    "build_message",
    "generate_session_id",
    "generate_participant_id",
    "current_timestamp",
    "FAILED",
    "guarded_call",
    "system_clock_ms",
    "to_epoch_ms",
    "round_half_up",
    "format_mmss",
]
