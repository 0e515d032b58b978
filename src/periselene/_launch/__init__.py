# Area: Launch
"""
Synchronized launch protocol.

This package contains:
- LaunchCoordinator: director-side ready-check and commit
- Sync handlers and router for both sides of the exchange
- LaunchSession / KnownSessions bookkeeping
- LocalCountdown for the 3-2-1 display
"""

from .broadcast_router import BroadcastRouter
from .coordinator import LaunchCoordinator, LAUNCH_COUNTDOWN_MS, PROBE_INTERVAL_MS
from .countdown import LocalCountdown
from .handler_base import BaseSyncHandler
from .handler_sync_commit import SyncCommitHandler
from .handler_sync_probe import SyncProbeHandler
from .handler_sync_response import SyncResponseHandler
from .session import KnownSessions, LaunchSession

__all__ = [
    "BroadcastRouter",
    "LaunchCoordinator",
    "LAUNCH_COUNTDOWN_MS",
    "PROBE_INTERVAL_MS",
    "LocalCountdown",
    "BaseSyncHandler",
    "SyncCommitHandler",
    "SyncProbeHandler",
    "SyncResponseHandler",
    "KnownSessions",
    "LaunchSession",
]
