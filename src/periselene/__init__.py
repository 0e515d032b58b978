"""
periselene — Mission control core for timed build-and-fly competitions
======================================================================

One director drives a shared mission clock (IDLE → BUILD → FLIGHT);
pilots, judges and spectators keep a consistent countdown through a
clock offset, agree on launch instants through a short sync protocol,
and see a deterministic ranking.

Quick Start (single process, in-memory adapters):
    from periselene import (
        DirectorConsole, ParticipantClient, InMemoryStateStore,
        InMemoryBroadcastChannel, MissionPhase,
    )
    store, channel = InMemoryStateStore(), InMemoryBroadcastChannel()
    director = DirectorConsole(store, channel)
    director.bootstrap()
    pilot = director.register_participant("Eagle")
    client = ParticipantClient(store, channel, participant_id=pilot.id)
    client.start()
    director.request_phase(MissionPhase.BUILD)   # probes; the pilot answers
    director.handle_sync_launch()   # commit; countdown starts everywhere

Adapters
--------
The core talks to a ``StateStore`` and a ``BroadcastChannel``; any
object with their methods works. In-memory and SQLite implementations
are included.
"""

from ._clock import ClockSource, ClockStatus, ClockSyncEngine, ClockSyncState, PassiveOffsetFilter
from ._launch import LaunchCoordinator, LaunchSession, LocalCountdown
from ._mission import (
    MISSION_STATE_KEY,
    MissionPhase,
    MissionState,
    Participant,
    ParticipantStatus,
    PendingLaunch,
    PhaseDisplay,
    PhaseStateMachine,
    WinnerAnnouncement,
    compute_display,
    reconcile_status,
)
from ._mission.reconciler import MissionReconciler, ReconcileResult
from ._reveal import RevealState, RevealView, WinnerRevealSequencer, is_ranking_final
from ._scoring import (
    DEFAULT_RULES,
    LandingGrade,
    RankedEntry,
    ScoreBreakdown,
    ScoringInputs,
    ScoringRules,
    compute_score,
    rank_participants,
    sanitize_scoring,
)
from ._shared import setup_logging, enable_quiet_mode, disable_quiet_mode, log_error
from ._store import (
    BroadcastChannel,
    InMemoryBroadcastChannel,
    InMemoryStateStore,
    RecordKey,
    SqliteStateStore,
    StateStore,
)
from .client import ClientView, MissionClient, ParticipantClient
from .config import DEFAULT_CONFIG, load_config, validate_config
from .director import DirectorConsole, DirectorView
from .errors import (
    PeriseleneError,
    InvalidPhaseTransitionError,
    AdapterUnavailableError,
    ScoringInputError,
    ConfigError,
)
from .judge import JudgeDesk
from .runner import MissionRunner
from .types import (
    SyncProbe,
    SyncResponse,
    SyncCommit,
    PendingLaunchRecord,
    WinnerSummary,
    WinnerAnnouncementRecord,
    MissionStateRecord,
    ParticipantRecord,
)

__all__ = [
    # Façades
    "DirectorConsole",
    "DirectorView",
    "MissionClient",
    "ParticipantClient",
    "ClientView",
    "JudgeDesk",
    "MissionRunner",
    # Clock
    "ClockSource",
    "ClockStatus",
    "ClockSyncEngine",
    "ClockSyncState",
    "PassiveOffsetFilter",
    # Mission
    "MISSION_STATE_KEY",
    "MissionPhase",
    "MissionState",
    "Participant",
    "ParticipantStatus",
    "PendingLaunch",
    "PhaseDisplay",
    "PhaseStateMachine",
    "WinnerAnnouncement",
    "compute_display",
    "reconcile_status",
    "MissionReconciler",
    "ReconcileResult",
    # Launch
    "LaunchCoordinator",
    "LaunchSession",
    "LocalCountdown",
    # Scoring
    "DEFAULT_RULES",
    "LandingGrade",
    "RankedEntry",
    "ScoreBreakdown",
    "ScoringInputs",
    "ScoringRules",
    "compute_score",
    "rank_participants",
    "sanitize_scoring",
    # Reveal
    "RevealState",
    "RevealView",
    "WinnerRevealSequencer",
    "is_ranking_final",
    # Adapters
    "BroadcastChannel",
    "StateStore",
    "RecordKey",
    "InMemoryBroadcastChannel",
    "InMemoryStateStore",
    "SqliteStateStore",
    # Config and logging
    "DEFAULT_CONFIG",
    "load_config",
    "validate_config",
    "setup_logging",
    "log_error",
    "enable_quiet_mode",
    "disable_quiet_mode",
    # Errors
    "PeriseleneError",
    "InvalidPhaseTransitionError",
    "AdapterUnavailableError",
    "ScoringInputError",
    "ConfigError",
    # Wire types
    "SyncProbe",
    "SyncResponse",
    "SyncCommit",
    "PendingLaunchRecord",
    "WinnerSummary",
    "WinnerAnnouncementRecord",
    "MissionStateRecord",
    "ParticipantRecord",
]
__version__ = "1.0.0"
