# Area: Client
"""
periselene.client — Mission and Participant clients
===================================================

Every non-director screen runs a ``MissionClient``. Three independent
triggers feed it:

- ``poll()`` on a fixed interval (the reliability backstop)
- store push notifications (best effort, may be dropped)
- broadcast sync messages

Both store triggers go through one idempotent reconciler. ``tick()``
derives what to show from the authoritative clock and is meant to run
at 1 Hz regardless of when the store was last read.

``ParticipantClient`` adds the pilot's side of the launch protocol,
status clamping of its own record, and landing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ._clock.engine import ClockSyncEngine
from ._clock.passive_filter import PassiveOffsetFilter
from ._launch.broadcast_router import BroadcastRouter
from ._launch.countdown import LocalCountdown
from ._launch.handler_sync_commit import SyncCommitHandler
from ._launch.handler_sync_probe import SyncProbeHandler
from ._launch.session import KnownSessions
from ._mission.display import PhaseDisplay, compute_display
from ._mission.enums import MissionPhase, ParticipantStatus
from ._mission.reconciler import MissionReconciler, ReconcileResult
from ._mission.state import Participant
from ._mission.state_machine import PhaseStateMachine
from ._mission.status import reconcile_status
from ._reveal.sequencer import RevealView, WinnerRevealSequencer
from ._scoring.constants import rules_from_config
from ._scoring.engine import ScoreBreakdown, compute_score
from ._shared.guarded import FAILED, guarded_call
from ._shared.protocol import EVENT_SYNC_COMMIT, EVENT_SYNC_REQUEST
from ._shared.timeutil import LocalClock, round_half_up
from ._store.adapters import BroadcastChannel, StateStore, Unsubscribe
from .config import mission_key, participant_key, with_defaults
from .errors import ConfigError

logger = logging.getLogger("periselene.client")


@dataclass(frozen=True)
class ClientView:
    """What a client shows on each tick."""
    phase: MissionPhase
    display: PhaseDisplay
    countdown_seconds: Optional[int]
    countdown_label: Optional[str]
    reveal: RevealView
    clock_status: str
    status: Optional[ParticipantStatus] = None


class MissionClient:
    """
    Read-side client for spectators and judges' screens.

    Attributes:
        config: Effective configuration
        clock: This client's estimate of director time
        machine: Local copy of the mission phase
        countdown: Local launch countdown
        reveal: Winner reveal sequencer
    """

    def __init__(
        self,
        store: StateStore,
        channel: Optional[BroadcastChannel] = None,
        config: Optional[Dict[str, Any]] = None,
        clock: Optional[LocalClock] = None,
    ):
        self.config = with_defaults(config)
        self.store = store
        self.channel = channel
        self.rules = rules_from_config(self.config)
        self.clock = ClockSyncEngine(
            is_director=False, local_clock=clock, max_offset_ms=self.config["max_offset_ms"],
        )
        self.machine = PhaseStateMachine()
        self.countdown = LocalCountdown()
        self.passive_filter = PassiveOffsetFilter(
            self.clock,
            active_sync_trust_ms=self.config["active_sync_trust_ms"],
            expected_lead_ms=self.config["launch_countdown_ms"],
        )
        self.reveal = WinnerRevealSequencer(
            self.clock, reveal_delay_ms=self.config["reveal_delay_ms"],
        )
        self.reconciler = MissionReconciler(
            self.machine, self.countdown, self.reveal, self.passive_filter,
        )
        self.router = BroadcastRouter()
        self._mission_key = mission_key(self.config)
        self._unsubscribe_store: Optional[Unsubscribe] = None
        self._register_handlers()

    def _register_handlers(self) -> None:
        """Spectators do not take part in the launch protocol."""

    # ── Lifecycle ────────────────────────────────────────────

    def start(self) -> None:
        """Subscribe to store and channel, then read once."""
        self._unsubscribe_store = guarded_call(
            "store.subscribe", self.store.subscribe,
            self._mission_key.table, self._on_mission_change,
        )
        if self._unsubscribe_store is None:
            logger.warning("Store push unavailable; relying on polling")

        if self.channel is None:
            logger.info("No broadcast channel; passive clock inference only")
        else:
            self.router.attach(self.channel, self.config["sync_topic"])

        self.poll()

    def stop(self) -> None:
        """Drop subscriptions."""
        if self._unsubscribe_store is not None:
            guarded_call("store.unsubscribe", self._unsubscribe_store)
            self._unsubscribe_store = None
        self.router.detach()

    # ── Triggers ─────────────────────────────────────────────

    def poll(self) -> ReconcileResult:
        """Read the mission record and reconcile."""
        record = guarded_call("store.read", self.store.read, self._mission_key, default=FAILED)
        if record is FAILED:
            self.clock.mark_store_reachable(False)
            return ReconcileResult()
        self.clock.mark_store_reachable(True)
        return self.reconciler.reconcile(record)

    def _on_mission_change(self, change: Dict[str, Any]) -> None:
        if change.get("record_id") != self._mission_key.record_id:
            return
        record = change.get("record")
        if record:
            self.reconciler.reconcile(record)

    def tick(self) -> ClientView:
        """Derive the current view from the authoritative clock."""
        now = self.clock.authoritative_now()
        state = self.machine.state
        label = self.countdown.label
        seconds = self.countdown.remaining_seconds(now)
        return ClientView(
            phase=state.phase,
            display=compute_display(
                state.phase, state.phase_started_at, now,
                self.config["build_duration_seconds"], self.config["alert_threshold_seconds"],
            ),
            countdown_seconds=seconds,
            countdown_label=label if seconds is not None else None,
            reveal=self.reveal.view(self._own_breakdown()),
            clock_status=self.clock.status_text,
            status=self._own_status(),
        )

    def _own_breakdown(self) -> Optional[ScoreBreakdown]:
        return None

    def _own_status(self) -> Optional[ParticipantStatus]:
        return None


class ParticipantClient(MissionClient):
    """
    A pilot's client.

    Answers launch probes, applies committed offsets, shows its own
    status clamped to the mission phase, and records its landing.
    """

    def __init__(
        self,
        store: StateStore,
        channel: Optional[BroadcastChannel] = None,
        config: Optional[Dict[str, Any]] = None,
        clock: Optional[LocalClock] = None,
        participant_id: Optional[str] = None,
        display_name: str = "",
    ):
        merged = with_defaults(config)
        self.participant_id = participant_id or merged.get("participant_id")
        if not self.participant_id:
            raise ConfigError(["participant_id is required for a participant client"])
        self.display_name = display_name or merged.get("display_name") or ""
        self.participant: Optional[Participant] = None
        self.sessions = KnownSessions()
        super().__init__(store, channel, merged, clock)
        self.reveal.viewer_id = self.participant_id
        self._participant_key = participant_key(self.config, self.participant_id)

    def _register_handlers(self) -> None:
        self.probe_handler = SyncProbeHandler(
            self.clock, self.sessions, self.participant_id, self.display_name,
        )
        self.router.register_handler(EVENT_SYNC_REQUEST, self.probe_handler)
        self.router.register_handler(EVENT_SYNC_COMMIT, SyncCommitHandler(
            self.clock,
            self.sessions,
            self.countdown,
            self.participant_id,
            countdown_ms=self.config["launch_countdown_ms"],
        ))

    def poll(self) -> ReconcileResult:
        result = super().poll()
        self.refresh()
        return result

    def refresh(self) -> Optional[Participant]:
        """Re-read this participant's own record."""
        record = guarded_call("store.read", self.store.read, self._participant_key, default=FAILED)
        if record is FAILED:
            return self.participant
        if record is None:
            logger.warning(f"No participant record for {self.participant_id}")
            return self.participant

        self.participant = Participant.from_record(record)
        if self.participant.display_name:
            self.display_name = self.participant.display_name
            self.probe_handler.display_name = self.display_name
        return self.participant

    @property
    def status(self) -> ParticipantStatus:
        """Own status as shown: the stored status clamped to the phase."""
        stored = self.participant.status if self.participant else ParticipantStatus.WAITING
        shown = reconcile_status(stored, self.machine.phase)
        if shown is not stored:
            logger.debug(f"Status {stored.value} shown as {shown.value} during {self.machine.phase.value}")
        return shown

    def land(self) -> bool:
        """
        Record this participant's landing.

        Legal while the phase is FLIGHT or the stored status is FLYING,
        and not after landing already.

        Returns:
            True if the landing was written
        """
        stored = self.participant.status if self.participant else None
        if stored is ParticipantStatus.LANDED:
            logger.info("Already landed")
            return False
        if self.machine.phase is not MissionPhase.FLIGHT and stored is not ParticipantStatus.FLYING:
            logger.warning(f"Cannot land during {self.machine.phase.value}")
            return False

        start = self.participant.flight_start if self.participant else None
        if start is None:
            start = self.machine.phase_started_at
        if start is None:
            logger.warning("Cannot land: flight start unknown")
            return False

        duration = max(0, round_half_up((self.clock.authoritative_now() - start) / 1000))
        fields = {
            "status": ParticipantStatus.LANDED.value,
            "land_time": start + duration * 1000,
            "flight_duration": duration,
        }
        if guarded_call("store.upsert", self.store.upsert, self._participant_key, fields,
                        default=FAILED) is FAILED:
            return False

        if self.participant is None:
            self.participant = Participant(id=self.participant_id, display_name=self.display_name)
        self.participant.status = ParticipantStatus.LANDED
        self.participant.land_time = fields["land_time"]
        self.participant.flight_duration = duration
        if self.participant.flight_start is None:
            self.participant.flight_start = start
        logger.info(f"Landed after {duration}s")
        return True

    def _own_breakdown(self) -> Optional[ScoreBreakdown]:
        if self.participant is None:
            return None
        return compute_score(self.participant, self.rules)

    def _own_status(self) -> Optional[ParticipantStatus]:
        return self.status
