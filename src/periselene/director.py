# Area: Director
"""
periselene.director — Director Console
======================================

The director is the only client allowed to change the mission phase.
``DirectorConsole`` ties together the phase state machine, the launch
coordinator and the winner announcement, and performs the
phase-linked participant updates.

Every store and channel call is fire-and-forget: a failure is logged,
the console keeps running and the next tick or request tries again.

Usage:
    console = DirectorConsole(store, channel, config)
    console.bootstrap()
    console.request_phase(MissionPhase.BUILD)   # opens a launch session
    console.handle_sync_launch()                # commits when all ready
    console.tick()                              # call once per second
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple, Union

from ._clock.engine import ClockSyncEngine
from ._launch.broadcast_router import BroadcastRouter
from ._launch.coordinator import LaunchCoordinator
from ._launch.countdown import LocalCountdown
from ._launch.handler_sync_response import SyncResponseHandler
from ._mission.display import PhaseDisplay, compute_display
from ._mission.enums import MissionPhase, ParticipantStatus
from ._mission.state import (
    NEW_HEAT_RESET,
    MissionState,
    Participant,
    PendingLaunch,
    WinnerAnnouncement,
)
from ._mission.state_machine import PhaseStateMachine
from ._reveal.announcement import build_announcement, is_ranking_final, select_winner
from ._scoring.constants import rules_from_config
from ._scoring.ranking import RankedEntry, rank_participants
from ._shared.guarded import FAILED, guarded_call
from ._shared.protocol import EVENT_SYNC_RESPONSE, generate_participant_id
from ._shared.timeutil import LocalClock
from ._store.adapters import BroadcastChannel, StateStore
from .config import mission_key, participant_key, with_defaults
from .errors import InvalidPhaseTransitionError

logger = logging.getLogger("periselene.director")


@dataclass(frozen=True)
class DirectorView:
    """What the director's screen shows on each tick."""
    phase: MissionPhase
    display: PhaseDisplay
    countdown_seconds: Optional[int]
    countdown_label: Optional[str]
    ready: Tuple[int, int]
    is_probing: bool
    clock_status: str


class DirectorConsole:
    """
    Director-side façade over the mission core.

    Attributes:
        config: Effective configuration
        clock: Authoritative clock (offset pinned to 0)
        machine: Phase state machine
        coordinator: Launch coordinator
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
        self.clock = ClockSyncEngine(is_director=True, local_clock=clock)
        self.machine = PhaseStateMachine()
        self.countdown = LocalCountdown()
        self.rules = rules_from_config(self.config)
        self.coordinator = LaunchCoordinator(
            channel,
            self.clock,
            topic=self.config["sync_topic"],
            probe_interval_ms=self.config["probe_interval_ms"],
            countdown_ms=self.config["launch_countdown_ms"],
        )
        self.router = BroadcastRouter()
        self.router.register_handler(EVENT_SYNC_RESPONSE, SyncResponseHandler(self.coordinator))
        self._mission_key = mission_key(self.config)

    @property
    def state(self) -> MissionState:
        return self.machine.state

    # ── Lifecycle ────────────────────────────────────────────

    def bootstrap(self) -> MissionState:
        """
        Adopt the stored mission record, creating it (IDLE) if missing,
        and start listening for sync responses.
        """
        record = guarded_call("store.read", self.store.read, self._mission_key, default=FAILED)
        if record is FAILED:
            self.clock.mark_store_reachable(False)
        elif record is None:
            logger.info(f"Creating mission record {self._mission_key.table}/{self._mission_key.record_id}")
            self.machine.state = MissionState(updated_at=self.clock.authoritative_now())
            self._write_mission()
        else:
            self.machine.replace(MissionState.from_record(record))
            logger.info(f"Resuming mission in {self.machine.phase.value}")

        if self.channel is not None:
            self.router.attach(self.channel, self.config["sync_topic"])
        else:
            logger.warning("No broadcast channel; launches run without clock sync")
        return self.machine.state

    def close(self) -> None:
        """Stop listening on the channel."""
        self.router.detach()

    # ── Participants ─────────────────────────────────────────

    def register_participant(
        self, display_name: str, participant_id: Optional[str] = None,
    ) -> Optional[Participant]:
        """
        Create a participant record (status WAITING).

        Returns:
            The participant, or None if the store write failed
        """
        participant = Participant(
            id=participant_id or generate_participant_id(),
            display_name=display_name.strip(),
            registered_at=self.clock.authoritative_now(),
        )
        key = participant_key(self.config, participant.id)
        if guarded_call("store.upsert", self.store.upsert, key, participant.to_record(),
                        default=FAILED) is FAILED:
            return None
        logger.info(f"Registered {participant.display_name} ({participant.id})")
        return participant

    def participants(self) -> List[Participant]:
        """All participants in registration order; empty if unreachable."""
        records = guarded_call(
            "store.read_all", self.store.read_all, self.config["participants_table"], default=[],
        )
        return [Participant.from_record(r) for r in records]

    # ── Phase control ────────────────────────────────────────

    def request_phase(self, target: Union[MissionPhase, str], sync: bool = True) -> bool:
        """
        Ask for a phase change.

        With ``sync`` the change waits for a launch (ready-check, commit,
        countdown); without it the change happens now. IDLE is always
        immediate.

        A synced request is refused while a committed launch is still
        counting down, and when the roster cannot be read (the ready-check
        would otherwise expect nobody).

        Returns:
            False if the transition is not legal from the current phase,
            a launch is already pending or the roster is unreachable
        """
        if isinstance(target, str):
            parsed = _phase_from_label(target.strip().upper())
            if parsed is None:
                logger.warning(f"Refusing unknown phase request: {target!r}")
                return False
            target = parsed
        if not self.machine.can_transition(target):
            logger.warning(f"Refusing phase request {self.machine.phase.value} → {target.value}")
            return False

        if target is MissionPhase.IDLE:
            return self.stop()
        if sync:
            pending = self.machine.state.pending_launch
            if pending is not None:
                logger.warning(f"Launch of {pending.label} already pending; abort it first")
                return False
            records = guarded_call(
                "store.read_all", self.store.read_all, self.config["participants_table"],
                default=FAILED,
            )
            if records is FAILED:
                self.clock.mark_store_reachable(False)
                logger.warning(f"Roster unavailable; {target.value} launch not opened")
                return False
            self.clock.mark_store_reachable(True)
            expected = [Participant.from_record(r).id for r in records]
            self.coordinator.open_session(target, expected)
            return True
        self.coordinator.close()
        return self._enter_phase(target)

    def ready_status(self) -> Tuple[int, int]:
        """(ready, total) for the open launch session."""
        return self.coordinator.ready_status()

    def handle_sync_launch(self, force: bool = False) -> bool:
        """
        Commit the open launch session and write the pending launch.

        A no-op unless every expected participant answered or *force*.

        Returns:
            True if the launch was committed
        """
        session = self.coordinator.session
        if session is not None and not self.machine.can_transition(session.phase):
            logger.warning(f"Phase moved on; dropping launch of {session.phase.value}")
            self.coordinator.close()
            return False

        session = self.coordinator.commit(force=force)
        if session is None:
            return False

        pending = PendingLaunch(ends_at=session.ends_at, label=session.phase.value)
        self.machine.state = replace(
            self.machine.state, pending_launch=pending, updated_at=session.committed_at,
        )
        self._write_mission()
        self.countdown.start(pending.ends_at, pending.label)
        return True

    def abort_launch(self) -> bool:
        """
        Cancel a launch before the phase changes.

        Returns:
            True if there was a session or pending launch to cancel
        """
        had_launch = self.coordinator.session is not None or self.machine.state.pending_launch is not None
        self.coordinator.close()
        self.countdown.cancel()
        if self.machine.state.pending_launch is not None:
            self.machine.state = replace(
                self.machine.state, pending_launch=None,
                updated_at=self.clock.authoritative_now(),
            )
            self._write_mission()
        if had_launch:
            logger.info("Launch aborted")
        return had_launch

    def stop(self) -> bool:
        """Force IDLE, dropping any launch in progress."""
        self.coordinator.close()
        self.countdown.cancel()
        self.machine.transition(MissionPhase.IDLE, self.clock.authoritative_now())
        self._write_mission()
        return True

    def tick(self) -> DirectorView:
        """
        Drive probing and finalize a due launch. Call about once a second.
        """
        self.coordinator.tick()

        pending = self.machine.state.pending_launch
        now = self.clock.authoritative_now()
        if pending is not None and now >= pending.ends_at:
            session = self.coordinator.session
            target = session.phase if session is not None else _phase_from_label(pending.label)
            self.coordinator.close()
            if target is None or not self._enter_phase(target):
                logger.warning(f"Stale pending launch '{pending.label}' cleared")
                self.machine.state = replace(self.machine.state, pending_launch=None, updated_at=now)
                self._write_mission()
        return self.view()

    def view(self) -> DirectorView:
        now = self.clock.authoritative_now()
        state = self.machine.state
        label = self.countdown.label
        seconds = self.countdown.remaining_seconds(now)
        return DirectorView(
            phase=state.phase,
            display=compute_display(
                state.phase, state.phase_started_at, now,
                self.config["build_duration_seconds"], self.config["alert_threshold_seconds"],
            ),
            countdown_seconds=seconds,
            countdown_label=label if seconds is not None else None,
            ready=self.coordinator.ready_status(),
            is_probing=self.coordinator.is_probing,
            clock_status=self.clock.status_text,
        )

    # ── Heats and results ────────────────────────────────────

    def new_heat(self) -> int:
        """
        Reset every participant, force IDLE and clear the winner.

        Returns:
            Number of participant records reset
        """
        reset = 0
        for participant in self.participants():
            key = participant_key(self.config, participant.id)
            if guarded_call("store.upsert", self.store.upsert, key, dict(NEW_HEAT_RESET),
                            default=FAILED) is not FAILED:
                reset += 1

        self.coordinator.close()
        self.countdown.cancel()
        self.machine.state = MissionState(updated_at=self.clock.authoritative_now())
        self._write_mission()
        logger.info(f"New heat: {reset} participants reset")
        return reset

    def leaderboard(self) -> List[RankedEntry]:
        return rank_participants(self.participants(), self.rules)

    def announce_winner(self, force: bool = False) -> Optional[WinnerAnnouncement]:
        """
        Announce rank 1 to every client.

        Args:
            force: Announce even if some flyers have not landed

        Returns:
            The announcement, or None if the ranking is not final or
            nobody has a numeric score
        """
        participants = self.participants()
        if not force and not is_ranking_final(participants):
            logger.info("Ranking not final; winner not announced")
            return None

        winner = select_winner(rank_participants(participants, self.rules))
        if winner is None:
            logger.info("No scored participant; winner not announced")
            return None

        now = self.clock.authoritative_now()
        announcement = build_announcement(winner, now)
        self.machine.state = replace(self.machine.state, winner_announcement=announcement, updated_at=now)
        self._write_mission()
        logger.info(f"Winner: {winner.participant.display_name} ({winner.breakdown.final_score_label})")
        return announcement

    def stats(self) -> Dict[str, Any]:
        """Headcounts by status and the share of clean landings."""
        participants = self.participants()
        total = len(participants)
        counts = {status: 0 for status in ParticipantStatus}
        for participant in participants:
            counts[participant.status] += 1
        disqualified = sum(1 for p in participants if p.is_disqualified)
        clean_landings = sum(
            1 for p in participants
            if p.status is ParticipantStatus.LANDED and not p.is_disqualified
        )
        return {
            "total": total,
            "waiting": counts[ParticipantStatus.WAITING],
            "building": counts[ParticipantStatus.BUILDING],
            "flying": counts[ParticipantStatus.FLYING],
            "landed": counts[ParticipantStatus.LANDED],
            "disqualified": disqualified,
            "success_rate": clean_landings / total if total else 0.0,
        }

    # ── Internals ────────────────────────────────────────────

    def _enter_phase(self, target: MissionPhase) -> bool:
        try:
            state = self.machine.transition(target, self.clock.authoritative_now())
        except InvalidPhaseTransitionError as e:
            logger.warning(str(e))
            return False
        self.countdown.cancel()
        self._write_mission()
        self._apply_phase_effects(target, state.phase_started_at)
        return True

    def _apply_phase_effects(self, phase: MissionPhase, started_at: Optional[int]) -> None:
        """Bulk participant updates that follow a phase change."""
        for participant in self.participants():
            fields: Dict[str, Any] = {}
            if phase is MissionPhase.BUILD:
                if participant.status is ParticipantStatus.WAITING:
                    fields["status"] = ParticipantStatus.BUILDING.value
            elif phase is MissionPhase.FLIGHT:
                fields["flight_start"] = started_at
                if participant.status in (ParticipantStatus.WAITING, ParticipantStatus.BUILDING):
                    fields["status"] = ParticipantStatus.FLYING.value
            if fields:
                key = participant_key(self.config, participant.id)
                guarded_call("store.upsert", self.store.upsert, key, fields)

    def _write_mission(self) -> bool:
        ok = guarded_call(
            "store.upsert", self.store.upsert, self._mission_key,
            self.machine.state.to_record(), default=FAILED,
        ) is not FAILED
        self.clock.mark_store_reachable(ok)
        return ok


def _phase_from_label(label: str) -> Optional[MissionPhase]:
    try:
        return MissionPhase(label)
    except ValueError:
        return None
