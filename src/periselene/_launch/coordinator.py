# Area: Launch
"""
periselene._launch.coordinator — Synchronized Launch Coordinator
================================================================

Director side of the ready-check → countdown → commit protocol:

1. ``open_session`` picks a fresh session id and starts probing once
   per ``probe_interval_ms`` with the director's local time.
2. Participants answer with their measured offset; replies are
   recorded per session, keyed by participant id.
3. ``commit`` stops probing and broadcasts every collected offset
   plus the countdown end instant. Unless forced, it only proceeds
   once every participant expected at session open has answered.

Broadcasts are fire-and-forget. The store write of the pending launch
and the final phase mutation belong to the director console.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from .._clock.engine import ClockSyncEngine
from .._mission.enums import MissionPhase
from .._shared.guarded import guarded_call
from .._shared.protocol import (
    SYNC_TOPIC,
    build_sync_commit,
    build_sync_probe,
    generate_session_id,
)
from .._store.adapters import BroadcastChannel
from .session import LaunchSession

logger = logging.getLogger("periselene.launch.coordinator")

PROBE_INTERVAL_MS = 1_000
LAUNCH_COUNTDOWN_MS = 3_000


class LaunchCoordinator:
    """
    Runs launch sessions for the director.

    Attributes:
        session: The open session, if any
        probe_interval_ms: Gap between probes
        countdown_ms: Lead time from commit to phase change
    """

    def __init__(
        self,
        channel: Optional[BroadcastChannel],
        clock: ClockSyncEngine,
        topic: str = SYNC_TOPIC,
        probe_interval_ms: int = PROBE_INTERVAL_MS,
        countdown_ms: int = LAUNCH_COUNTDOWN_MS,
    ):
        self.channel = channel
        self.clock = clock
        self.topic = topic
        self.probe_interval_ms = probe_interval_ms
        self.countdown_ms = countdown_ms
        self.session: Optional[LaunchSession] = None
        self._probing = False
        self._last_probe_at: Optional[int] = None

    @property
    def is_probing(self) -> bool:
        return self._probing

    def open_session(self, phase: MissionPhase, expected_ids: Iterable[str]) -> LaunchSession:
        """
        Open a new session, replacing any previous one, and probe at once.

        Args:
            phase: Phase being launched
            expected_ids: Participants registered right now

        Returns:
            The new session
        """
        if self.session is not None and not self.session.is_committed:
            logger.info(f"Replacing open launch session {self.session.session_id}")

        now = self.clock.authoritative_now()
        self.session = LaunchSession(
            session_id=generate_session_id(),
            phase=phase,
            opened_at=now,
            expected_ids=frozenset(expected_ids),
        )
        self._probing = True
        logger.info(
            f"Launch session {self.session.session_id} opened for {phase.value} "
            f"({len(self.session.expected_ids)} expected)"
        )
        self._send_probe(now)
        return self.session

    def tick(self) -> bool:
        """
        Send a probe if one is due.

        Returns:
            True if a probe was sent
        """
        if not self._probing or self.session is None:
            return False
        now = self.clock.authoritative_now()
        if self._last_probe_at is not None and now - self._last_probe_at < self.probe_interval_ms:
            return False
        self._send_probe(now)
        return True

    def record_response(self, session_id: str, participant_id: str, offset_ms: int) -> bool:
        """
        Record a participant's reply for the open session.

        Returns:
            False if the reply is for another session or arrived after commit
        """
        session = self.session
        if session is None or session.session_id != session_id:
            logger.debug(f"Ignoring sync response for stale session {session_id}")
            return False
        if session.is_committed:
            logger.debug(f"Ignoring late sync response from {participant_id}")
            return False
        if session.record_response(participant_id, offset_ms):
            ready, total = session.ready_status()
            logger.info(f"Sync response from {participant_id} ({ready}/{total} ready)")
        return True

    def ready_status(self) -> Tuple[int, int]:
        """(ready, total) for the open session; (0, 0) when none."""
        if self.session is None:
            return 0, 0
        return self.session.ready_status()

    def commit(self, force: bool = False) -> Optional[LaunchSession]:
        """
        Commit the open session.

        Args:
            force: Launch even if some expected participants never answered

        Returns:
            The committed session (with ``ends_at`` set), or None if
            there is nothing to commit or not everyone is ready
        """
        session = self.session
        if session is None:
            logger.warning("No launch session to commit")
            return None
        if session.is_committed:
            logger.debug(f"Session {session.session_id} already committed")
            return None

        ready, total = session.ready_status()
        if not session.all_ready and not force:
            logger.info(f"Launch held: {ready}/{total} ready")
            return None
        if not session.all_ready:
            logger.warning(f"Force launch with {ready}/{total} ready")

        self._probing = False
        now = self.clock.authoritative_now()
        session.committed_at = now
        session.ends_at = now + self.countdown_ms

        self._publish(build_sync_commit(
            session.session_id,
            session.phase.value,
            session.offsets,
            committed_at=now,
            ends_at=session.ends_at,
        ))
        logger.info(f"Launch {session.phase.value} committed, T0 at {session.ends_at}")
        return session

    def close(self) -> None:
        """Forget the session and stop probing."""
        if self.session is not None:
            logger.debug(f"Launch session {self.session.session_id} closed")
        self.session = None
        self._probing = False
        self._last_probe_at = None

    def _send_probe(self, now: int) -> None:
        session = self.session
        self._last_probe_at = now
        self._publish(build_sync_probe(session.session_id, session.phase.value, now))

    def _publish(self, message) -> None:
        if self.channel is None:
            return
        guarded_call("channel.publish", self.channel.publish, self.topic, message)
