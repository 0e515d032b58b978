# Area: Clock
"""
periselene._clock.engine — Clock Sync Engine
============================================

Keeps one client's estimate of the director's wall clock as a signed
offset applied to the local clock:

    authoritative_now = local_now + offset_ms

The director is the authority, so on the director's own client the
offset is pinned to zero and ``authoritative_now`` is the local clock.

Offsets are replaced, never averaged. The last call wins regardless of
its source; the source is kept only as provenance for the status
indicator and for the passive filter's back-off.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from .._shared.timeutil import LocalClock, system_clock_ms, to_finite_number
from .enums import ClockSource, ClockStatus

logger = logging.getLogger("periselene.clock")

DEFAULT_MAX_OFFSET_MS = 60_000
# SYNCING fades back once probes stop arriving (e.g. an aborted launch)
SYNCING_TIMEOUT_MS = 5_000


@dataclass(frozen=True)
class ClockSyncState:
    """Snapshot of a client's clock correction."""
    offset_ms: int
    last_synced_at: Optional[int]
    source: ClockSource


class ClockSyncEngine:
    """
    Per-client estimate of director time.

    Attributes:
        is_director: True on the director's client (offset always 0)
        max_offset_ms: Corrections are clamped to ±max_offset_ms
    """

    def __init__(
        self,
        is_director: bool = False,
        local_clock: Optional[LocalClock] = None,
        max_offset_ms: int = DEFAULT_MAX_OFFSET_MS,
    ):
        self.is_director = is_director
        self.max_offset_ms = int(max_offset_ms)
        self._local_clock = local_clock or system_clock_ms
        self._offset_ms = 0
        self._source = ClockSource.LOCAL
        self._last_synced_at: Optional[int] = None
        self._syncing_phase: Optional[str] = None
        self._syncing_since: Optional[int] = None
        self._store_reachable = True

    # ── Time ─────────────────────────────────────────────────

    def local_now(self) -> int:
        """Local wall clock in epoch ms."""
        try:
            return int(self._local_clock())
        except Exception:
            logger.error("Local clock failed, using system clock", exc_info=True)
            return system_clock_ms()

    def authoritative_now(self) -> int:
        """Best estimate of the director's wall clock in epoch ms."""
        if self.is_director:
            return self.local_now()
        return self.local_now() + self._offset_ms

    # ── Corrections ──────────────────────────────────────────

    def apply_offset(self, offset_ms: Any, source: ClockSource = ClockSource.BROADCAST_COMMIT) -> bool:
        """
        Replace the offset.

        Args:
            offset_ms: New director-minus-local offset in ms
            source: Provenance of the sample

        Returns:
            True if the offset was applied, False if it was ignored
        """
        if self.is_director:
            logger.debug("Director clock is authoritative; ignoring offset %s", offset_ms)
            return False

        value = to_finite_number(offset_ms)
        if value is None:
            logger.warning(f"Ignoring non-numeric clock offset: {offset_ms!r}")
            return False

        clamped = max(-self.max_offset_ms, min(self.max_offset_ms, int(round(value))))
        if clamped != int(round(value)):
            logger.warning(
                f"Clock offset {int(round(value))}ms clamped to {clamped}ms ({source.value})"
            )

        previous = self._offset_ms
        self._offset_ms = clamped
        self._source = source
        self._last_synced_at = self.local_now()
        if source is ClockSource.BROADCAST_COMMIT:
            self._syncing_phase = None

        logger.info(f"Clock offset {previous}ms → {clamped}ms ({source.value})")
        return True

    def nudge(self, delta_ms: Any, source: ClockSource = ClockSource.POLL_INFERRED) -> bool:
        """Shift the current offset by *delta_ms* (same rules as apply_offset)."""
        delta = to_finite_number(delta_ms)
        if delta is None:
            logger.warning(f"Ignoring non-numeric clock nudge: {delta_ms!r}")
            return False
        return self.apply_offset(self._offset_ms + delta, source)

    def reset(self) -> None:
        """Forget any correction."""
        self._offset_ms = 0
        self._source = ClockSource.LOCAL
        self._last_synced_at = None
        self._syncing_phase = None

    # ── Provenance ───────────────────────────────────────────

    @property
    def offset_ms(self) -> int:
        return 0 if self.is_director else self._offset_ms

    @property
    def source(self) -> ClockSource:
        return self._source

    @property
    def last_synced_at(self) -> Optional[int]:
        return self._last_synced_at

    def state(self) -> ClockSyncState:
        return ClockSyncState(
            offset_ms=self.offset_ms,
            last_synced_at=self._last_synced_at,
            source=self._source,
        )

    def has_recent_commit(self, window_ms: int) -> bool:
        """True if the offset came from a launch commit within *window_ms*."""
        if self._source is not ClockSource.BROADCAST_COMMIT or self._last_synced_at is None:
            return False
        return self.local_now() - self._last_synced_at < window_ms

    # ── Status indicator ─────────────────────────────────────

    def mark_syncing(self, phase: str) -> None:
        """A launch probe arrived; show SYNCING until the commit."""
        self._syncing_phase = phase
        self._syncing_since = self.local_now()

    def mark_store_reachable(self, reachable: bool) -> None:
        if reachable != self._store_reachable:
            if reachable:
                logger.info("Store reachable again")
            else:
                logger.warning("Store unreachable; clock frozen at last offset")
        self._store_reachable = reachable

    @property
    def status(self) -> ClockStatus:
        if not self._store_reachable:
            return ClockStatus.LOST
        if self._is_syncing():
            return ClockStatus.SYNCING
        if self.is_director or self._last_synced_at is not None:
            return ClockStatus.SYNCED
        return ClockStatus.WAITING

    def _is_syncing(self) -> bool:
        if self._syncing_phase is None or self._syncing_since is None:
            return False
        return self.local_now() - self._syncing_since < SYNCING_TIMEOUT_MS

    @property
    def status_text(self) -> str:
        status = self.status
        if status is ClockStatus.SYNCING:
            return f"SYNCING {self._syncing_phase}..."
        return status.value
