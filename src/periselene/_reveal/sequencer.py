# Area: Reveal
"""
periselene._reveal.sequencer — Winner Reveal Sequencer
======================================================

    NONE → ANNOUNCED(winner, announced_at) → REVEALED

Every client counts down to ``announced_at + reveal_delay_ms`` on its
authoritative clock, so the results open at the same instant
everywhere without a second protocol. Until then only the "locking
results" countdown is shown, never the result itself.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .._clock.engine import ClockSyncEngine
from .._mission.state import WinnerAnnouncement
from .._scoring.engine import ScoreBreakdown

logger = logging.getLogger("periselene.reveal")

REVEAL_DELAY_MS = 5_000


class RevealState(Enum):
    NONE = "NONE"
    ANNOUNCED = "ANNOUNCED"
    REVEALED = "REVEALED"


@dataclass(frozen=True)
class RevealView:
    """
    What a client shows for the winner reveal.

    ``winner`` and ``comparison`` are only filled once REVEALED.
    ``comparison`` is None for the winner's own client.
    """
    state: RevealState
    seconds_remaining: Optional[int] = None
    winner: Optional[Dict[str, Any]] = None
    is_winner: bool = False
    comparison: Optional[Dict[str, Any]] = None


class WinnerRevealSequencer:
    """
    Per-client reveal state, driven by the mission record.

    Attributes:
        viewer_id: Participant id of this client, if it is a pilot
        reveal_delay_ms: Gap between announcement and reveal
    """

    def __init__(
        self,
        clock: ClockSyncEngine,
        viewer_id: Optional[str] = None,
        reveal_delay_ms: int = REVEAL_DELAY_MS,
    ):
        self.clock = clock
        self.viewer_id = viewer_id
        self.reveal_delay_ms = reveal_delay_ms
        self.announcement: Optional[WinnerAnnouncement] = None

    def observe(self, announcement: Optional[WinnerAnnouncement]) -> bool:
        """
        Feed the announcement from the latest mission record.

        Returns:
            True if the sequence restarted or was cleared
        """
        current_key = self.announcement.key if self.announcement else None
        new_key = announcement.key if announcement else None
        if current_key == new_key:
            return False

        self.announcement = announcement
        if announcement is None:
            logger.info("Winner announcement cleared")
        else:
            logger.info(
                f"Winner announced: {announcement.winner.get('display_name')} "
                f"at {announcement.announced_at}"
            )
        return True

    @property
    def state(self) -> RevealState:
        if self.announcement is None:
            return RevealState.NONE
        if self.remaining_ms() > 0:
            return RevealState.ANNOUNCED
        return RevealState.REVEALED

    def remaining_ms(self) -> int:
        if self.announcement is None:
            return 0
        reveal_at = self.announcement.announced_at + self.reveal_delay_ms
        return reveal_at - self.clock.authoritative_now()

    def view(self, own: Optional[ScoreBreakdown] = None) -> RevealView:
        """
        Derive the reveal view.

        Args:
            own: This viewer's own score, for the comparison panel

        Returns:
            RevealView
        """
        if self.announcement is None:
            return RevealView(RevealState.NONE)

        remaining = self.remaining_ms()
        if remaining > 0:
            return RevealView(RevealState.ANNOUNCED, seconds_remaining=math.ceil(remaining / 1000))

        winner = dict(self.announcement.winner)
        is_winner = bool(self.viewer_id) and winner.get("participant_id") == self.viewer_id
        comparison = None
        if not is_winner and own is not None:
            comparison = build_comparison(winner, own)
        return RevealView(
            RevealState.REVEALED,
            seconds_remaining=0,
            winner=winner,
            is_winner=is_winner,
            comparison=comparison,
        )

    def reset(self) -> None:
        self.announcement = None


def build_comparison(winner: Dict[str, Any], own: ScoreBreakdown) -> Dict[str, Any]:
    """Side-by-side of the winner's summary and this viewer's score."""
    winner_score = winner.get("final_score")
    gap = None
    if winner_score is not None and own.final_score is not None:
        gap = own.final_score - winner_score
    return {
        "winner_score_label": winner.get("final_score_label"),
        "own_score_label": own.final_score_label,
        "winner_flight_label": winner.get("flight_label"),
        "own_flight_label": own.flight_label,
        "winner_total_bonus": winner.get("total_bonus"),
        "own_total_bonus": own.total_bonus,
        "winner_total_penalty": winner.get("total_penalty"),
        "own_total_penalty": own.total_penalty,
        "gap_seconds": gap,
    }
