# Area: Reveal
"""
periselene._reveal.announcement — Winner announcement payloads
==============================================================

Decides whether a ranking is final and builds the winner summary the
director writes into the mission record. Every client reads the
summary from there, so it carries everything the winner panel shows.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from .._mission.enums import ParticipantStatus
from .._mission.state import Participant, WinnerAnnouncement
from .._scoring.ranking import RankedEntry


def is_ranking_final(participants: Iterable[Participant]) -> bool:
    """
    True when every participant that took part in the flight is done.

    Taking part means having a flight start or being FLYING. Done
    means LANDED or disqualified.
    """
    for participant in participants:
        if not participant.took_part_in_flight:
            continue
        if participant.status is not ParticipantStatus.LANDED and not participant.is_disqualified:
            return False
    return True


def select_winner(ranking: List[RankedEntry]) -> Optional[RankedEntry]:
    """Rank 1, provided it has a numeric score."""
    if not ranking or ranking[0].breakdown.final_score is None:
        return None
    return ranking[0]


def build_winner_summary(entry: RankedEntry) -> Dict[str, Any]:
    """Winner panel payload for a ranked entry."""
    b = entry.breakdown
    return {
        "participant_id": entry.participant.id,
        "display_name": entry.participant.display_name,
        "rank": entry.rank,
        "flight_seconds": b.flight_seconds,
        "flight_label": b.flight_label,
        "final_score": b.final_score,
        "final_score_label": b.final_score_label,
        "bonuses": {
            "budget_bonus": b.budget_bonus or 0,
            "rover_bonus": b.rover_bonus,
            "return_bonus": b.return_bonus,
            "aesthetics_bonus": b.aesthetics_bonus,
        },
        "penalties": {
            "landing_adjustment": b.landing_adjustment or 0,
            "extra_penalty": b.extra_penalty,
        },
        "total_bonus": b.total_bonus,
        "total_penalty": b.total_penalty,
    }


def build_announcement(entry: RankedEntry, announced_at: int) -> WinnerAnnouncement:
    return WinnerAnnouncement(winner=build_winner_summary(entry), announced_at=announced_at)
