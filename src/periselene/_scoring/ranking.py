# Area: Scoring
"""
periselene._scoring.ranking — Leaderboard ordering
==================================================

Strict total order over participants:

1. final score ascending (DQ and unscored count as +inf)
2. earliest registration (missing registration counts as +inf)
3. display name, case-insensitive
4. participant id

The id step makes the order total even for two identical records.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Tuple

from .constants import DEFAULT_RULES, ScoringRules
from .engine import ScoreBreakdown, compute_score

if TYPE_CHECKING:
    from .._mission.state import Participant


@dataclass(frozen=True)
class RankedEntry:
    """One leaderboard row."""
    rank: int
    participant: "Participant"
    breakdown: ScoreBreakdown


def ranking_key(participant: "Participant", breakdown: ScoreBreakdown) -> Tuple[float, float, str, str]:
    registered = participant.registered_at
    return (
        breakdown.sort_value,
        math.inf if registered is None else registered,
        participant.display_name.casefold(),
        participant.id,
    )


def rank_participants(
    participants: Iterable["Participant"],
    rules: ScoringRules = DEFAULT_RULES,
) -> List[RankedEntry]:
    """
    Score and order participants. Ranks start at 1.

    Args:
        participants: Participants to rank
        rules: Scoring constants

    Returns:
        Ranked entries, best first
    """
    scored = [(p, compute_score(p, rules)) for p in participants]
    scored.sort(key=lambda item: ranking_key(item[0], item[1]))
    return [
        RankedEntry(rank=index, participant=participant, breakdown=breakdown)
        for index, (participant, breakdown) in enumerate(scored, start=1)
    ]
