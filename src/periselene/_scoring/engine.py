# Area: Scoring
"""
periselene._scoring.engine — Score computation
==============================================

Pure function from one participant's record to a full score
breakdown. Lower is better: the score is flight time in seconds,
minus bonuses, plus penalties.

    final = flight - budget_bonus - mission_bonus + landing + extra

A disqualified participant has no numeric score ("DQ"); one without a
flight time is not yet scored ("---").
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .._shared.timeutil import round_half_up
from .constants import DEFAULT_RULES, ScoringRules
from .formatting import (
    LANDING_GRADE_LABELS,
    format_budget_bonus,
    format_final_score,
    format_flight_seconds,
    format_landing_adjustment,
    format_signed_seconds,
)
from .inputs import LandingGrade, ScoringInputs

if TYPE_CHECKING:
    from .._mission.state import Participant


@dataclass(frozen=True)
class ScoreBreakdown:
    """Derived score for one participant. Never persisted."""
    flight_seconds: Optional[int]
    used_budget: Optional[float]
    budget_left: Optional[int]
    budget_bonus: Optional[int]
    rover_bonus: int
    return_bonus: int
    aesthetics_bonus: int
    mission_bonus: int
    landing_grade: LandingGrade
    landing_adjustment: Optional[int]
    extra_penalty: int
    total_bonus: int
    total_penalty: int
    final_score: Optional[int]
    is_disqualified: bool
    flight_label: str
    budget_bonus_label: str
    landing_grade_label: str
    landing_adjustment_label: str
    extra_penalty_label: str
    final_score_label: str

    @property
    def sort_value(self) -> float:
        """Final score, or +inf for DQ and unscored entries."""
        return math.inf if self.final_score is None else self.final_score


def resolve_flight_seconds(participant: "Participant") -> Optional[int]:
    """
    Flight time in whole seconds.

    The recorded duration wins; otherwise land time minus flight start.
    None while still flying or when the timestamps are missing.
    """
    if participant.flight_duration is not None:
        return max(0, round_half_up(participant.flight_duration))
    if participant.flight_start is not None and participant.land_time is not None:
        return max(0, round_half_up((participant.land_time - participant.flight_start) / 1000))
    return None


def compute_score(
    participant: "Participant",
    rules: ScoringRules = DEFAULT_RULES,
) -> ScoreBreakdown:
    """
    Compute a participant's score breakdown.

    Args:
        participant: Participant with sanitized scoring inputs
        rules: Scoring constants

    Returns:
        ScoreBreakdown
    """
    inputs: ScoringInputs = participant.scoring
    flight_seconds = resolve_flight_seconds(participant)

    used_budget = inputs.used_budget
    if used_budget is None:
        budget_left = None
        budget_bonus = None
    else:
        budget_left = round_half_up(rules.total_budget - used_budget)
        budget_bonus = max(0, budget_left // rules.budget_bonus_divisor)

    rover_bonus = rules.rover_bonus if inputs.rover_bonus_granted else 0
    return_bonus = rules.return_bonus if inputs.return_bonus_granted else 0
    aesthetics = inputs.aesthetics_bonus or 0
    aesthetics_bonus = max(0, min(rules.aesthetics_max, aesthetics))
    mission_bonus = rover_bonus + return_bonus + aesthetics_bonus

    grade = inputs.landing_grade
    landing_adjustment = rules.landing_adjustment(grade)
    extra_penalty = inputs.extra_penalty_seconds or 0
    is_disqualified = grade is LandingGrade.DISQUALIFIED

    budget_for_score = budget_bonus or 0
    landing_for_score = landing_adjustment or 0

    final_score: Optional[int] = None
    if not is_disqualified and flight_seconds is not None:
        final_score = round_half_up(
            flight_seconds
            - budget_for_score
            - mission_bonus
            + landing_for_score
            + extra_penalty
        )

    return ScoreBreakdown(
        flight_seconds=flight_seconds,
        used_budget=used_budget,
        budget_left=budget_left,
        budget_bonus=budget_bonus,
        rover_bonus=rover_bonus,
        return_bonus=return_bonus,
        aesthetics_bonus=aesthetics_bonus,
        mission_bonus=mission_bonus,
        landing_grade=grade,
        landing_adjustment=landing_adjustment,
        extra_penalty=extra_penalty,
        total_bonus=budget_for_score + mission_bonus + max(0, -landing_for_score),
        total_penalty=max(0, landing_for_score) + extra_penalty,
        final_score=final_score,
        is_disqualified=is_disqualified,
        flight_label=format_flight_seconds(flight_seconds),
        budget_bonus_label=format_budget_bonus(budget_bonus),
        landing_grade_label=LANDING_GRADE_LABELS[grade],
        landing_adjustment_label=format_landing_adjustment(landing_adjustment),
        extra_penalty_label=format_signed_seconds(extra_penalty),
        final_score_label=format_final_score(final_score, is_disqualified),
    )
