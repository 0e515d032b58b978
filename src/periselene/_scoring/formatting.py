# Area: Scoring
"""
periselene._scoring.formatting — Score display labels
=====================================================
"""

from typing import Optional

from .._shared.timeutil import format_mmss, round_half_up
from .inputs import LandingGrade

NOT_PROVIDED = "Not provided"
DQ_LABEL = "DQ"
UNSCORED_LABEL = "---"

LANDING_GRADE_LABELS = {
    LandingGrade.PERFECT_SOFT: "Perfect Soft",
    LandingGrade.HARD: "Hard",
    LandingGrade.CRUNCH: "Crunch",
    LandingGrade.DISQUALIFIED: "Disqualified",
    LandingGrade.UNSET: NOT_PROVIDED,
}


def format_signed_seconds(value: Optional[float]) -> str:
    """'+20s', '-20s', '0s'; 'Not provided' when unknown."""
    if value is None:
        return NOT_PROVIDED
    rounded = round_half_up(value)
    if rounded > 0:
        return f"+{rounded}s"
    return f"{rounded}s"


def format_flight_seconds(seconds: Optional[int]) -> str:
    """MM:SS for a flight time; '--:--' when unknown."""
    if seconds is None:
        return format_mmss(None)
    return format_mmss(max(0, seconds))


def format_budget_bonus(bonus: Optional[int]) -> str:
    return NOT_PROVIDED if bonus is None else f"-{bonus}s"


def format_landing_adjustment(adjustment: Optional[int]) -> str:
    return DQ_LABEL if adjustment is None else format_signed_seconds(adjustment)


def format_final_score(score: Optional[int], is_disqualified: bool) -> str:
    if is_disqualified:
        return DQ_LABEL
    if score is None:
        return UNSCORED_LABEL
    return f"{score}s"
