# Area: Scoring
"""
periselene._scoring.constants — Scoring rules
=============================================

Business constants of the scoring formula, grouped so an event can
tune them (notably the crunch landing charge) without touching the
engine.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from .inputs import AESTHETICS_MAX, LandingGrade


@dataclass(frozen=True)
class ScoringRules:
    """
    Constants of the scoring formula. All adjustments are in seconds;
    negative values reward, positive values penalize.
    """
    total_budget: int = 50_000
    budget_bonus_divisor: int = 100
    rover_bonus: int = 60
    return_bonus: int = 100
    aesthetics_max: int = AESTHETICS_MAX
    perfect_soft_adjustment: int = -20
    hard_adjustment: int = 0
    crunch_adjustment: int = 20

    def landing_adjustment(self, grade: LandingGrade) -> Optional[int]:
        """Seconds added for *grade*; None for a disqualification."""
        if grade is LandingGrade.DISQUALIFIED:
            return None
        if grade is LandingGrade.PERFECT_SOFT:
            return self.perfect_soft_adjustment
        if grade is LandingGrade.HARD:
            return self.hard_adjustment
        if grade is LandingGrade.CRUNCH:
            return self.crunch_adjustment
        return 0


DEFAULT_RULES = ScoringRules()


def rules_from_config(config: Dict[str, Any]) -> ScoringRules:
    """Default rules with the configured crunch charge."""
    crunch = config.get("crunch_penalty_seconds")
    if crunch is None:
        return DEFAULT_RULES
    return replace(DEFAULT_RULES, crunch_adjustment=int(crunch))
