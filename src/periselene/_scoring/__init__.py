# Area: Scoring
"""
Scoring engine.

This package contains:
- ScoringInputs: sanitized judge inputs (pydantic)
- compute_score: pure score breakdown
- rank_participants: strict total leaderboard order
"""

from .constants import DEFAULT_RULES, ScoringRules, rules_from_config
from .engine import ScoreBreakdown, compute_score, resolve_flight_seconds
from .formatting import DQ_LABEL, NOT_PROVIDED, UNSCORED_LABEL
from .inputs import LandingGrade, ScoringInputs, sanitize_scoring
from .ranking import RankedEntry, rank_participants

__all__ = [
    "DEFAULT_RULES",
    "ScoringRules",
    "rules_from_config",
    "ScoreBreakdown",
    "compute_score",
    "resolve_flight_seconds",
    "DQ_LABEL",
    "NOT_PROVIDED",
    "UNSCORED_LABEL",
    "LandingGrade",
    "ScoringInputs",
    "sanitize_scoring",
    "RankedEntry",
    "rank_participants",
]
