# Area: Scoring
"""
periselene._scoring.inputs — Judge input boundary
=================================================

Judges type scoring inputs by hand, so nothing they submit reaches
``compute_score`` unsanitized. ``sanitize_scoring`` is the only way
in: it clamps what can be clamped, rejects what cannot be read as a
number, and reports the rejected field names.

Legacy column names (``rover_bonus``, ``landing_status``,
``additional_penalty``, ``judge_notes``) are accepted as aliases.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .._shared.timeutil import round_half_up, to_finite_number
from ..errors import ScoringInputError

AESTHETICS_MIN = 0
AESTHETICS_MAX = 30

FIELD_ALIASES = {
    "rover_bonus": "rover_bonus_granted",
    "return_bonus": "return_bonus_granted",
    "landing_status": "landing_grade",
    "additional_penalty": "extra_penalty_seconds",
    "judge_notes": "notes",
}


class LandingGrade(Enum):
    """Judge-assigned landing outcome."""
    UNSET = "UNSET"
    PERFECT_SOFT = "PERFECT_SOFT"
    HARD = "HARD"
    CRUNCH = "CRUNCH"
    DISQUALIFIED = "DISQUALIFIED"

    @classmethod
    def normalize(cls, value: Any) -> "LandingGrade":
        """
        Map free text to a grade.

        Matching is by substring, in order: soft/perfect, hard, crunch,
        dq/exploded/disqualified. Anything else is UNSET.
        """
        if isinstance(value, cls):
            return value
        if not value:
            return cls.UNSET
        text = str(value).strip().lower()
        if "soft" in text or "perfect" in text:
            return cls.PERFECT_SOFT
        if "hard" in text:
            return cls.HARD
        if "crunch" in text:
            return cls.CRUNCH
        if "dq" in text or "exploded" in text or "disqualified" in text:
            return cls.DISQUALIFIED
        return cls.UNSET


class ScoringInputs(BaseModel):
    """Sanitized judge inputs for one participant."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    used_budget: Optional[float] = None
    rover_bonus_granted: bool = False
    return_bonus_granted: bool = False
    aesthetics_bonus: Optional[int] = None
    landing_grade: LandingGrade = LandingGrade.UNSET
    extra_penalty_seconds: Optional[int] = None
    notes: str = ""

    @field_validator("used_budget", mode="before")
    @classmethod
    def _check_budget(cls, v: Any) -> Optional[float]:
        if v is None or v == "":
            return None
        number = to_finite_number(v)
        if number is None:
            raise ValueError(f"used_budget is not a number: {v!r}")
        return max(0.0, number)

    @field_validator("rover_bonus_granted", "return_bonus_granted", mode="before")
    @classmethod
    def _strict_flag(cls, v: Any) -> bool:
        # Only a real True grants a bonus; "yes", 1 and friends do not
        return v is True

    @field_validator("aesthetics_bonus", mode="before")
    @classmethod
    def _clamp_aesthetics(cls, v: Any) -> Optional[int]:
        if v is None or v == "":
            return None
        number = to_finite_number(v)
        if number is None:
            raise ValueError(f"aesthetics_bonus is not a number: {v!r}")
        return max(AESTHETICS_MIN, min(AESTHETICS_MAX, round_half_up(number)))

    @field_validator("landing_grade", mode="before")
    @classmethod
    def _normalize_grade(cls, v: Any) -> LandingGrade:
        return LandingGrade.normalize(v)

    @field_validator("extra_penalty_seconds", mode="before")
    @classmethod
    def _clamp_penalty(cls, v: Any) -> Optional[int]:
        if v is None or v == "":
            return None
        number = to_finite_number(v)
        if number is None:
            raise ValueError(f"extra_penalty_seconds is not a number: {v!r}")
        return max(0, round_half_up(number))

    @field_validator("notes", mode="before")
    @classmethod
    def _coerce_notes(cls, v: Any) -> str:
        return "" if v is None else str(v)

    def to_record(self) -> Dict[str, Any]:
        """Store representation (enum as its value)."""
        data = self.model_dump()
        data["landing_grade"] = self.landing_grade.value
        return data


def canonical_fields(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Rename legacy keys and drop keys that are not scoring fields."""
    data: Dict[str, Any] = {}
    for key, value in (raw or {}).items():
        name = FIELD_ALIASES.get(key, key)
        if name in ScoringInputs.model_fields:
            data[name] = value
    return data


def sanitize_scoring(
    raw: Dict[str, Any],
    strict: bool = False,
    participant_id: Optional[str] = None,
) -> Tuple[ScoringInputs, List[str]]:
    """
    Sanitize a bundle of judge inputs.

    Args:
        raw: Field name to raw value (legacy names accepted)
        strict: Raise instead of dropping rejected fields
        participant_id: For error context only

    Returns:
        Tuple of (clean inputs, rejected field names)

    Raises:
        ScoringInputError: If strict and any field was rejected
    """
    data = canonical_fields(raw)
    try:
        return ScoringInputs.model_validate(data), []
    except ValidationError as e:
        rejected = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})

    if strict:
        raise ScoringInputError(participant_id, rejected)

    kept = {k: v for k, v in data.items() if k not in rejected}
    return ScoringInputs.model_validate(kept), rejected
