# Area: Scoring Tests
"""Tests for judge input sanitization."""

import pytest

from periselene._scoring.inputs import (
    LandingGrade,
    ScoringInputs,
    canonical_fields,
    sanitize_scoring,
)
from periselene.errors import ScoringInputError


class TestLandingGrade:
    """Tests for free-text landing grade normalization."""

    def test_substring_matching(self):
        """Test the ordered substring rules."""
        assert LandingGrade.normalize("Perfect soft landing") is LandingGrade.PERFECT_SOFT
        assert LandingGrade.normalize("SOFT") is LandingGrade.PERFECT_SOFT
        assert LandingGrade.normalize("hard touchdown") is LandingGrade.HARD
        assert LandingGrade.normalize("Crunch") is LandingGrade.CRUNCH
        assert LandingGrade.normalize("DQ") is LandingGrade.DISQUALIFIED
        assert LandingGrade.normalize("exploded") is LandingGrade.DISQUALIFIED

    def test_unknown_is_unset(self):
        """Test the fallback."""
        assert LandingGrade.normalize("wobbly") is LandingGrade.UNSET
        assert LandingGrade.normalize(None) is LandingGrade.UNSET
        assert LandingGrade.normalize("") is LandingGrade.UNSET


class TestSanitizeScoring:
    """Tests for sanitize_scoring."""

    def test_clean_input(self):
        """Test that valid input passes through."""
        clean, rejected = sanitize_scoring({
            "used_budget": 49_000,
            "rover_bonus_granted": True,
            "aesthetics_bonus": 12,
            "landing_grade": "PERFECT_SOFT",
            "extra_penalty_seconds": 5,
            "notes": "nice",
        })
        assert rejected == []
        assert clean.used_budget == 49_000
        assert clean.rover_bonus_granted is True
        assert clean.aesthetics_bonus == 12
        assert clean.landing_grade is LandingGrade.PERFECT_SOFT
        assert clean.extra_penalty_seconds == 5

    def test_non_numeric_budget_rejected(self):
        """Test that unreadable numbers are rejected and the rest kept."""
        clean, rejected = sanitize_scoring({"used_budget": "a lot", "aesthetics_bonus": 10})
        assert rejected == ["used_budget"]
        assert clean.used_budget is None
        assert clean.aesthetics_bonus == 10

    def test_several_rejected(self):
        """Test that every unreadable field is reported."""
        _, rejected = sanitize_scoring({
            "used_budget": "x", "aesthetics_bonus": "y", "extra_penalty_seconds": "z",
        })
        assert rejected == ["aesthetics_bonus", "extra_penalty_seconds", "used_budget"]

    def test_numeric_strings_accepted(self):
        """Test that numbers typed as text are read."""
        clean, rejected = sanitize_scoring({"used_budget": "1200.5"})
        assert rejected == []
        assert clean.used_budget == 1200.5

    def test_negative_budget_clamped(self):
        """Test that a negative budget reads as zero."""
        clean, _ = sanitize_scoring({"used_budget": -10})
        assert clean.used_budget == 0

    def test_aesthetics_clamped_and_rounded(self):
        """Test the 0..30 aesthetics range with half-up rounding."""
        assert sanitize_scoring({"aesthetics_bonus": 31.5})[0].aesthetics_bonus == 30
        assert sanitize_scoring({"aesthetics_bonus": 12.5})[0].aesthetics_bonus == 13
        assert sanitize_scoring({"aesthetics_bonus": -3})[0].aesthetics_bonus == 0

    def test_penalty_clamped(self):
        """Test that penalties are whole and non-negative."""
        assert sanitize_scoring({"extra_penalty_seconds": -5})[0].extra_penalty_seconds == 0
        assert sanitize_scoring({"extra_penalty_seconds": 2.4})[0].extra_penalty_seconds == 2

    def test_bonus_flags_strict(self):
        """Test that only a real True grants a bonus."""
        clean, rejected = sanitize_scoring({
            "rover_bonus_granted": "yes", "return_bonus_granted": 1,
        })
        assert rejected == []
        assert clean.rover_bonus_granted is False
        assert clean.return_bonus_granted is False

    def test_empty_values_are_unset(self):
        """Test that blanks clear numeric fields."""
        clean, rejected = sanitize_scoring({"used_budget": "", "aesthetics_bonus": None})
        assert rejected == []
        assert clean.used_budget is None
        assert clean.aesthetics_bonus is None

    def test_legacy_aliases(self):
        """Test legacy field names."""
        clean, _ = sanitize_scoring({
            "rover_bonus": True,
            "return_bonus": True,
            "landing_status": "hard",
            "additional_penalty": 7,
            "judge_notes": 42,
        })
        assert clean.rover_bonus_granted is True
        assert clean.return_bonus_granted is True
        assert clean.landing_grade is LandingGrade.HARD
        assert clean.extra_penalty_seconds == 7
        assert clean.notes == "42"

    def test_strict_raises(self):
        """Test that strict mode raises with the rejected fields."""
        with pytest.raises(ScoringInputError) as exc_info:
            sanitize_scoring({"used_budget": "x"}, strict=True, participant_id="p1")
        assert exc_info.value.rejected_fields == ["used_budget"]
        assert exc_info.value.participant_id == "p1"


class TestScoringInputs:
    """Tests for the ScoringInputs model."""

    def test_defaults(self):
        """Test the empty model."""
        inputs = ScoringInputs()
        assert inputs.used_budget is None
        assert inputs.landing_grade is LandingGrade.UNSET
        assert inputs.to_record()["landing_grade"] == "UNSET"

    def test_canonical_fields_drops_unknown(self):
        """Test that non-scoring keys are dropped."""
        assert canonical_fields({"id": "p1", "status": "LANDED", "rover_bonus": True}) == {
            "rover_bonus_granted": True,
        }
