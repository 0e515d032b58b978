# Area: Error Tests
"""Tests for the exception hierarchy."""

import pytest

from periselene.errors import (
    AdapterUnavailableError,
    ConfigError,
    InvalidPhaseTransitionError,
    PeriseleneError,
    ScoringInputError,
)


class TestErrors:
    """Tests for custom exceptions."""

    def test_all_inherit_base(self):
        """Test that every error is a PeriseleneError."""
        for error in (
            InvalidPhaseTransitionError("IDLE", "FLIGHT"),
            AdapterUnavailableError("Store", "read"),
            ScoringInputError("p1", ["used_budget"]),
            ConfigError(["bad"]),
        ):
            assert isinstance(error, PeriseleneError)

    def test_invalid_transition_is_value_error(self):
        """Test that an illegal transition can be caught as ValueError."""
        with pytest.raises(ValueError):
            raise InvalidPhaseTransitionError("IDLE", "FLIGHT")

    def test_invalid_transition_context(self):
        """Test the transition context."""
        error = InvalidPhaseTransitionError("IDLE", "FLIGHT")
        assert error.context() == {"current": "IDLE", "target": "FLIGHT"}
        assert "IDLE -> FLIGHT" in str(error)

    def test_adapter_unavailable_reason(self):
        """Test the default outage reason."""
        error = AdapterUnavailableError("InMemoryStateStore", "read")
        assert error.reason == "unreachable"
        assert error.context()["operation"] == "read"

    def test_scoring_input_error_fields(self):
        """Test that rejected fields are kept."""
        error = ScoringInputError("p1", ["used_budget", "aesthetics_bonus"])
        assert error.rejected_fields == ["used_budget", "aesthetics_bonus"]

    def test_format_error_log(self):
        """Test the structured error block."""
        block = ConfigError(["participant_id is required"]).format_error_log()
        assert "PERISELENE ERROR" in block
        assert "CONFIG_ERROR" in block
        assert "participant_id is required" in block
