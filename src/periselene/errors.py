"""
periselene.errors — Custom exception classes
============================================

Defines the exception hierarchy for the mission control core.
Each exception stores its context for structured logging.

None of these escape a client's event loop: adapter failures are
caught by ``guarded_call`` and illegal director requests are
reported through return values.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import json


class PeriseleneError(Exception):
    """Base exception for all Periselene errors."""

    error_type = "PERISELENE_ERROR"

    def context(self) -> Dict[str, Any]:
        return {}

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.error_type,
            message=str(self),
            context=self.context(),
        )


class InvalidPhaseTransitionError(PeriseleneError, ValueError):
    """Raised when a phase change is not allowed from the current phase."""

    error_type = "INVALID_PHASE_TRANSITION"

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Invalid transition: {current} -> {target}")

    def context(self) -> Dict[str, Any]:
        return {"current": self.current, "target": self.target}


class AdapterUnavailableError(PeriseleneError):
    """Raised by an adapter when its backend cannot be reached."""

    error_type = "ADAPTER_UNAVAILABLE"

    def __init__(self, adapter: str, operation: str, reason: str = "unreachable"):
        self.adapter = adapter
        self.operation = operation
        self.reason = reason
        super().__init__(f"{adapter}.{operation} failed: {reason}")

    def context(self) -> Dict[str, Any]:
        return {
            "adapter": self.adapter,
            "operation": self.operation,
            "reason": self.reason,
        }


class ScoringInputError(PeriseleneError, ValueError):
    """Raised by strict sanitization when judge input is rejected."""

    error_type = "SCORING_INPUT_REJECTED"

    def __init__(self, participant_id: Optional[str], rejected_fields: List[str]):
        self.participant_id = participant_id
        self.rejected_fields = list(rejected_fields)
        super().__init__(
            f"Rejected scoring input for {participant_id}: {self.rejected_fields}"
        )

    def context(self) -> Dict[str, Any]:
        return {
            "participant_id": self.participant_id,
            "rejected_fields": self.rejected_fields,
        }


class ConfigError(PeriseleneError, ValueError):
    """Raised when the configuration is missing keys or has bad values."""

    error_type = "CONFIG_ERROR"

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__(f"Invalid configuration: {self.problems}")

    def context(self) -> Dict[str, Any]:
        return {"problems": self.problems}


def _format_error_block(
    error_type: str,
    message: str,
    context: Dict[str, Any],
) -> str:
    """Format a structured error block."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " PERISELENE ERROR",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Message:      {message}",
    ]

    if context:
        lines.append("")
        lines.append(" ── CONTEXT " + "─" * 52)
        lines.append(_indent_json(context))

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
