# Area: Shared
"""
periselene._shared.timeutil — Timestamp helpers
===============================================

Every timestamp inside the core is an integer count of epoch
milliseconds. Store records may still carry ISO-8601 strings, so
parsing accepts both.
"""

from __future__ import annotations

import math
import time
from datetime import datetime, timezone
from typing import Any, Callable, Optional

LocalClock = Callable[[], int]


def system_clock_ms() -> int:
    """Local wall clock in epoch milliseconds."""
    return int(time.time() * 1000)


def to_epoch_ms(value: Any) -> Optional[int]:
    """Parse a timestamp (epoch ms number, datetime, or ISO string).

    Returns None for missing or unparseable values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        return int(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp() * 1000)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return to_epoch_ms(parsed)
    return None


def to_finite_number(value: Any) -> Optional[float]:
    """Coerce to a finite float, or None when missing/non-numeric."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return int(math.floor(value + 0.5))


def format_mmss(total_seconds: Optional[float]) -> str:
    """Format whole seconds as MM:SS; '--:--' when unknown."""
    if total_seconds is None:
        return "--:--"
    whole = abs(int(total_seconds))
    return f"{whole // 60:02d}:{whole % 60:02d}"


def iso_from_ms(epoch_ms: Optional[int]) -> Optional[str]:
    """Render epoch ms as an ISO-8601 UTC string."""
    if epoch_ms is None:
        return None
    return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc).isoformat()
