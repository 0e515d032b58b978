# Area: Launch
"""
periselene._launch.countdown — Local 3-2-1 countdown
====================================================

Tracks a single launch countdown against the corrected clock. Once
started it runs to ``ends_at`` on its own; polls neither restart nor
reset it. Only a phase change or a vanished pending launch cancels it.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

logger = logging.getLogger("periselene.launch.countdown")


class LocalCountdown:
    """
    One countdown, ending at a director instant.

    Attributes:
        ends_at: Director instant the countdown reaches zero (epoch ms)
        label: What is being launched (e.g. "BUILD")
    """

    def __init__(self) -> None:
        self.ends_at: Optional[int] = None
        self.label: Optional[str] = None

    def start(self, ends_at: int, label: str) -> bool:
        """
        Start (or keep) a countdown.

        Returns:
            False if the same countdown is already running
        """
        if self.ends_at == ends_at and self.label == label:
            return False
        self.ends_at = ends_at
        self.label = label
        logger.debug("Countdown %s started, ends at %s", label, ends_at)
        return True

    def remaining_seconds(self, now: int) -> Optional[int]:
        """
        Whole seconds left, rounded up; None when idle or finished.

        A finished countdown clears itself.
        """
        if self.ends_at is None:
            return None
        remaining_ms = self.ends_at - now
        if remaining_ms <= 0:
            logger.debug("Countdown %s finished", self.label)
            self.clear()
            return None
        return math.ceil(remaining_ms / 1000)

    def is_active(self) -> bool:
        return self.ends_at is not None

    def cancel(self) -> None:
        """Cancel the countdown. No-op if idle."""
        if self.ends_at is not None:
            logger.info("Countdown %s cancelled", self.label)
        self.clear()

    def clear(self) -> None:
        self.ends_at = None
        self.label = None
