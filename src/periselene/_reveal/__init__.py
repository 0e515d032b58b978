# Area: Reveal
"""
Winner reveal.

This package contains:
- Winner selection and announcement payloads
- WinnerRevealSequencer: synchronized 5-second reveal
"""

from .announcement import (
    build_announcement,
    build_winner_summary,
    is_ranking_final,
    select_winner,
)
from .sequencer import RevealState, RevealView, WinnerRevealSequencer, build_comparison

__all__ = [
    "build_announcement",
    "build_winner_summary",
    "is_ranking_final",
    "select_winner",
    "RevealState",
    "RevealView",
    "WinnerRevealSequencer",
    "build_comparison",
]
