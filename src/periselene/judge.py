# Area: Judge
"""
periselene.judge — Judge Desk
=============================

Judges edit scoring inputs and watch the live ranking. Every edit
passes through ``sanitize_scoring`` before it reaches the store, so
``compute_score`` only ever sees clean values.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ._mission.state import Participant
from ._scoring.constants import rules_from_config
from ._scoring.engine import ScoreBreakdown, compute_score
from ._scoring.inputs import canonical_fields, sanitize_scoring
from ._scoring.ranking import RankedEntry, rank_participants
from ._shared.guarded import FAILED, guarded_call
from ._store.adapters import StateStore
from .config import participant_key, with_defaults

logger = logging.getLogger("periselene.judge")


class JudgeDesk:
    """
    Judge-side façade: scoring edits and the leaderboard.

    Attributes:
        config: Effective configuration
        rules: Scoring constants in effect
    """

    def __init__(self, store: StateStore, config: Optional[Dict[str, Any]] = None):
        self.config = with_defaults(config)
        self.store = store
        self.rules = rules_from_config(self.config)

    def participants(self) -> List[Participant]:
        records = guarded_call(
            "store.read_all", self.store.read_all, self.config["participants_table"], default=[],
        )
        return [Participant.from_record(r) for r in records]

    def update_scoring(self, participant_id: str, **fields: Any) -> List[str]:
        """
        Sanitize and store scoring inputs for one participant.

        Only the fields passed are written; rejected ones are dropped.

        Args:
            participant_id: Participant to score
            **fields: Scoring fields (legacy names accepted)

        Returns:
            Names of rejected fields. Every field counts as rejected
            when the participant does not exist or the write fails.
        """
        provided = canonical_fields(fields)
        key = participant_key(self.config, participant_id)

        existing = guarded_call("store.read", self.store.read, key, default=FAILED)
        if existing is FAILED or existing is None:
            if existing is None:
                logger.warning(f"Unknown participant {participant_id}; scoring not saved")
            return sorted(provided)

        clean, rejected = sanitize_scoring(fields, participant_id=participant_id)
        if rejected:
            logger.warning(
                f"Rejected scoring input for {participant_id}: {rejected}",
                extra={"participant_id": participant_id},
            )

        clean_record = clean.to_record()
        payload = {name: clean_record[name] for name in provided if name not in rejected}
        if not payload:
            return rejected

        if guarded_call("store.upsert", self.store.upsert, key, payload, default=FAILED) is FAILED:
            return sorted(provided)
        logger.info(f"Scoring updated for {participant_id}: {sorted(payload)}")
        return rejected

    def score(self, participant_id: str) -> Optional[ScoreBreakdown]:
        record = guarded_call(
            "store.read", self.store.read, participant_key(self.config, participant_id),
        )
        if record is None:
            return None
        return compute_score(Participant.from_record(record), self.rules)

    def leaderboard(self) -> List[RankedEntry]:
        """Live ranking, best first."""
        return rank_participants(self.participants(), self.rules)
