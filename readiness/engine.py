from __future__ import annotations  # Readiness index persistence

import datetime as dt
import logging

from observability import log_event
from storage.store import StoreTx, TransactionalStore

from .calculator import ReadinessParams, calculate_readiness

logger = logging.getLogger(__name__)


class ReadinessEngine:  # Recomputes and stores a user's interview readiness
    def __init__(self, store: TransactionalStore) -> None:
        self._store = store

    def update_readiness_index(self, user_id: str) -> float:
        """Recompute from the latest session and upsert; 0 on failure."""

        try:
            score = self._store.with_transaction(lambda tx: self._refresh(tx, user_id))
        except Exception as exc:  # noqa: BLE001
            logger.error("Readiness update failed for user=%s: %s", user_id, exc)
            return 0.0
        log_event("readiness.updated", user_id=user_id, score=score)
        return score

    def get_readiness_score(self, user_id: str) -> float:
        try:
            row = self._store.with_transaction(lambda tx: tx.get_readiness(user_id), immediate=False)
        except Exception as exc:  # noqa: BLE001
            logger.error("Readiness lookup failed for user=%s: %s", user_id, exc)
            return 0.0
        return row.readiness_score if row else 0.0

    @staticmethod
    def _refresh(tx: StoreTx, user_id: str) -> float:
        now = dt.datetime.now(dt.timezone.utc)
        latest = tx.latest_session(user_id)
        if latest is None:
            tx.upsert_readiness(user_id, 0.0, now)
            return 0.0

        breakdown = tx.get_score_breakdown(latest.id)
        params = ReadinessParams(
            weak_skill_count=tx.count_weak_skills(user_id),
            current_difficulty=latest.difficulty,
            total_sessions=tx.count_sessions(user_id),
        )
        if breakdown is not None:
            params = params.model_copy(
                update={
                    "overall_score": breakdown.overall_score,
                    "technical_average": breakdown.technical_average,
                    "communication_average": breakdown.communication_average,
                    "confidence_average": breakdown.confidence_average,
                    "logic_average": breakdown.logic_average,
                    "depth_average": breakdown.depth_average,
                }
            )
        score = calculate_readiness(params)
        tx.upsert_readiness(user_id, score, now)
        return score


__all__ = ["ReadinessEngine"]
