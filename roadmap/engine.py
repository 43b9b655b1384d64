from __future__ import annotations  # Improvement-plan persistence

import datetime as dt
import logging
from typing import Optional

from pydantic import ValidationError

from domain.types import DIFFICULTIES
from observability import log_event
from storage.store import StoreTx, TransactionalStore

from .generator import Roadmap, RoadmapParams, generate_roadmap

logger = logging.getLogger(__name__)

ROADMAP_WEAK_SKILLS = 10


def default_roadmap() -> Roadmap:
    """Plan returned when the user's data cannot be read or stored."""

    return generate_roadmap(
        RoadmapParams(weak_skills=[], technical_average=50, communication_average=50, logic_average=50)
    )


class RoadmapEngine:  # Generates, stores and fetches 30-day improvement plans
    def __init__(self, store: TransactionalStore, weak_skill_limit: int = ROADMAP_WEAK_SKILLS) -> None:
        self._store = store
        self._weak_skill_limit = max(1, int(weak_skill_limit))

    def generate_and_store_roadmap(self, user_id: str) -> Roadmap:
        """Build a plan from stored progress and append it to the user's history.

        Users without sessions get the plan for an easy, zero-score profile.
        On any store failure the default plan is returned and nothing is kept.
        """

        try:
            roadmap = self._store.with_transaction(lambda tx: self._generate(tx, user_id))
        except Exception as exc:  # noqa: BLE001
            logger.error("Roadmap generation failed for user=%s: %s", user_id, exc)
            return default_roadmap()
        log_event("roadmap.generated", user_id=user_id, top=roadmap.week1[0].topic)
        return roadmap

    def get_latest_roadmap(self, user_id: str) -> Optional[Roadmap]:
        try:
            row = self._store.with_transaction(lambda tx: tx.latest_improvement_plan(user_id), immediate=False)
        except Exception as exc:  # noqa: BLE001
            logger.error("Roadmap lookup failed for user=%s: %s", user_id, exc)
            return None
        if row is None:
            return None
        try:
            return Roadmap.model_validate_json(row.plan_json)
        except ValidationError as exc:
            logger.error("Stored roadmap for user=%s is unreadable: %s", user_id, exc)
            return None

    def _generate(self, tx: StoreTx, user_id: str) -> Roadmap:
        weak = [record.skill_name for record in tx.list_weak_skills(user_id, limit=self._weak_skill_limit)]
        latest = tx.latest_session(user_id)
        breakdown = tx.get_score_breakdown(latest.id) if latest is not None else None

        params = RoadmapParams(
            weak_skills=weak,
            difficulty=latest.difficulty if latest is not None and latest.difficulty in DIFFICULTIES else "easy",
        )
        if breakdown is not None:
            params = params.model_copy(
                update={
                    "technical_average": breakdown.technical_average,
                    "communication_average": breakdown.communication_average,
                    "logic_average": breakdown.logic_average,
                }
            )
        roadmap = generate_roadmap(params)
        tx.create_improvement_plan(user_id, roadmap.model_dump_json(), dt.datetime.now(dt.timezone.utc))
        return roadmap


__all__ = ["RoadmapEngine", "default_roadmap", "ROADMAP_WEAK_SKILLS"]
