"""Tiered question selection from the shared question bank."""
from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from config.engine import EngineConfig
from domain.types import Difficulty, SelectedQuestion
from storage.store import StoreTx, TransactionalStore, normalize_category

from .difficulty import by_distance

logger = logging.getLogger(__name__)


class QuestionSelectionParams(BaseModel):
    session_id: str
    difficulty: Difficulty
    category: Optional[str] = None
    weak_topics: List[str] = Field(default_factory=list)


def category_filter(category: Optional[str], weak_topics: Optional[Sequence[str]]) -> List[str]:
    """Requested category plus normalised weak topics, de-duplicated in order."""

    seen: List[str] = []
    for value in [category or "", *(weak_topics or [])]:
        if not isinstance(value, str):
            continue
        normalized = normalize_category(value)
        if normalized and normalized not in seen:
            seen.append(normalized)
    return seen


class QuestionSelector:
    """Pick the next question without touching the scorer.

    Tiers, first non-empty wins:

    1. difficulty + category/weak-topic match, not yet asked in the session
    2. difficulty only, not yet asked
    3. difficulty only, repeats allowed
    4. (opt-in) nearest other difficulty, repeats allowed
    """

    def __init__(
        self,
        store: TransactionalStore,
        config: Optional[EngineConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._store = store
        self._config = config or EngineConfig()
        self._rng = rng or random.Random()

    def select_next_question(self, params: QuestionSelectionParams) -> Optional[SelectedQuestion]:
        categories = category_filter(params.category, params.weak_topics)
        return self._store.with_transaction(
            lambda tx: self._select(tx, params.session_id, params.difficulty, categories),
            immediate=False,
        )

    def _select(
        self,
        tx: StoreTx,
        session_id: str,
        difficulty: str,
        categories: List[str],
    ) -> Optional[SelectedQuestion]:
        asked = tx.asked_question_ids(session_id)

        if categories:
            picked = self._pick(tx.find_questions(difficulty, categories=categories, exclude_ids=asked))
            if picked is not None:
                return picked

        picked = self._pick(tx.find_questions(difficulty, exclude_ids=asked))
        if picked is not None:
            return picked

        picked = self._pick(tx.find_questions(difficulty))
        if picked is not None:
            logger.info("Question bank exhausted for session=%s difficulty=%s; repeating", session_id, difficulty)
            return picked

        if self._config.cross_difficulty_fallback:
            for other in by_distance(difficulty):
                picked = self._pick(tx.find_questions(other))
                if picked is not None:
                    logger.info(
                        "No %s questions in bank; falling back to %s for session=%s",
                        difficulty,
                        other,
                        session_id,
                    )
                    return picked

        logger.warning("No question available for session=%s difficulty=%s", session_id, difficulty)
        return None

    def _pick(self, candidates: List[SelectedQuestion]) -> Optional[SelectedQuestion]:
        if not candidates:
            return None
        return self._rng.choice(candidates)


__all__ = ["QuestionSelectionParams", "QuestionSelector", "category_filter"]
