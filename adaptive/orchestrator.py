from __future__ import annotations  # Difficulty transition + persistence + next question

import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from domain.types import AdaptiveStepResult, Difficulty, SelectedQuestion
from observability import log_event
from storage.store import StoreTx, TransactionalStore

from .difficulty import next_difficulty
from .question_selector import QuestionSelectionParams, QuestionSelector

logger = logging.getLogger(__name__)


class AdaptiveStepParams(BaseModel):
    session_id: str
    user_id: str
    current_difficulty: Difficulty
    recommendation: str
    weak_topics: List[str] = Field(default_factory=list)


class AdaptiveOrchestrator:  # One adaptive turn: move difficulty, pick a question
    def __init__(self, store: TransactionalStore, selector: QuestionSelector) -> None:
        self._store = store
        self._selector = selector

    def process_adaptive_step(self, params: AdaptiveStepParams) -> AdaptiveStepResult:
        """Compute and persist the next difficulty, then select a question.

        A failed difficulty write keeps the current level and yields no
        question. A failed selection is non-fatal.
        """

        target = next_difficulty(params.current_difficulty, params.recommendation)

        def _persist(tx: StoreTx) -> None:
            tx.update_session_difficulty(params.session_id, target)

        try:
            self._store.with_transaction(_persist)
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to update session difficulty (rolled back): %s", exc)
            return AdaptiveStepResult(next_difficulty=params.current_difficulty, next_question=None)

        question: Optional[SelectedQuestion] = None
        try:
            question = self._selector.select_next_question(
                QuestionSelectionParams(
                    session_id=params.session_id,
                    difficulty=target,
                    weak_topics=params.weak_topics,
                )
            )
        except Exception as exc:  # noqa: BLE001
            logger.error("Question selection failed: %s", exc)

        log_event(
            "adaptive.step",
            params.session_id,
            user_id=params.user_id,
            difficulty=params.current_difficulty,
            next_difficulty=target,
            question_id=question.id if question else None,
        )
        return AdaptiveStepResult(next_difficulty=target, next_question=question)


__all__ = ["AdaptiveStepParams", "AdaptiveOrchestrator"]
