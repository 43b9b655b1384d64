"""Coach orchestrator: memory update plus adaptive step for one interview turn."""
from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from adaptive.orchestrator import AdaptiveOrchestrator, AdaptiveStepParams
from domain.types import AdaptiveStepResult, Difficulty, MemoryUpdateResult, SelectedQuestion, WeakSkillRecord
from evaluation.schema import EvaluationResult
from memory.orchestrator import MemoryService
from observability import log_event

logger = logging.getLogger(__name__)


class InterviewStepParams(BaseModel):
    session_id: str
    user_id: str
    current_difficulty: Difficulty
    evaluation: EvaluationResult


class InterviewStepResult(BaseModel):
    next_difficulty: Difficulty
    next_question: Optional[SelectedQuestion] = None
    updated_weak_skills: List[WeakSkillRecord] = Field(default_factory=list)
    top_weak_skills: List[str] = Field(default_factory=list)


def merge_topics(*groups: List[str]) -> List[str]:
    merged: List[str] = []
    for group in groups:
        for topic in group:
            if topic not in merged:
                merged.append(topic)
    return merged


class CoachEngine:
    """Consume a validated evaluation and plan the next turn.

    Never scores and never raises: the memory and adaptive layers are
    isolated so one failing does not block the other.
    """

    def __init__(self, memory: MemoryService, adaptive: AdaptiveOrchestrator) -> None:
        self._memory = memory
        self._adaptive = adaptive

    def process_interview_step(self, params: InterviewStepParams) -> InterviewStepResult:
        recommendation = params.evaluation.difficulty_recommendation
        weak_topics = list(params.evaluation.weak_topics)

        try:
            memory = self._memory.process_memory_update(params.user_id, weak_topics)
        except Exception as exc:  # noqa: BLE001
            logger.error("Memory update failed: %s", exc)
            memory = MemoryUpdateResult()

        try:
            adaptive = self._adaptive.process_adaptive_step(
                AdaptiveStepParams(
                    session_id=params.session_id,
                    user_id=params.user_id,
                    current_difficulty=params.current_difficulty,
                    recommendation=recommendation,
                    weak_topics=merge_topics(weak_topics, memory.top_weak_skills),
                )
            )
        except Exception as exc:  # noqa: BLE001
            logger.error("Adaptive step failed: %s", exc)
            adaptive = AdaptiveStepResult(next_difficulty=params.current_difficulty, next_question=None)

        log_event(
            "coach.step",
            params.session_id,
            user_id=params.user_id,
            difficulty=params.current_difficulty,
            next_difficulty=adaptive.next_difficulty,
            outcome="question" if adaptive.next_question else "no_question",
        )
        return InterviewStepResult(
            next_difficulty=adaptive.next_difficulty,
            next_question=adaptive.next_question,
            updated_weak_skills=memory.updated_weak_skills,
            top_weak_skills=memory.top_weak_skills,
        )


__all__ = ["InterviewStepParams", "InterviewStepResult", "CoachEngine", "merge_topics"]
