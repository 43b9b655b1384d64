"""Pure readiness-index formula."""
from __future__ import annotations

from typing import Dict, Sequence, Tuple

from pydantic import BaseModel

from services.scoring import clamp_score

BASE_SCORE_WEIGHT = 0.6
WEAK_SKILL_PENALTY_PER = 1.5
MAX_WEAK_SKILL_PENALTY = 20.0
DIFFICULTY_BONUS: Dict[str, float] = {"easy": 0.0, "medium": 5.0, "hard": 10.0}
# (min_sessions, bonus), highest threshold first
CONSISTENCY_TIERS: Sequence[Tuple[int, float]] = ((10, 8.0), (5, 5.0))


class ReadinessParams(BaseModel):
    overall_score: float = 0.0
    technical_average: float = 0.0
    communication_average: float = 0.0
    confidence_average: float = 0.0
    logic_average: float = 0.0
    depth_average: float = 0.0
    weak_skill_count: int = 0
    current_difficulty: str = "easy"
    total_sessions: int = 0


def _safe_count(value: int) -> int:
    return max(0, int(value))


def calculate_readiness(params: ReadinessParams) -> float:
    """overall*0.6 - weak penalty + difficulty bonus + consistency bonus, clamped to [0, 100]."""

    overall = min(100.0, max(0.0, params.overall_score))
    base = overall * BASE_SCORE_WEIGHT

    weak_penalty = min(_safe_count(params.weak_skill_count) * WEAK_SKILL_PENALTY_PER, MAX_WEAK_SKILL_PENALTY)
    difficulty_bonus = DIFFICULTY_BONUS.get(params.current_difficulty, DIFFICULTY_BONUS["easy"])

    sessions = _safe_count(params.total_sessions)
    consistency_bonus = 0.0
    for min_sessions, bonus in CONSISTENCY_TIERS:
        if sessions >= min_sessions:
            consistency_bonus = bonus
            break

    return clamp_score(base - weak_penalty + difficulty_bonus + consistency_bonus)


__all__ = ["ReadinessParams", "calculate_readiness"]
