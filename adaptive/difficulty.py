"""Difficulty state machine over the ordered easy < medium < hard ladder."""
from __future__ import annotations

from domain.types import DIFFICULTIES, RECOMMENDATIONS, Difficulty

DEFAULT_DIFFICULTY: Difficulty = "medium"


def next_difficulty(current: str, recommendation: str) -> Difficulty:
    """Move one step along the ladder, clamping at both ends.

    An unknown ``current`` resets to medium; an unknown ``recommendation``
    keeps the current level.
    """

    if current not in DIFFICULTIES:
        return DEFAULT_DIFFICULTY
    if recommendation not in RECOMMENDATIONS:
        return current  # type: ignore[return-value]

    index = DIFFICULTIES.index(current)
    if recommendation == "increase":
        index = min(index + 1, len(DIFFICULTIES) - 1)
    elif recommendation == "decrease":
        index = max(index - 1, 0)
    return DIFFICULTIES[index]  # type: ignore[return-value]


def by_distance(difficulty: str) -> list[str]:
    """Other difficulties ordered nearest first, harder before easier on ties."""

    if difficulty not in DIFFICULTIES:
        return [d for d in DIFFICULTIES if d != difficulty]
    origin = DIFFICULTIES.index(difficulty)
    others = [d for d in DIFFICULTIES if d != difficulty]
    return sorted(others, key=lambda d: (abs(DIFFICULTIES.index(d) - origin), -DIFFICULTIES.index(d)))


__all__ = ["DEFAULT_DIFFICULTY", "next_difficulty", "by_distance"]
