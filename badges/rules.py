"""Badge rule registry."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from domain.types import BadgeContext

Predicate = Callable[[BadgeContext], bool]


@dataclass(frozen=True)
class BadgeRule:
    name: str
    description: str
    predicate: Predicate

    def is_eligible(self, ctx: BadgeContext) -> bool:
        return bool(self.predicate(ctx))


DEFAULT_RULES: Sequence[BadgeRule] = (
    BadgeRule(
        name="DSA Master",
        description="Achieved a technical average of 85 or above",
        predicate=lambda ctx: ctx.technical_average >= 85,
    ),
    BadgeRule(
        name="Communication Pro",
        description="Achieved a communication average of 80 or above",
        predicate=lambda ctx: ctx.communication_average >= 80,
    ),
    BadgeRule(
        name="Interview Ready",
        description="Achieved a readiness score of 85 or above",
        predicate=lambda ctx: ctx.readiness_score >= 85,
    ),
    BadgeRule(
        name="Consistent Performer",
        description="Completed 10 or more interview sessions",
        predicate=lambda ctx: ctx.total_sessions >= 10,
    ),
)


def check_unique(rules: Sequence[BadgeRule]) -> None:
    """Raise ValueError if two rules share a name."""

    seen: set[str] = set()
    for rule in rules:
        if rule.name in seen:
            raise ValueError(f"duplicate badge rule name: {rule.name}")
        seen.add(rule.name)


__all__ = ["BadgeRule", "DEFAULT_RULES", "Predicate", "check_unique"]
