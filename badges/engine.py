"""Achievement badges: context gathering, eligibility and idempotent awards."""
from __future__ import annotations

import datetime as dt
import logging
from typing import Dict, List, Optional, Sequence

from domain.types import AwardedBadge, BadgeContext
from observability import log_event
from storage.store import StoreTx, TransactionalStore

from .rules import DEFAULT_RULES, BadgeRule, check_unique

logger = logging.getLogger(__name__)


def load_context(tx: StoreTx, user_id: str) -> BadgeContext:
    """Snapshot the user's readiness, latest breakdown and session count."""

    readiness = tx.get_readiness(user_id)
    latest = tx.latest_session(user_id)
    breakdown = tx.get_score_breakdown(latest.id) if latest is not None else None
    return BadgeContext(
        readiness_score=readiness.readiness_score if readiness else 0.0,
        technical_average=breakdown.technical_average if breakdown else 0.0,
        communication_average=breakdown.communication_average if breakdown else 0.0,
        confidence_average=breakdown.confidence_average if breakdown else 0.0,
        logic_average=breakdown.logic_average if breakdown else 0.0,
        depth_average=breakdown.depth_average if breakdown else 0.0,
        total_sessions=tx.count_sessions(user_id),
    )


class BadgeEngine:
    def __init__(self, store: TransactionalStore, rules: Optional[Sequence[BadgeRule]] = None) -> None:
        rules = tuple(DEFAULT_RULES if rules is None else rules)
        check_unique(rules)
        self._store = store
        self._rules = rules
        self._descriptions: Dict[str, str] = {rule.name: rule.description for rule in rules}

    @property
    def rules(self) -> Sequence[BadgeRule]:
        return self._rules

    def evaluate_and_award_badges(self, user_id: str) -> List[AwardedBadge]:
        """Award every newly earned badge and list the ones already held.

        Held badges come back with ``is_new=False`` and their stored award
        time. Returns an empty list if anything goes wrong.
        """

        try:
            result = self._store.with_transaction(lambda tx: self._award(tx, user_id))
        except Exception as exc:  # noqa: BLE001
            logger.error("Badge evaluation failed for user=%s: %s", user_id, exc)
            return []
        for badge in result:
            if badge.is_new:
                log_event("badge.awarded", user_id=user_id, badge=badge.badge_name)
        return result

    def get_user_badges(self, user_id: str) -> List[AwardedBadge]:
        """Held badges, newest first; empty on failure."""

        try:
            rows = self._store.with_transaction(lambda tx: tx.list_badges(user_id), immediate=False)
        except Exception as exc:  # noqa: BLE001
            logger.error("Badge lookup failed for user=%s: %s", user_id, exc)
            return []
        return [
            AwardedBadge(
                badge_name=row.badge_name,
                description=self._descriptions.get(row.badge_name, ""),
                awarded_at=row.awarded_at,
                is_new=False,
            )
            for row in rows
        ]

    def _award(self, tx: StoreTx, user_id: str) -> List[AwardedBadge]:
        ctx = load_context(tx, user_id)
        held = {row.badge_name: row.awarded_at for row in tx.list_badges(user_id)}
        now = dt.datetime.now(dt.timezone.utc)

        awarded: List[AwardedBadge] = []
        for rule in self._rules:
            if rule.name in held:
                awarded.append(
                    AwardedBadge(badge_name=rule.name, description=rule.description, awarded_at=held[rule.name], is_new=False)
                )
                continue
            if not self._eligible(rule, ctx, user_id):
                continue
            # A concurrent award may win the unique index; report the stored row.
            awarded_at = now
            is_new = tx.insert_badge_if_absent(user_id, rule.name, now)
            if not is_new:
                stored = tx.get_badge(user_id, rule.name)
                if stored is not None:
                    awarded_at = stored.awarded_at
            awarded.append(
                AwardedBadge(badge_name=rule.name, description=rule.description, awarded_at=awarded_at, is_new=is_new)
            )
        return awarded

    @staticmethod
    def _eligible(rule: BadgeRule, ctx: BadgeContext, user_id: str) -> bool:
        try:
            return rule.is_eligible(ctx)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Badge rule %r failed for user=%s: %s", rule.name, user_id, exc)
            return False


__all__ = ["BadgeEngine", "load_context"]
