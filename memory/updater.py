"""Weak-skill persistence: normalised, transactional upserts."""
from __future__ import annotations

import datetime as dt
from typing import Iterable, List

from domain.types import WeakSkillRecord
from storage.store import StoreTx, TransactionalStore


def normalize_topic(topic: str) -> str:
    """Trim, lower-case and collapse internal whitespace."""

    return " ".join(topic.split()).lower()


def unique_topics(topics: Iterable[str]) -> List[str]:
    """Normalised non-empty topics, first occurrence wins."""

    seen: List[str] = []
    for topic in topics:
        if not isinstance(topic, str):
            continue
        normalized = normalize_topic(topic)
        if normalized and normalized not in seen:
            seen.append(normalized)
    return seen


def update_weak_skills(store: TransactionalStore, user_id: str, topics: Iterable[str]) -> List[WeakSkillRecord]:
    """Upsert every topic for ``user_id`` in one transaction.

    Existing rows gain one occurrence and a fresh ``last_occurred_at``; new
    rows start at one. Returns all of the user's records, most frequent first.
    Nothing is written when no topic survives normalisation.

    Raises:
        Exception: Store failures propagate; the transaction is rolled back.
    """

    names = unique_topics(topics)

    def _apply(tx: StoreTx) -> List[WeakSkillRecord]:
        now = dt.datetime.now(dt.timezone.utc)
        for name in names:
            existing = tx.get_weak_skill(user_id, name)
            if existing is None:
                tx.insert_weak_skill(user_id, name, now)
            else:
                tx.increment_weak_skill(existing.id, now)
        return tx.list_weak_skills(user_id)

    return store.with_transaction(_apply, immediate=bool(names))


def top_weak_skills(store: TransactionalStore, user_id: str, limit: int) -> List[str]:
    """Names of the ``limit`` most frequent weak skills (limit floored at 1)."""

    limit = max(1, int(limit))
    records = store.with_transaction(lambda tx: tx.list_weak_skills(user_id, limit=limit), immediate=False)
    return [record.skill_name for record in records]


__all__ = ["normalize_topic", "unique_topics", "update_weak_skills", "top_weak_skills"]
