from __future__ import annotations  # Memory layer coordinator

import logging
from typing import List, Optional, Sequence

from config.engine import EngineConfig
from domain.types import MemoryUpdateResult, WeakSkillRecord
from observability import log_event
from storage.store import TransactionalStore

from .updater import top_weak_skills, unique_topics, update_weak_skills

logger = logging.getLogger(__name__)


class MemoryService:  # Tracks recurring weak topics per user
    def __init__(self, store: TransactionalStore, config: Optional[EngineConfig] = None) -> None:
        self._store = store
        self._config = config or EngineConfig()

    def process_memory_update(self, user_id: str, weak_topics: Sequence[str]) -> MemoryUpdateResult:
        """Record this turn's weak topics and report the user's top weaknesses.

        With no usable topics nothing is written and ``updated_weak_skills`` is
        empty; the top list still reflects stored history. Store errors
        propagate to the caller.
        """

        updated: List[WeakSkillRecord] = []
        if unique_topics(weak_topics):
            updated = update_weak_skills(self._store, user_id, weak_topics)
        top = top_weak_skills(self._store, user_id, self._config.top_weak_skills_limit)
        log_event("memory.updated", user_id=user_id, updated=len(updated), top=top)
        return MemoryUpdateResult(updated_weak_skills=updated, top_weak_skills=top)


__all__ = ["MemoryService"]
