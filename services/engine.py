"""Wiring of the coaching engine components around one store and scorer."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from adaptive.orchestrator import AdaptiveOrchestrator
from adaptive.question_selector import QuestionSelector
from badges.engine import BadgeEngine
from config.engine import EngineConfig
from config.registry import SCORER_KEY, get_model, has_model
from config.routes import load_routes, resolve_route
from config.settings import Settings, settings
from evaluation.service import EvaluationService, Scorer
from llm_gateway import mock_completion, scorer_for
from memory.orchestrator import MemoryService
from readiness.engine import ReadinessEngine
from roadmap.engine import RoadmapEngine
from storage.store import SqliteStore, TransactionalStore

from .coach import CoachEngine

logger = logging.getLogger(__name__)


@dataclass
class Engine:
    config: EngineConfig
    store: TransactionalStore
    evaluation: EvaluationService
    selector: QuestionSelector
    coach: CoachEngine
    badges: BadgeEngine
    readiness: ReadinessEngine
    roadmap: RoadmapEngine


def resolve_scorer(cfg: Settings = settings) -> Scorer:
    """Registry binding first, then the configured provider.

    Raises:
        ValueError: If the http provider is selected without a route file.
        KeyError: If the configured route is missing from the route file.
    """

    if has_model(SCORER_KEY):
        return get_model(SCORER_KEY)
    if cfg.SCORER_PROVIDER == "http":
        if not cfg.LLM_CONFIG_PATH:
            raise ValueError("LLM_CONFIG_PATH is required when SCORER_PROVIDER=http")
        route = resolve_route(load_routes(Path(cfg.LLM_CONFIG_PATH)), cfg.LLM_ROUTE)
        logger.info("Using http scorer route=%s model=%s", route.name, route.model)
        return scorer_for(route)
    return mock_completion


def build_engine(
    config: Optional[EngineConfig] = None,
    store: Optional[TransactionalStore] = None,
    scorer: Optional[Scorer] = None,
    *,
    rng: Optional[random.Random] = None,
) -> Engine:
    """Assemble every component; missing pieces come from settings."""

    config = config or EngineConfig.from_settings(settings)
    store = store or SqliteStore()
    scorer = scorer or resolve_scorer(settings)

    selector = QuestionSelector(store, config, rng)
    coach = CoachEngine(
        memory=MemoryService(store, config),
        adaptive=AdaptiveOrchestrator(store, selector),
    )
    return Engine(
        config=config,
        store=store,
        evaluation=EvaluationService(store, scorer, config),
        selector=selector,
        coach=coach,
        badges=BadgeEngine(store),
        readiness=ReadinessEngine(store),
        roadmap=RoadmapEngine(store),
    )


__all__ = ["Engine", "build_engine", "resolve_scorer"]
