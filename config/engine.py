"""Engine configuration passed to every component at construction time."""
from __future__ import annotations

import math
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .settings import Settings

DIMENSIONS = ("technical", "communication", "confidence", "logic", "depth")


class ScoreWeights(BaseModel):  # Per-dimension contribution to the overall score
    model_config = ConfigDict(frozen=True)

    technical: float = Field(default=0.35, ge=0.0, le=1.0)
    communication: float = Field(default=0.15, ge=0.0, le=1.0)
    confidence: float = Field(default=0.15, ge=0.0, le=1.0)
    logic: float = Field(default=0.20, ge=0.0, le=1.0)
    depth: float = Field(default=0.15, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_sum(self) -> "ScoreWeights":
        total = sum(self.as_dict().values())
        if not math.isclose(total, 1.0, rel_tol=0.0, abs_tol=1e-9):
            raise ValueError(f"score weights must sum to 1.0, got {total}")
        return self

    def as_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in DIMENSIONS}


DEFAULT_WEIGHTS = ScoreWeights()


class EngineConfig(BaseModel):
    """Immutable knobs shared by the scoring, adaptive and memory layers."""

    model_config = ConfigDict(frozen=True)

    weights: ScoreWeights = Field(default_factory=ScoreWeights)
    scorer_timeout_s: float = Field(default=30.0, gt=0.0)
    top_weak_skills_limit: int = Field(default=5, ge=1)
    cross_difficulty_fallback: bool = False

    @classmethod
    def from_settings(cls, cfg: Settings) -> "EngineConfig":
        """Build the engine config from environment settings.

        Raises:
            pydantic.ValidationError: If the configured weights do not sum to 1.0.
        """

        weights = ScoreWeights(
            technical=cfg.WEIGHT_TECHNICAL,
            communication=cfg.WEIGHT_COMMUNICATION,
            confidence=cfg.WEIGHT_CONFIDENCE,
            logic=cfg.WEIGHT_LOGIC,
            depth=cfg.WEIGHT_DEPTH,
        )
        return cls(
            weights=weights,
            scorer_timeout_s=cfg.SCORER_TIMEOUT_S,
            top_weak_skills_limit=cfg.TOP_WEAK_SKILLS_LIMIT,
            cross_difficulty_fallback=cfg.CROSS_DIFFICULTY_FALLBACK,
        )
