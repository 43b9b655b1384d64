"""Application settings and configuration management."""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/coach.db")

    SCORER_PROVIDER: Literal["mock", "http"] = "mock"
    LLM_CONFIG_PATH: Optional[str] = None
    LLM_ROUTE: str = "evaluator"
    SCORER_TIMEOUT_S: float = Field(default=30.0, gt=0.0)

    TOP_WEAK_SKILLS_LIMIT: int = Field(default=5, ge=1)
    CROSS_DIFFICULTY_FALLBACK: bool = False

    WEIGHT_TECHNICAL: float = 0.35
    WEIGHT_COMMUNICATION: float = 0.15
    WEIGHT_CONFIDENCE: float = 0.15
    WEIGHT_LOGIC: float = 0.20
    WEIGHT_DEPTH: float = 0.15

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", validate_assignment=True)


settings = Settings()
