from __future__ import annotations  # Configuration schema for LLM routing

from pathlib import Path
from typing import Dict

from pydantic import BaseModel, Field


class LlmRoute(BaseModel):  # LLM endpoint configuration
    name: str
    base_url: str
    endpoint: str
    model: str
    timeout_s: float = Field(ge=0.1)
    api_key_env: str | None = None
    response_format: str | None = None
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2048, ge=1)
    extra_headers: Dict[str, str] = Field(default_factory=dict)
    sequential: bool = False


class RoutesConfig(BaseModel):  # Route file root
    llm_routes: Dict[str, LlmRoute]


def load_routes(path: Path) -> RoutesConfig:  # Load route configuration from disk
    data = path.read_text(encoding="utf-8")
    return RoutesConfig.model_validate_json(data)


def resolve_route(cfg: RoutesConfig, route_id: str) -> LlmRoute:  # Look up a named route
    if route_id not in cfg.llm_routes:
        raise KeyError(f"Route '{route_id}' missing from LLM configuration")
    return cfg.llm_routes[route_id]
