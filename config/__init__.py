"""Configuration package for the coaching engine."""
from .engine import DEFAULT_WEIGHTS, DIMENSIONS, EngineConfig, ScoreWeights
from .registry import SCORER_KEY, bind_model, get_model, has_model, unbind_model
from .routes import LlmRoute, RoutesConfig, load_routes, resolve_route
from .settings import Settings, settings

__all__ = [
    "DEFAULT_WEIGHTS",
    "DIMENSIONS",
    "EngineConfig",
    "ScoreWeights",
    "SCORER_KEY",
    "bind_model",
    "get_model",
    "has_model",
    "unbind_model",
    "LlmRoute",
    "RoutesConfig",
    "load_routes",
    "resolve_route",
    "Settings",
    "settings",
]
