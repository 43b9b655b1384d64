import json

import pytest
from pydantic import ValidationError

from config.engine import DEFAULT_WEIGHTS, EngineConfig, ScoreWeights
from config.registry import SCORER_KEY, bind_model, get_model, has_model, unbind_model
from config.routes import load_routes, resolve_route
from config.settings import Settings


def test_settings_defaults():
    settings = Settings(_env_file=None)
    assert settings.DB_PATH.endswith(".db")
    assert settings.SCORER_PROVIDER == "mock"
    assert settings.TOP_WEAK_SKILLS_LIMIT == 5
    assert settings.CROSS_DIFFICULTY_FALLBACK is False


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("SCORER_TIMEOUT_S", "2.5")
    monkeypatch.setenv("CROSS_DIFFICULTY_FALLBACK", "true")
    settings = Settings(_env_file=None)
    assert settings.SCORER_TIMEOUT_S == 2.5
    assert settings.CROSS_DIFFICULTY_FALLBACK is True


def test_default_weights_sum_to_one():
    assert sum(DEFAULT_WEIGHTS.as_dict().values()) == pytest.approx(1.0)
    assert DEFAULT_WEIGHTS.as_dict() == {
        "technical": 0.35,
        "communication": 0.15,
        "confidence": 0.15,
        "logic": 0.20,
        "depth": 0.15,
    }


def test_bad_weight_sum_fails_at_startup():
    settings = Settings(_env_file=None, WEIGHT_TECHNICAL=0.5)
    with pytest.raises(ValidationError):
        EngineConfig.from_settings(settings)


def test_negative_weight_rejected():
    with pytest.raises(ValidationError):
        ScoreWeights(technical=-0.1, communication=0.3, confidence=0.3, logic=0.3, depth=0.2)


def test_engine_config_from_settings():
    config = EngineConfig.from_settings(Settings(_env_file=None, TOP_WEAK_SKILLS_LIMIT=3))
    assert config.top_weak_skills_limit == 3
    assert config.weights == DEFAULT_WEIGHTS


def test_engine_config_rejects_zero_limit_and_timeout():
    with pytest.raises(ValidationError):
        EngineConfig(top_weak_skills_limit=0)
    with pytest.raises(ValidationError):
        EngineConfig(scorer_timeout_s=0)


def test_registry_bind_and_retrieve():
    marker = object()
    bind_model(SCORER_KEY, lambda *_: marker)
    assert has_model(SCORER_KEY)
    assert get_model(SCORER_KEY)("prompt") is marker
    unbind_model(SCORER_KEY)
    with pytest.raises(KeyError):
        get_model(SCORER_KEY)


def test_load_and_resolve_routes(tmp_path):
    path = tmp_path / "routes.json"
    path.write_text(
        json.dumps(
            {
                "llm_routes": {
                    "evaluator": {
                        "name": "evaluator",
                        "base_url": "http://localhost:11434",
                        "endpoint": "/v1/chat/completions",
                        "model": "llama3",
                        "timeout_s": 20,
                    }
                }
            }
        ),
        encoding="utf-8",
    )
    routes = load_routes(path)
    assert resolve_route(routes, "evaluator").model == "llama3"
    with pytest.raises(KeyError):
        resolve_route(routes, "missing")
