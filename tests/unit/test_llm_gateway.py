import json
import random

import pytest

from config.routes import LlmRoute
from evaluation.schema import safe_parse
from llm_gateway import LlmGatewayError, complete, mock_completion, scorer_for


class _Resp:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _Client:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def post(self, url, *, json, headers, timeout):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def _route(**overrides) -> LlmRoute:
    base = dict(
        name="evaluator",
        base_url="http://llm.local",
        endpoint="/v1/chat/completions",
        model="test-model",
        timeout_s=5,
        api_key_env="COACH_TEST_KEY",
        response_format="json_object",
    )
    base.update(overrides)
    return LlmRoute(**base)


def test_complete_posts_chat_payload(monkeypatch):
    monkeypatch.setenv("COACH_TEST_KEY", "secret")
    client = _Client(_Resp(payload={"choices": [{"message": {"content": '{"ok": true}'}}]}))

    assert complete("score this", cfg=_route(), client=client) == '{"ok": true}'

    call = client.calls[0]
    assert call["url"] == "http://llm.local/v1/chat/completions"
    assert call["json"]["model"] == "test-model"
    assert call["json"]["messages"] == [{"role": "user", "content": "score this"}]
    assert call["json"]["response_format"] == {"type": "json_object"}
    assert call["headers"]["Authorization"] == "Bearer secret"
    assert call["timeout"] == 5


@pytest.mark.parametrize(
    "response",
    [
        _Resp(status_code=500, payload={}),
        _Resp(payload=ValueError("not json")),
        _Resp(payload={"choices": []}),
        _Resp(payload={"choices": [{"message": {"content": "   "}}]}),
        ConnectionError("refused"),
    ],
)
def test_complete_raises_gateway_error(response):
    with pytest.raises(LlmGatewayError):
        complete("x", cfg=_route(), client=_Client(response))


def test_scorer_for_binds_route():
    client = _Client(_Resp(payload={"content": "raw reply"}))
    scorer = scorer_for(_route(sequential=True), client=client)
    assert scorer("prompt") == "raw reply"


def test_mock_completion_is_schema_valid():
    for seed in range(20):
        raw = mock_completion("prompt", rng=random.Random(seed))
        outcome = safe_parse(raw)
        assert outcome.success is True, outcome.errors
        assert json.loads(raw)["difficulty_recommendation"] in ("increase", "decrease", "maintain")
