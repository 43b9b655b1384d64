from __future__ import annotations  # LLM request gateway module

import logging
import os
import threading
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

import httpx

from config import LlmRoute


logger = logging.getLogger(__name__)  # Module logger setup


_MODEL_LOCKS: Dict[str, threading.Lock] = {}
_MODEL_LOCKS_GUARD = threading.Lock()


class HttpClient(Protocol):  # Minimal HTTP client protocol
    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> "HttpResponse": ...


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


class LlmGatewayError(RuntimeError):  # Base gateway error
    pass


def _lock_for(cfg: LlmRoute) -> threading.Lock:
    key = cfg.name or f"{cfg.base_url}{cfg.endpoint}"
    with _MODEL_LOCKS_GUARD:
        lock = _MODEL_LOCKS.get(key)
        if lock is None:
            lock = threading.Lock()
            _MODEL_LOCKS[key] = lock
    return lock


def complete(
    prompt: str,
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
    options: Optional[Dict[str, Any]] = None,
) -> str:  # Send one prompt and return the raw reply text
    def _execute() -> str:
        payload: Dict[str, Any] = {
            "model": cfg.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": cfg.temperature,
            "max_tokens": cfg.max_tokens,
        }
        if options:
            payload.update(options)
        if cfg.response_format:
            payload["response_format"] = {"type": cfg.response_format}
        headers = {"Content-Type": "application/json"}
        if cfg.api_key_env:
            api_key = os.getenv(cfg.api_key_env)
            if api_key:
                headers["Authorization"] = f"Bearer {api_key}"
        headers.update(cfg.extra_headers)
        logger.info(
            "LLM request send route=%s model=%s preview=%s",
            cfg.name,
            cfg.model,
            _preview(prompt),
        )
        try:
            response, close_cb = _post(f"{cfg.base_url}{cfg.endpoint}", payload, headers, cfg.timeout_s, client)
        except Exception as exc:  # noqa: BLE001
            logger.error("LLM transport failure: %s", exc)
            raise LlmGatewayError("LLM transport failed") from exc
        try:
            if response.status_code >= 400:
                logger.error("LLM error status: %s", response.status_code)
                raise LlmGatewayError(f"LLM returned status {response.status_code}")
            try:
                data = response.json()
            except Exception as exc:  # noqa: BLE001
                logger.error("Invalid JSON payload from LLM: %s", exc)
                raise LlmGatewayError("LLM payload was not JSON") from exc
            content = _extract_content(data)
        finally:
            _close_safely(close_cb)
        if not content.strip():
            raise LlmGatewayError("LLM returned empty content")
        logger.info("LLM request done route=%s model=%s chars=%d", cfg.name, cfg.model, len(content))
        return content

    if cfg.sequential:
        with _lock_for(cfg):
            return _execute()
    return _execute()


def scorer_for(cfg: LlmRoute, *, client: Optional[HttpClient] = None) -> Callable[[str], str]:  # Bind a route into a text-in/text-out scorer
    def _scorer(prompt: str) -> str:
        return complete(prompt, cfg=cfg, client=client)

    return _scorer


def _post(url: str, payload: Dict[str, Any], headers: Dict[str, str], timeout: float, client: Optional[HttpClient]) -> Tuple[HttpResponse, Optional[Callable[[], None]]]:  # Dispatch HTTP request
    if client is not None:
        response = client.post(url, json=payload, headers=headers, timeout=timeout)
        return response, None
    http_client = httpx.Client(timeout=timeout)
    try:
        response = http_client.post(url, json=payload, headers=headers)
    except Exception:
        http_client.close()
        raise
    return response, http_client.close


def _close_safely(close_cb: Optional[Callable[[], None]]) -> None:  # Close HTTP client callback when provided
    if close_cb is not None:
        close_cb()


def _preview(text: str) -> str:  # Build preview string for logging
    for line in text.splitlines():
        line = line.strip()
        if line:
            return line if len(line) <= 120 else line[:117] + "..."
    return ""


def _extract_content(data: Any) -> str:  # Extract message content from LLM response
    if isinstance(data, dict):
        choices = data.get("choices")
        if isinstance(choices, list) and choices:
            message = choices[0].get("message") if isinstance(choices[0], dict) else None
            content = message.get("content") if isinstance(message, dict) else None
            if isinstance(content, str):
                return content
        if isinstance(data.get("content"), str):
            return data["content"]
    raise LlmGatewayError("LLM response missing content")
