from __future__ import annotations  # Re-export llm_gateway public API

from .llm_gateway import HttpClient, HttpResponse, LlmGatewayError, complete, scorer_for
from .mock import mock_completion

__all__ = ["HttpClient", "HttpResponse", "LlmGatewayError", "complete", "scorer_for", "mock_completion"]
