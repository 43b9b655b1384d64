"""Validation of raw scorer output into a strict, clamped evaluation record."""
from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Annotated, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, Field, ValidationError

from domain.types import RECOMMENDATIONS, Recommendation
from services.errors import OutputValidationError
from services.scoring import clamp_score

logger = logging.getLogger(__name__)

SCORE_FIELDS = (
    "technical_score",
    "communication_score",
    "confidence_score",
    "logic_score",
    "depth_score",
)
TEXT_FIELDS = ("feedback", "ideal_answer", "improvement_tip")
LIST_FIELDS = ("weak_topics", "strengths")

_PREVIEW_CHARS = 500
_FENCE_OPEN = re.compile(r"^\s*```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```\s*$")


def _coerce_score(value: Any) -> Optional[float]:
    # bool is an int subclass but never a score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        # ints past the float range saturate like an infinite score
        number = math.inf if value > 0 else -math.inf
    if math.isnan(number):
        return None
    return clamp_score(number)


def _clamped(value: Any) -> float:
    score = _coerce_score(value)
    if score is None:
        raise ValueError("score must be a number")
    return score


ClampedScore = Annotated[float, BeforeValidator(_clamped)]


class EvaluationResult(BaseModel):  # Validated per-answer evaluation
    technical_score: ClampedScore
    communication_score: ClampedScore
    confidence_score: ClampedScore
    logic_score: ClampedScore
    depth_score: ClampedScore
    difficulty_recommendation: Recommendation
    weak_topics: List[str] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    feedback: str = Field(min_length=1)
    ideal_answer: str = Field(min_length=1)
    improvement_tip: str = Field(min_length=1)


class ParseOutcome(BaseModel):  # Result of safe_parse
    success: bool
    data: EvaluationResult
    errors: List[str] = Field(default_factory=list)


FALLBACK_FEEDBACK = "Evaluation failed. Default applied."
SCORER_UNAVAILABLE_FEEDBACK = "Evaluation could not be completed. Default scores applied."


def fallback_evaluation(feedback: str = FALLBACK_FEEDBACK) -> EvaluationResult:
    """Return the fully safe evaluation used whenever scorer output is unusable."""

    return EvaluationResult(
        technical_score=50,
        communication_score=50,
        confidence_score=50,
        logic_score=50,
        depth_score=50,
        difficulty_recommendation="maintain",
        weak_topics=[],
        strengths=[],
        feedback=feedback,
        ideal_answer="No ideal answer is available for this question.",
        improvement_tip="Review the core concepts behind this question and try answering again.",
    )


def strip_code_fences(text: str) -> str:
    """Remove an optional ``` / ```json wrapper around the payload."""

    return _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", text)).strip()


def _format_errors(exc: ValidationError) -> List[str]:
    errors: List[str] = []
    for issue in exc.errors():
        path = ".".join(str(part) for part in issue.get("loc", ()))
        errors.append(f"{path}: {issue.get('msg', 'invalid value')}")
    return errors


def parse_evaluation(raw_text: str) -> EvaluationResult:
    """Strictly parse scorer output.

    Raises:
        OutputValidationError: When the text is not JSON or fails the schema.
            ``exc.parsed`` holds the decoded JSON when decoding succeeded.
    """

    try:
        parsed = json.loads(strip_code_fences(raw_text))
    except (json.JSONDecodeError, TypeError, RecursionError) as exc:
        raise OutputValidationError([f"JSON parse failed: {exc}"]) from exc
    try:
        return EvaluationResult.model_validate(parsed)
    except ValidationError as exc:
        raise OutputValidationError(_format_errors(exc), parsed=parsed, decoded=True) from exc


def recover_partial(parsed: Any) -> EvaluationResult:
    """Copy every individually valid field over the safe fallback."""

    recovered = fallback_evaluation().model_dump()
    if not isinstance(parsed, dict):
        return EvaluationResult.model_validate(recovered)

    obj: Dict[str, Any] = parsed
    for field in SCORE_FIELDS:
        score = _coerce_score(obj.get(field))
        if score is not None:
            recovered[field] = score

    rec = obj.get("difficulty_recommendation")
    if isinstance(rec, str) and rec in RECOMMENDATIONS:
        recovered["difficulty_recommendation"] = rec

    for field in LIST_FIELDS:
        items = obj.get(field)
        if isinstance(items, list):
            recovered[field] = [item for item in items if isinstance(item, str)]

    for field in TEXT_FIELDS:
        text = obj.get(field)
        if isinstance(text, str) and text:
            recovered[field] = text

    return EvaluationResult.model_validate(recovered)


def _outcome(raw_text: str) -> ParseOutcome:
    try:
        return ParseOutcome(success=True, data=parse_evaluation(raw_text), errors=[])
    except OutputValidationError as exc:
        if not exc.decoded:
            logger.warning(
                "Scorer output is not JSON: %s preview=%r",
                exc.errors,
                str(raw_text)[:_PREVIEW_CHARS],
            )
            return ParseOutcome(success=False, data=fallback_evaluation(), errors=exc.errors)
        logger.warning(
            "Scorer output failed validation: %s preview=%s",
            exc.errors,
            json.dumps(exc.parsed, default=str)[:_PREVIEW_CHARS],
        )
        return ParseOutcome(success=False, data=recover_partial(exc.parsed), errors=exc.errors)


def safe_parse(raw_text: str) -> ParseOutcome:
    """Parse untrusted scorer output; never raises.

    Returns ``success=True`` only for schema-valid output. Otherwise the data is
    the safe fallback with any recoverable fields copied in, and ``errors``
    lists what went wrong.
    """

    try:
        return _outcome(raw_text)
    except Exception as exc:  # noqa: BLE001
        logger.error("Scorer output could not be processed: %s", exc)
        return ParseOutcome(success=False, data=fallback_evaluation(), errors=[f"Unprocessable output: {exc}"])


__all__ = [
    "EvaluationResult",
    "ParseOutcome",
    "FALLBACK_FEEDBACK",
    "SCORER_UNAVAILABLE_FEEDBACK",
    "fallback_evaluation",
    "strip_code_fences",
    "parse_evaluation",
    "recover_partial",
    "safe_parse",
]
