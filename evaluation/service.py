"""Evaluation pipeline: validate, score, parse, persist atomically."""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, Field

from config.engine import EngineConfig
from domain.types import COMPANY_PRESETS, DIFFICULTIES, INTERVIEW_MODES, SessionScoreAverages
from llm_gateway import LlmGatewayError
from observability import log_event, span
from services.errors import ExternalServiceError, InputValidationError, NotFoundError, TransactionError
from services.scoring import averages
from storage.models import ResponsePayload
from storage.store import StoreTx, TransactionalStore

from .prompt import EvaluationPromptParams, build_evaluation_prompt
from .schema import (
    SCORER_UNAVAILABLE_FEEDBACK,
    EvaluationResult,
    fallback_evaluation,
    safe_parse,
)

logger = logging.getLogger(__name__)

Scorer = Callable[[str], str]

_SCORER_POOL = ThreadPoolExecutor(max_workers=8, thread_name_prefix="scorer")

_SESSION_LOCKS: Dict[str, Tuple[threading.Lock, int]] = {}
_SESSION_LOCKS_GUARD = threading.Lock()


@contextmanager
def _session_lock(session_id: str) -> Iterator[None]:
    """Serialise writers of one session; the entry is dropped once unused."""

    with _SESSION_LOCKS_GUARD:
        lock, users = _SESSION_LOCKS.get(session_id, (None, 0))
        if lock is None:
            lock = threading.Lock()
        _SESSION_LOCKS[session_id] = (lock, users + 1)
    try:
        with lock:
            yield
    finally:
        with _SESSION_LOCKS_GUARD:
            lock, users = _SESSION_LOCKS[session_id]
            if users <= 1:
                del _SESSION_LOCKS[session_id]
            else:
                _SESSION_LOCKS[session_id] = (lock, users - 1)


class EvaluationInput(BaseModel):
    """Caller arguments for one answer evaluation.

    Fields are deliberately loose so malformed values reach the pipeline's own
    validation and come back as a structured failure instead of an exception.
    """

    session_id: str = ""
    question_id: str = ""
    user_answer: str = ""
    question_text: str = ""
    role: str = ""
    difficulty: str = ""
    mode: str = ""
    category: str = "general"
    company_preset: Optional[str] = None


class EvaluationOutput(BaseModel):
    success: bool
    response_id: str = ""
    evaluation: EvaluationResult
    session_averages: SessionScoreAverages = Field(default_factory=SessionScoreAverages)
    llm_output_valid: bool = False
    used_fallback: bool = False
    validation_errors: List[str] = Field(default_factory=list)
    error: Optional[str] = None


def failure_output(error: str, *, used_fallback: bool = False) -> EvaluationOutput:
    """Structured result for a rejected or rolled-back evaluation.

    ``used_fallback`` reports whether scoring had already fallen back before
    the failure; rejected input never reaches the scorer.
    """

    return EvaluationOutput(
        success=False,
        evaluation=fallback_evaluation(),
        session_averages=SessionScoreAverages(),
        llm_output_valid=False,
        used_fallback=used_fallback,
        validation_errors=[error],
        error=error,
    )


def validate_input(payload: EvaluationInput) -> None:
    """Reject malformed caller arguments before any side effect.

    Raises:
        InputValidationError: On the first invalid field.
    """

    for field in ("session_id", "question_id", "user_answer", "question_text", "role"):
        value = getattr(payload, field)
        if not isinstance(value, str) or not value.strip():
            raise InputValidationError(f"{field} is required and must be a non-empty string")
    if payload.difficulty not in DIFFICULTIES:
        raise InputValidationError('difficulty must be "easy", "medium", or "hard"')
    if payload.mode not in INTERVIEW_MODES:
        raise InputValidationError('mode must be "normal", "stress", or "company"')
    if payload.company_preset is not None and payload.company_preset not in COMPANY_PRESETS:
        raise InputValidationError(f"company_preset must be one of {', '.join(COMPANY_PRESETS)}")


class EvaluationService:  # Single entry point for answer evaluation
    def __init__(
        self,
        store: TransactionalStore,
        scorer: Scorer,
        config: Optional[EngineConfig] = None,
        *,
        executor: Optional[Executor] = None,
    ) -> None:
        self._store = store
        self._scorer = scorer
        self._config = config or EngineConfig()
        self._executor = executor or _SCORER_POOL

    def evaluate_response(self, payload: EvaluationInput) -> EvaluationOutput:
        """Run the full evaluation pipeline; never raises.

        Input and lookup problems are rejected before any write. Scorer and
        parse problems fall back to safe values and the pipeline continues.
        Only a failed persistence transaction yields ``success=False`` after
        scoring.
        """

        try:
            validate_input(payload)
            self._check_references(payload.session_id, payload.question_id)
        except (InputValidationError, NotFoundError) as exc:
            logger.warning("Evaluation rejected: %s", exc)
            log_event("evaluation.failed", payload.session_id or None, outcome="rejected", error=str(exc))
            return failure_output(str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.error("Session/question lookup failed: %s", exc)
            return failure_output(f"Database error during validation: {exc}")

        prompt = build_evaluation_prompt(
            EvaluationPromptParams(
                question_text=payload.question_text,
                user_answer=payload.user_answer,
                role=payload.role,
                difficulty=payload.difficulty,  # type: ignore[arg-type]
                mode=payload.mode,  # type: ignore[arg-type]
                category=payload.category or "general",
                company_preset=payload.company_preset,  # type: ignore[arg-type]
            )
        )

        evaluation, valid, errors, used_fallback = self._score(prompt, payload.session_id)

        try:
            response_id, session_averages = self._persist(payload, evaluation)
        except TransactionError as exc:
            logger.error("Evaluation transaction failed (rolled back): %s", exc)
            log_event("evaluation.failed", payload.session_id, outcome="rolled_back", error=str(exc))
            return failure_output(str(exc), used_fallback=used_fallback)

        log_event(
            "evaluation.persisted",
            payload.session_id,
            response_id=response_id,
            score=session_averages.overall_score,
            valid=valid,
            outcome="fallback" if used_fallback else "scored",
        )
        return EvaluationOutput(
            success=True,
            response_id=response_id,
            evaluation=evaluation,
            session_averages=session_averages,
            llm_output_valid=valid,
            used_fallback=used_fallback,
            validation_errors=errors,
        )

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------
    def _check_references(self, session_id: str, question_id: str) -> None:
        def _lookup(tx: StoreTx):
            return tx.get_session(session_id), tx.get_question(question_id)

        session, question = self._store.with_transaction(_lookup, immediate=False)
        if session is None:
            raise NotFoundError(f"Session not found: {session_id}")
        if question is None:
            raise NotFoundError(f"Question not found: {question_id}")
        if question.session_id != session_id:
            raise NotFoundError("Question does not belong to the specified session")

    def _score(self, prompt: str, session_id: str) -> Tuple[EvaluationResult, bool, List[str], bool]:
        try:
            with span("evaluation.scorer", session_id):
                raw = self._call_scorer(prompt)
        except ExternalServiceError as exc:
            logger.warning("Scorer unavailable, using fallback evaluation: %s", exc)
            log_event("evaluation.fallback", session_id, outcome="scorer_failed", error=str(exc))
            return fallback_evaluation(SCORER_UNAVAILABLE_FEEDBACK), False, [str(exc)], True

        outcome = safe_parse(raw)
        if not outcome.success:
            logger.warning("Scorer output invalid, using partial/fallback values: %s", outcome.errors)
        return outcome.data, outcome.success, outcome.errors, False

    def _call_scorer(self, prompt: str) -> str:
        """Invoke the scorer under a hard timeout, outside any transaction.

        Raises:
            ExternalServiceError: On timeout, scorer failure or an empty reply.
        """

        timeout = self._config.scorer_timeout_s
        future = self._executor.submit(self._scorer, prompt)
        try:
            raw = future.result(timeout=timeout)
        except FutureTimeout as exc:
            future.cancel()
            raise ExternalServiceError(f"Scorer timed out after {timeout}s") from exc
        except LlmGatewayError as exc:
            raise ExternalServiceError(f"Scorer call failed: {exc}") from exc
        except Exception as exc:  # noqa: BLE001
            raise ExternalServiceError(f"Scorer call failed: {exc}") from exc
        if not isinstance(raw, str) or not raw.strip():
            raise ExternalServiceError("Scorer returned an empty response")
        return raw

    def _persist(self, payload: EvaluationInput, evaluation: EvaluationResult) -> Tuple[str, SessionScoreAverages]:
        """Write the response and recompute the session aggregate atomically.

        Raises:
            TransactionError: If any write fails; nothing is committed.
        """

        weights = self._config.weights

        def _write(tx: StoreTx) -> Tuple[str, SessionScoreAverages]:
            response = tx.create_response(
                ResponsePayload(
                    session_id=payload.session_id,
                    question_id=payload.question_id,
                    answer_text=payload.user_answer,
                    technical_score=evaluation.technical_score,
                    communication_score=evaluation.communication_score,
                    confidence_score=evaluation.confidence_score,
                    logic_score=evaluation.logic_score,
                    depth_score=evaluation.depth_score,
                    feedback=evaluation.feedback or None,
                    ideal_answer=evaluation.ideal_answer or None,
                    improvement_tip=evaluation.improvement_tip or None,
                )
            )
            session_averages = averages(tx.list_score_sets(payload.session_id), weights)
            tx.upsert_score_breakdown(payload.session_id, session_averages)
            tx.update_session_score(payload.session_id, session_averages.overall_score)
            return response.id, session_averages

        try:
            with _session_lock(payload.session_id):
                return self._store.with_transaction(_write)
        except Exception as exc:  # noqa: BLE001
            raise TransactionError(f"Database transaction failed: {exc}") from exc


__all__ = [
    "Scorer",
    "EvaluationInput",
    "EvaluationOutput",
    "EvaluationService",
    "failure_output",
    "validate_input",
]
