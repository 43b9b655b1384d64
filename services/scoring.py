"""Score aggregation helpers for session-level averages."""
from __future__ import annotations

import math
from typing import Sequence

from config.engine import DEFAULT_WEIGHTS, ScoreWeights
from domain.types import ScoreSet, SessionScoreAverages


def round2(value: float) -> float:
    """Round to two decimal places, halves going up (55.555 -> 55.56)."""
    return math.floor(value * 100 + 0.5) / 100


def clamp_score(value: float) -> float:
    """Clamp a score into [0, 100] and round it to two decimals."""
    return round2(min(100.0, max(0.0, float(value))))


def weighted_overall(
    technical: float,
    communication: float,
    confidence: float,
    logic: float,
    depth: float,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> float:
    """Combine dimension averages into the weighted overall score."""

    total = (
        technical * weights.technical
        + communication * weights.communication
        + confidence * weights.confidence
        + logic * weights.logic
        + depth * weights.depth
    )
    return round2(total)


def averages(responses: Sequence[ScoreSet], weights: ScoreWeights = DEFAULT_WEIGHTS) -> SessionScoreAverages:
    """Compute per-dimension means and the weighted overall for a session.

    Pure and deterministic so it behaves identically against a fresh query or
    an in-transaction snapshot. An empty sequence yields all zeros.
    """

    count = len(responses)
    if count == 0:
        return SessionScoreAverages()

    technical = round2(sum(r.technical_score for r in responses) / count)
    communication = round2(sum(r.communication_score for r in responses) / count)
    confidence = round2(sum(r.confidence_score for r in responses) / count)
    logic = round2(sum(r.logic_score for r in responses) / count)
    depth = round2(sum(r.depth_score for r in responses) / count)

    return SessionScoreAverages(
        overall_score=weighted_overall(technical, communication, confidence, logic, depth, weights),
        technical_average=technical,
        communication_average=communication,
        confidence_average=confidence,
        logic_average=logic,
        depth_average=depth,
        response_count=count,
    )


__all__ = ["round2", "clamp_score", "weighted_overall", "averages"]
