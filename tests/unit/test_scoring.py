import pytest

from config.engine import ScoreWeights
from domain.types import ScoreSet
from services.scoring import averages, clamp_score, round2, weighted_overall


def _set(t, c, f, l, d) -> ScoreSet:
    return ScoreSet(
        technical_score=t,
        communication_score=c,
        confidence_score=f,
        logic_score=l,
        depth_score=d,
    )


def test_empty_session_is_all_zero():
    result = averages([])
    assert result.response_count == 0
    assert result.overall_score == 0
    assert result.technical_average == 0
    assert result.depth_average == 0


def test_single_response_uses_weighted_formula():
    result = averages([_set(90, 80, 70, 60, 50)])
    expected = 90 * 0.35 + 80 * 0.15 + 70 * 0.15 + 60 * 0.20 + 50 * 0.15
    assert result.overall_score == pytest.approx(expected)
    assert result.overall_score == 73.5
    assert result.technical_average == 90
    assert result.response_count == 1


def test_averages_are_means_rounded_to_two_places():
    result = averages([_set(100, 0, 0, 0, 0), _set(0, 0, 0, 0, 0), _set(0, 0, 0, 0, 0)])
    assert result.technical_average == 33.33
    assert result.overall_score == round2(33.33 * 0.35)
    assert result.response_count == 3


def test_overall_is_recomputed_from_averages_not_responses():
    responses = [_set(80, 60, 60, 70, 50), _set(60, 80, 70, 50, 70)]
    result = averages(responses)
    assert result.overall_score == weighted_overall(
        result.technical_average,
        result.communication_average,
        result.confidence_average,
        result.logic_average,
        result.depth_average,
    )


def test_custom_weights_change_overall():
    tech_only = ScoreWeights(technical=1.0, communication=0.0, confidence=0.0, logic=0.0, depth=0.0)
    result = averages([_set(42, 100, 100, 100, 100)], tech_only)
    assert result.overall_score == 42


@pytest.mark.parametrize("raw,expected", [(-5, 0.0), (150, 100.0), (55.555, 55.56), (0, 0.0)])
def test_clamp_score(raw, expected):
    assert clamp_score(raw) == expected


@pytest.mark.parametrize("raw,expected", [(0.125, 0.13), (55.555, 55.56), (33.3333, 33.33), (73.5, 73.5)])
def test_round2_rounds_halves_up(raw, expected):
    assert round2(raw) == expected
