import datetime as dt

import pytest

from domain.types import SessionScoreAverages
from readiness.calculator import ReadinessParams, calculate_readiness
from readiness.engine import ReadinessEngine


@pytest.mark.parametrize(
    "params,expected",
    [
        (ReadinessParams(overall_score=80, current_difficulty="medium"), 53.0),
        (ReadinessParams(overall_score=80, weak_skill_count=4, current_difficulty="hard", total_sessions=5), 57.0),
        (ReadinessParams(overall_score=100, current_difficulty="hard", total_sessions=12), 78.0),
        (ReadinessParams(overall_score=50, weak_skill_count=40), 10.0),
        (ReadinessParams(overall_score=10, weak_skill_count=40), 0.0),
        (ReadinessParams(overall_score=70, current_difficulty="legendary"), 42.0),
        (ReadinessParams(overall_score=70, weak_skill_count=-3, total_sessions=-1), 42.0),
    ],
)
def test_calculate_readiness(params, expected):
    assert calculate_readiness(params) == expected


def test_no_sessions_stores_zero(store):
    engine = ReadinessEngine(store)
    assert engine.update_readiness_index("u1") == 0
    row = store.with_transaction(lambda tx: tx.get_readiness("u1"), immediate=False)
    assert row is not None and row.readiness_score == 0


def test_update_uses_latest_session_breakdown(store, seed):
    now = dt.datetime.now(dt.timezone.utc)
    seed.session("u1", difficulty="easy", started_at=now - dt.timedelta(days=1))
    latest = seed.session("u1", difficulty="hard", started_at=now)
    store.with_transaction(
        lambda tx: tx.upsert_score_breakdown(latest.id, SessionScoreAverages(overall_score=90, response_count=1))
    )
    store.with_transaction(lambda tx: tx.insert_weak_skill("u1", "graphs", now))

    engine = ReadinessEngine(store)
    # 90*0.6 - 1.5 + 10 + 0
    assert engine.update_readiness_index("u1") == 62.5
    assert engine.get_readiness_score("u1") == 62.5


def test_missing_breakdown_counts_as_zero(store, seed):
    seed.session("u1", difficulty="medium")
    assert ReadinessEngine(store).update_readiness_index("u1") == 5.0


def test_get_readiness_defaults_to_zero(store):
    assert ReadinessEngine(store).get_readiness_score("nobody") == 0


class _DownStore:
    def with_transaction(self, fn, *, immediate=True):
        raise RuntimeError("database is locked")


def test_failures_degrade_to_zero():
    engine = ReadinessEngine(_DownStore())
    assert engine.update_readiness_index("u1") == 0
    assert engine.get_readiness_score("u1") == 0
