"""Tests for the SQLite migration and the transactional store."""
from __future__ import annotations

import datetime as dt
import os
import sqlite3

import pytest

from domain.types import SessionScoreAverages
from storage.migrate import migrate
from storage.models import ResponsePayload
from storage.store import SqliteStore


def test_migrate_is_idempotent(tmp_db: str):
    migrate(tmp_db)
    assert os.path.exists(tmp_db)
    conn = sqlite3.connect(tmp_db)
    try:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    finally:
        conn.close()
    assert {
        "interview_sessions",
        "questions",
        "responses",
        "score_breakdowns",
        "weak_skills",
        "badges",
        "readiness_index",
        "improvement_plans",
    } <= tables


def test_default_store_follows_settings_path(seed):
    session = seed.session("u1")
    assert SqliteStore().with_transaction(lambda tx: tx.get_session(session.id), immediate=False) is not None


def test_response_scores_and_breakdown_upsert(store, seed):
    session = seed.session("u1")
    question = seed.question(session_id=session.id)

    def _write(tx):
        tx.create_response(
            ResponsePayload(
                session_id=session.id,
                question_id=question.id,
                answer_text="answer",
                technical_score=80,
                communication_score=70,
                confidence_score=60,
                logic_score=50,
                depth_score=40,
            )
        )
        tx.upsert_score_breakdown(session.id, SessionScoreAverages(overall_score=10, technical_average=80))
        tx.upsert_score_breakdown(session.id, SessionScoreAverages(overall_score=20, technical_average=80))

    store.with_transaction(_write)

    sets = store.with_transaction(lambda tx: tx.list_score_sets(session.id), immediate=False)
    assert [s.technical_score for s in sets] == [80]
    breakdown = store.with_transaction(lambda tx: tx.get_score_breakdown(session.id), immediate=False)
    assert breakdown.overall_score == 20


def test_out_of_range_score_rejected_before_write():
    with pytest.raises(ValueError):
        ResponsePayload(
            session_id="s",
            question_id="q",
            answer_text="a",
            technical_score=101,
            communication_score=0,
            confidence_score=0,
            logic_score=0,
            depth_score=0,
        )


def test_error_inside_transaction_rolls_back(store):
    def _write(tx):
        tx.create_session("u1", role="SRE", difficulty="easy")
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        store.with_transaction(_write)
    assert store.with_transaction(lambda tx: tx.count_sessions("u1"), immediate=False) == 0


def test_latest_session_orders_by_start_time(store, seed):
    now = dt.datetime.now(dt.timezone.utc)
    newest = seed.session("u1", started_at=now)
    seed.session("u1", started_at=now - dt.timedelta(hours=3))
    latest = store.with_transaction(lambda tx: tx.latest_session("u1"), immediate=False)
    assert latest.id == newest.id


def test_update_unknown_session_raises(store):
    with pytest.raises(KeyError):
        store.with_transaction(lambda tx: tx.update_session_difficulty("ghost", "hard"))


def test_questions_are_found_by_normalised_category(store, seed):
    seed.question("Q", difficulty="easy", category="  Dynamic Programming ")
    found = store.with_transaction(
        lambda tx: tx.find_questions("easy", categories=["dynamic programming"]), immediate=False
    )
    assert [q.category for q in found] == ["dynamic programming"]


def test_badge_insert_is_idempotent(store):
    now = dt.datetime.now(dt.timezone.utc)
    assert store.with_transaction(lambda tx: tx.insert_badge_if_absent("u1", "DSA Master", now)) is True
    assert store.with_transaction(lambda tx: tx.insert_badge_if_absent("u1", "DSA Master", now)) is False
    assert len(store.with_transaction(lambda tx: tx.list_badges("u1"), immediate=False)) == 1


def test_readiness_upsert_replaces(store):
    now = dt.datetime.now(dt.timezone.utc)
    store.with_transaction(lambda tx: tx.upsert_readiness("u1", 40.0, now))
    store.with_transaction(lambda tx: tx.upsert_readiness("u1", 60.0, now))
    assert store.with_transaction(lambda tx: tx.get_readiness("u1"), immediate=False).readiness_score == 60.0


def test_badge_lookup_returns_stored_row(store):
    now = dt.datetime.now(dt.timezone.utc)
    store.with_transaction(lambda tx: tx.insert_badge_if_absent("u1", "DSA Master", now))
    row = store.with_transaction(lambda tx: tx.get_badge("u1", "DSA Master"), immediate=False)
    assert row.awarded_at == now
    assert store.with_transaction(lambda tx: tx.get_badge("u1", "Other"), immediate=False) is None


def test_improvement_plans_append_and_latest_wins(store):
    now = dt.datetime.now(dt.timezone.utc)
    store.with_transaction(lambda tx: tx.create_improvement_plan("u1", '{"week1": []}', now - dt.timedelta(days=1)))
    store.with_transaction(lambda tx: tx.create_improvement_plan("u1", '{"week1": [], "week2": []}', now))

    latest = store.with_transaction(lambda tx: tx.latest_improvement_plan("u1"), immediate=False)
    assert latest.plan_json == '{"week1": [], "week2": []}'
    assert store.with_transaction(lambda tx: tx.latest_improvement_plan("u2"), immediate=False) is None
