import datetime as dt

import pytest

from badges.engine import BadgeEngine
from badges.rules import DEFAULT_RULES, BadgeRule
from domain.types import SessionScoreAverages


def _breakdown(store, session_id, **averages):
    store.with_transaction(lambda tx: tx.upsert_score_breakdown(session_id, SessionScoreAverages(**averages)))


def test_newly_qualifying_user_gets_badge_once(store, seed):
    session = seed.session("u1")
    _breakdown(store, session.id, technical_average=90, communication_average=50)
    engine = BadgeEngine(store)

    first = engine.evaluate_and_award_badges("u1")
    second = engine.evaluate_and_award_badges("u1")

    assert [(b.badge_name, b.is_new) for b in first] == [("DSA Master", True)]
    assert [(b.badge_name, b.is_new) for b in second] == [("DSA Master", False)]
    rows = store.with_transaction(lambda tx: tx.list_badges("u1"), immediate=False)
    assert len(rows) == 1


def test_context_uses_latest_session_and_readiness(store, seed):
    now = dt.datetime.now(dt.timezone.utc)
    old = seed.session("u1", started_at=now - dt.timedelta(days=2))
    new = seed.session("u1", started_at=now)
    _breakdown(store, old.id, communication_average=95)
    _breakdown(store, new.id, communication_average=40)
    store.with_transaction(lambda tx: tx.upsert_readiness("u1", 88.0, now))

    names = [b.badge_name for b in BadgeEngine(store).evaluate_and_award_badges("u1")]
    assert names == ["Interview Ready"]


def test_consistent_performer_after_ten_sessions(store, seed):
    for _ in range(10):
        seed.session("u1")
    names = [b.badge_name for b in BadgeEngine(store).evaluate_and_award_badges("u1")]
    assert names == ["Consistent Performer"]


def test_no_data_awards_nothing(store):
    assert BadgeEngine(store).evaluate_and_award_badges("nobody") == []


def test_raising_predicate_is_not_eligible(store, seed):
    seed.session("u1")

    def boom(ctx):
        raise ZeroDivisionError("bad rule")

    rules = [
        BadgeRule("Broken", "never", boom),
        BadgeRule("Showed Up", "one session", lambda ctx: ctx.total_sessions >= 1),
    ]
    result = BadgeEngine(store, rules).evaluate_and_award_badges("u1")
    assert [b.badge_name for b in result] == ["Showed Up"]


def test_duplicate_rule_names_rejected(store):
    with pytest.raises(ValueError):
        BadgeEngine(store, [DEFAULT_RULES[0], DEFAULT_RULES[0]])


def test_get_user_badges_newest_first_with_descriptions(store):
    now = dt.datetime.now(dt.timezone.utc)

    def _insert(tx):
        tx.insert_badge_if_absent("u1", "DSA Master", now - dt.timedelta(days=1))
        tx.insert_badge_if_absent("u1", "Retired Badge", now)

    store.with_transaction(_insert)
    badges = BadgeEngine(store).get_user_badges("u1")

    assert [b.badge_name for b in badges] == ["Retired Badge", "DSA Master"]
    assert badges[0].description == ""
    assert badges[1].description == DEFAULT_RULES[0].description
    assert all(b.is_new is False for b in badges)


class _DownStore:
    def with_transaction(self, fn, *, immediate=True):
        raise RuntimeError("database is locked")


def test_failures_degrade_to_empty():
    engine = BadgeEngine(_DownStore())
    assert engine.evaluate_and_award_badges("u1") == []
    assert engine.get_user_badges("u1") == []


def test_lost_insert_race_reports_stored_award(store, seed):
    session = seed.session("u1")
    _breakdown(store, session.id, technical_average=99)
    winner_at = dt.datetime(2024, 1, 1, tzinfo=dt.timezone.utc)

    class _RacingStore:
        """Another writer awards the badge between the read and the insert."""

        def with_transaction(self, fn, *, immediate=True):
            def _wrapped(tx):
                original = tx.insert_badge_if_absent

                def racing_insert(user_id, name, awarded_at):
                    original(user_id, name, winner_at)
                    return original(user_id, name, awarded_at)

                tx.insert_badge_if_absent = racing_insert
                return fn(tx)

            return store.with_transaction(_wrapped, immediate=immediate)

    result = BadgeEngine(_RacingStore()).evaluate_and_award_badges("u1")
    assert [(b.badge_name, b.is_new) for b in result] == [("DSA Master", False)]
    assert result[0].awarded_at == winner_at
