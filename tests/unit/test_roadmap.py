import datetime as dt

from domain.types import SessionScoreAverages
from roadmap.engine import RoadmapEngine, default_roadmap
from roadmap.generator import RoadmapParams, generate_roadmap, low_categories


def _topics(week):
    return [task.topic for task in week]


def test_empty_profile_still_fills_every_week():
    roadmap = generate_roadmap(RoadmapParams())
    assert _topics(roadmap.week1)[0] == "General Fundamentals"
    assert all([roadmap.week1, roadmap.week2, roadmap.week3, roadmap.week4])
    assert "general topics" in roadmap.week4[2].action
    assert "Advanced practice" not in " ".join(task.action for task in roadmap.week3)


def test_weak_skills_are_split_across_weeks():
    skills = ["graphs", "dp", "sql", "caching", "os", "networks"]
    roadmap = generate_roadmap(
        RoadmapParams(
            weak_skills=skills,
            technical_average=90,
            communication_average=90,
            logic_average=90,
            difficulty="medium",
        )
    )

    assert _topics(roadmap.week1) == ["graphs", "dp", "Self-Assessment"]
    assert _topics(roadmap.week2) == ["Timed Problem Solving", "sql", "caching", "os", "Mock Interview"]
    assert roadmap.week3[2].topic == "graphs"
    assert "graphs, dp, sql, caching" in roadmap.week4[2].action
    assert roadmap.week1[0].frequency == "3-5 problems/day"
    assert roadmap.week2[-1].frequency == "2 mock interviews/week"


def test_low_categories_feed_weeks_one_and_two():
    params = RoadmapParams(technical_average=40, communication_average=64.99, logic_average=65, difficulty="hard")
    assert low_categories(params) == ["technical skills", "communication"]

    roadmap = generate_roadmap(params)
    assert _topics(roadmap.week1) == ["General Fundamentals", "technical skills", "Self-Assessment"]
    assert _topics(roadmap.week2)[1:3] == ["technical skills", "communication"]
    assert roadmap.week4[0].frequency == "3 mock interviews/week"


def test_generation_is_deterministic_and_leaves_input_alone():
    params = RoadmapParams(weak_skills=["graphs", "dp", "sql"], technical_average=50)
    first = generate_roadmap(params)
    assert generate_roadmap(params) == first
    assert params.weak_skills == ["graphs", "dp", "sql"]


def test_generate_and_store_uses_latest_session(store, seed):
    now = dt.datetime.now(dt.timezone.utc)
    seed.session("u1", difficulty="easy", started_at=now - dt.timedelta(days=1))
    latest = seed.session("u1", difficulty="hard", started_at=now)
    store.with_transaction(
        lambda tx: tx.upsert_score_breakdown(
            latest.id,
            SessionScoreAverages(technical_average=90, communication_average=50, logic_average=90, response_count=1),
        )
    )
    store.with_transaction(lambda tx: tx.insert_weak_skill("u1", "graphs", now))

    engine = RoadmapEngine(store)
    roadmap = engine.generate_and_store_roadmap("u1")

    assert _topics(roadmap.week1) == ["graphs", "communication", "Self-Assessment"]
    assert roadmap.week1[0].frequency == "4-6 problems/day"
    assert engine.get_latest_roadmap("u1") == roadmap


def test_each_generation_is_kept_and_latest_wins(store, seed):
    engine = RoadmapEngine(store)
    first = engine.generate_and_store_roadmap("u1")
    store.with_transaction(lambda tx: tx.insert_weak_skill("u1", "sql", dt.datetime.now(dt.timezone.utc)))
    second = engine.generate_and_store_roadmap("u1")

    assert first != second
    assert engine.get_latest_roadmap("u1") == second


def test_latest_roadmap_is_none_without_history(store):
    assert RoadmapEngine(store).get_latest_roadmap("nobody") is None


class _DownStore:
    def with_transaction(self, fn, *, immediate=True):
        raise RuntimeError("database is locked")


def test_store_failure_returns_default_plan():
    engine = RoadmapEngine(_DownStore())
    assert engine.generate_and_store_roadmap("u1") == default_roadmap()
    assert engine.get_latest_roadmap("u1") is None
