import random

from adaptive.question_selector import QuestionSelectionParams, QuestionSelector, category_filter
from config.engine import EngineConfig


def _selector(store, **config):
    return QuestionSelector(store, EngineConfig(**config), random.Random(7))


def test_primary_tier_matches_category_or_weak_topic(store, seed):
    session = seed.session()
    seed.question("Arrays 101", difficulty="medium", category="arrays")
    graphs = seed.question("BFS vs DFS", difficulty="medium", category="Graphs")
    seed.question("Hard graphs", difficulty="hard", category="graphs")

    picked = _selector(store).select_next_question(
        QuestionSelectionParams(session_id=session.id, difficulty="medium", weak_topics=["  GRAPHS "])
    )
    assert picked is not None
    assert picked.id == graphs.id


def test_requested_category_is_also_matched(store, seed):
    session = seed.session()
    seed.question("Arrays 101", difficulty="easy", category="arrays")
    behavioral = seed.question("Tell me about a conflict", difficulty="easy", category="behavioral")

    picked = _selector(store).select_next_question(
        QuestionSelectionParams(session_id=session.id, difficulty="easy", category="Behavioral")
    )
    assert picked.id == behavioral.id


def test_asked_questions_are_excluded_until_exhausted(store, seed):
    session = seed.session()
    asked = seed.question("Asked already", difficulty="medium", category="dp", session_id=session.id)
    fresh = seed.question("Fresh", difficulty="medium", category="arrays")

    selector = _selector(store)
    picked = selector.select_next_question(
        QuestionSelectionParams(session_id=session.id, difficulty="medium", weak_topics=["dp"])
    )
    # dp only has the asked question, so tier 2 picks the fresh one
    assert picked.id == fresh.id
    assert asked.id != picked.id


def test_final_tier_allows_repeats(store, seed):
    session = seed.session()
    only = seed.question("Only one", difficulty="hard", session_id=session.id)

    picked = _selector(store).select_next_question(QuestionSelectionParams(session_id=session.id, difficulty="hard"))
    assert picked.id == only.id


def test_empty_bank_returns_none(store, seed):
    session = seed.session()
    assert _selector(store).select_next_question(QuestionSelectionParams(session_id=session.id, difficulty="easy")) is None


def test_hard_only_bank_asked_for_easy_default_is_none(store, seed):
    session = seed.session()
    seed.question("Hard one", difficulty="hard")
    picked = _selector(store).select_next_question(QuestionSelectionParams(session_id=session.id, difficulty="easy"))
    assert picked is None


def test_cross_difficulty_fallback_when_enabled(store, seed):
    session = seed.session()
    hard = seed.question("Hard one", difficulty="hard")
    picked = _selector(store, cross_difficulty_fallback=True).select_next_question(
        QuestionSelectionParams(session_id=session.id, difficulty="easy")
    )
    assert picked is not None
    assert picked.id == hard.id
    assert picked.difficulty == "hard"


def test_selection_is_uniform_over_candidates(store, seed):
    session = seed.session()
    ids = {seed.question(f"Q{i}", difficulty="medium").id for i in range(3)}
    selector = QuestionSelector(store, EngineConfig(), random.Random(1))
    seen = {
        selector.select_next_question(QuestionSelectionParams(session_id=session.id, difficulty="medium")).id
        for _ in range(60)
    }
    assert seen == ids


def test_category_filter_normalises_and_dedupes():
    assert category_filter(" Graphs ", ["graphs", "Dynamic  Programming", "", "  "]) == [
        "graphs",
        "dynamic programming",
    ]
    assert category_filter(None, None) == []
