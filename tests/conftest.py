import json
import os
import sys
import tempfile
from pathlib import Path

import pytest

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.registry import SCORER_KEY, unbind_model
from config.settings import settings
from storage.migrate import migrate
from storage.store import SqliteStore


def _evaluation_json(**overrides) -> str:
    payload = {
        "technical_score": 90,
        "communication_score": 80,
        "confidence_score": 70,
        "logic_score": 60,
        "depth_score": 50,
        "difficulty_recommendation": "increase",
        "weak_topics": ["System Design"],
        "strengths": ["clarity"],
        "feedback": "Solid answer.",
        "ideal_answer": "Mention sharding and replication.",
        "improvement_tip": "Quantify trade-offs.",
    }
    payload.update(overrides)
    return json.dumps(payload)


@pytest.fixture
def evaluation_json():
    return _evaluation_json


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    migrate(db_path)
    try:
        yield db_path
    finally:
        td.cleanup()


@pytest.fixture(autouse=True)
def _unbind_scorer():
    yield
    unbind_model(SCORER_KEY)


@pytest.fixture
def store(tmp_db):
    return SqliteStore(tmp_db)


@pytest.fixture
def seed(store):
    """Seeding helpers bound to the temporary store."""

    class _Seed:
        def session(self, user_id="u1", *, difficulty="medium", mode="normal", role="Backend Engineer", started_at=None):
            return store.with_transaction(
                lambda tx: tx.create_session(
                    user_id, role=role, difficulty=difficulty, mode=mode, started_at=started_at
                )
            )

        def question(self, text="Explain caching.", *, difficulty="medium", category="general", session_id=None):
            return store.with_transaction(
                lambda tx: tx.create_question(text, difficulty=difficulty, category=category, session_id=session_id)
            )

    return _Seed()
