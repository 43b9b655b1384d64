"""Transactional store interface and its SQLite implementation."""
from __future__ import annotations

import datetime as dt
import sqlite3
import uuid
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Sequence, TypeVar

from domain.types import ScoreSet, SelectedQuestion, SessionScoreAverages, WeakSkillRecord

from .models import (
    BadgeRow,
    ImprovementPlanRow,
    InterviewSessionRow,
    QuestionRow,
    ReadinessRow,
    ResponsePayload,
    ResponseRow,
    ScoreBreakdownRow,
)
from .sqlite import get_conn

T = TypeVar("T")


def _now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def normalize_category(value: str) -> str:
    """Lower-case and trim a category so lookups are case-insensitive."""

    return " ".join(value.split()).lower()


class StoreTx(Protocol):  # Operations available inside a transaction
    def get_session(self, session_id: str) -> Optional[InterviewSessionRow]: ...

    def create_session(
        self,
        user_id: str,
        *,
        role: str,
        difficulty: str,
        mode: str = "normal",
        session_id: Optional[str] = None,
        started_at: Optional[dt.datetime] = None,
    ) -> InterviewSessionRow: ...

    def latest_session(self, user_id: str) -> Optional[InterviewSessionRow]: ...

    def count_sessions(self, user_id: str) -> int: ...

    def update_session_score(self, session_id: str, overall_score: float) -> None: ...

    def update_session_difficulty(self, session_id: str, difficulty: str) -> None: ...

    def get_question(self, question_id: str) -> Optional[QuestionRow]: ...

    def create_question(
        self,
        text: str,
        *,
        difficulty: str,
        category: str,
        session_id: Optional[str] = None,
        question_id: Optional[str] = None,
    ) -> QuestionRow: ...

    def asked_question_ids(self, session_id: str) -> List[str]: ...

    def find_questions(
        self,
        difficulty: str,
        *,
        categories: Optional[Sequence[str]] = None,
        exclude_ids: Optional[Sequence[str]] = None,
    ) -> List[SelectedQuestion]: ...

    def create_response(self, payload: ResponsePayload) -> ResponseRow: ...

    def list_score_sets(self, session_id: str) -> List[ScoreSet]: ...

    def upsert_score_breakdown(self, session_id: str, averages: SessionScoreAverages) -> None: ...

    def get_score_breakdown(self, session_id: str) -> Optional[ScoreBreakdownRow]: ...

    def get_weak_skill(self, user_id: str, skill_name: str) -> Optional[WeakSkillRecord]: ...

    def insert_weak_skill(self, user_id: str, skill_name: str, occurred_at: dt.datetime) -> None: ...

    def increment_weak_skill(self, record_id: str, occurred_at: dt.datetime) -> None: ...

    def list_weak_skills(self, user_id: str, limit: Optional[int] = None) -> List[WeakSkillRecord]: ...

    def count_weak_skills(self, user_id: str) -> int: ...

    def list_badges(self, user_id: str) -> List[BadgeRow]: ...

    def insert_badge_if_absent(self, user_id: str, badge_name: str, awarded_at: dt.datetime) -> bool: ...

    def get_badge(self, user_id: str, badge_name: str) -> Optional[BadgeRow]: ...

    def get_readiness(self, user_id: str) -> Optional[ReadinessRow]: ...

    def upsert_readiness(self, user_id: str, readiness_score: float, calculated_at: dt.datetime) -> None: ...

    def create_improvement_plan(self, user_id: str, plan_json: str, generated_at: dt.datetime) -> ImprovementPlanRow: ...

    def latest_improvement_plan(self, user_id: str) -> Optional[ImprovementPlanRow]: ...


class TransactionalStore(Protocol):  # Single entry point for atomic work
    def with_transaction(self, fn: Callable[[StoreTx], T], *, immediate: bool = True) -> T: ...


class SqliteTx:  # StoreTx bound to one open SQLite transaction
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------
    def get_session(self, session_id: str) -> Optional[InterviewSessionRow]:
        row = self._conn.execute(
            "SELECT * FROM interview_sessions WHERE id = ?",
            (session_id,),
        ).fetchone()
        return InterviewSessionRow(**dict(row)) if row else None

    def create_session(
        self,
        user_id: str,
        *,
        role: str,
        difficulty: str,
        mode: str = "normal",
        session_id: Optional[str] = None,
        started_at: Optional[dt.datetime] = None,
    ) -> InterviewSessionRow:
        row = InterviewSessionRow(
            id=session_id or _new_id(),
            user_id=user_id,
            role=role,
            difficulty=difficulty,
            mode=mode,
            started_at=started_at or _now(),
        )
        self._conn.execute(
            """INSERT INTO interview_sessions
               (id, user_id, role, difficulty, mode, started_at, overall_score)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                row.id,
                row.user_id,
                row.role,
                row.difficulty,
                row.mode,
                row.started_at.isoformat(),
                row.overall_score,
            ),
        )
        return row

    def latest_session(self, user_id: str) -> Optional[InterviewSessionRow]:
        row = self._conn.execute(
            """SELECT * FROM interview_sessions
               WHERE user_id = ?
               ORDER BY started_at DESC, rowid DESC
               LIMIT 1""",
            (user_id,),
        ).fetchone()
        return InterviewSessionRow(**dict(row)) if row else None

    def count_sessions(self, user_id: str) -> int:
        row = self._conn.execute(
            "SELECT COUNT(*) FROM interview_sessions WHERE user_id = ?",
            (user_id,),
        ).fetchone()
        return int(row[0])

    def update_session_score(self, session_id: str, overall_score: float) -> None:
        cur = self._conn.execute(
            "UPDATE interview_sessions SET overall_score = ? WHERE id = ?",
            (overall_score, session_id),
        )
        if cur.rowcount == 0:
            raise KeyError(f"Session not found: {session_id}")

    def update_session_difficulty(self, session_id: str, difficulty: str) -> None:
        cur = self._conn.execute(
            "UPDATE interview_sessions SET difficulty = ? WHERE id = ?",
            (difficulty, session_id),
        )
        if cur.rowcount == 0:
            raise KeyError(f"Session not found: {session_id}")

    # ------------------------------------------------------------------
    # Questions
    # ------------------------------------------------------------------
    def get_question(self, question_id: str) -> Optional[QuestionRow]:
        row = self._conn.execute(
            "SELECT * FROM questions WHERE id = ?",
            (question_id,),
        ).fetchone()
        return QuestionRow(**dict(row)) if row else None

    def create_question(
        self,
        text: str,
        *,
        difficulty: str,
        category: str,
        session_id: Optional[str] = None,
        question_id: Optional[str] = None,
    ) -> QuestionRow:
        row = QuestionRow(
            id=question_id or _new_id(),
            session_id=session_id,
            text=text,
            difficulty=difficulty,
            category=normalize_category(category),
            created_at=_now(),
        )
        self._conn.execute(
            """INSERT INTO questions (id, session_id, text, difficulty, category, created_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (row.id, row.session_id, row.text, row.difficulty, row.category, row.created_at.isoformat()),
        )
        return row

    def asked_question_ids(self, session_id: str) -> List[str]:
        rows = self._conn.execute(
            "SELECT id FROM questions WHERE session_id = ?",
            (session_id,),
        ).fetchall()
        return [row["id"] for row in rows]

    def find_questions(
        self,
        difficulty: str,
        *,
        categories: Optional[Sequence[str]] = None,
        exclude_ids: Optional[Sequence[str]] = None,
    ) -> List[SelectedQuestion]:
        clauses = ["difficulty = ?"]
        params: List[object] = [difficulty]
        if categories:
            clauses.append(f"category IN ({', '.join('?' for _ in categories)})")
            params.extend(categories)
        if exclude_ids:
            clauses.append(f"id NOT IN ({', '.join('?' for _ in exclude_ids)})")
            params.extend(exclude_ids)
        rows = self._conn.execute(
            f"""SELECT id, text, difficulty, category FROM questions
                WHERE {' AND '.join(clauses)}
                ORDER BY created_at, id""",
            params,
        ).fetchall()
        return [SelectedQuestion(**dict(row)) for row in rows]

    # ------------------------------------------------------------------
    # Responses and score breakdowns
    # ------------------------------------------------------------------
    def create_response(self, payload: ResponsePayload) -> ResponseRow:
        row = ResponseRow(id=_new_id(), created_at=_now(), **payload.model_dump())
        self._conn.execute(
            """INSERT INTO responses
               (id, session_id, question_id, answer_text, technical_score, communication_score,
                confidence_score, logic_score, depth_score, feedback, ideal_answer,
                improvement_tip, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                row.id,
                row.session_id,
                row.question_id,
                row.answer_text,
                row.technical_score,
                row.communication_score,
                row.confidence_score,
                row.logic_score,
                row.depth_score,
                row.feedback,
                row.ideal_answer,
                row.improvement_tip,
                row.created_at.isoformat(),
            ),
        )
        return row

    def list_score_sets(self, session_id: str) -> List[ScoreSet]:
        rows = self._conn.execute(
            """SELECT technical_score, communication_score, confidence_score, logic_score, depth_score
               FROM responses WHERE session_id = ?
               ORDER BY created_at, rowid""",
            (session_id,),
        ).fetchall()
        return [ScoreSet(**dict(row)) for row in rows]

    def upsert_score_breakdown(self, session_id: str, averages: SessionScoreAverages) -> None:
        self._conn.execute(
            """INSERT INTO score_breakdowns
               (id, session_id, overall_score, technical_average, communication_average,
                confidence_average, logic_average, depth_average, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
               ON CONFLICT(session_id) DO UPDATE SET
                 overall_score = excluded.overall_score,
                 technical_average = excluded.technical_average,
                 communication_average = excluded.communication_average,
                 confidence_average = excluded.confidence_average,
                 logic_average = excluded.logic_average,
                 depth_average = excluded.depth_average,
                 updated_at = excluded.updated_at""",
            (
                _new_id(),
                session_id,
                averages.overall_score,
                averages.technical_average,
                averages.communication_average,
                averages.confidence_average,
                averages.logic_average,
                averages.depth_average,
                _now().isoformat(),
            ),
        )

    def get_score_breakdown(self, session_id: str) -> Optional[ScoreBreakdownRow]:
        row = self._conn.execute(
            "SELECT * FROM score_breakdowns WHERE session_id = ?",
            (session_id,),
        ).fetchone()
        if row is None:
            return None
        data = dict(row)
        data.pop("id", None)
        return ScoreBreakdownRow(**data)

    # ------------------------------------------------------------------
    # Weak skills
    # ------------------------------------------------------------------
    def get_weak_skill(self, user_id: str, skill_name: str) -> Optional[WeakSkillRecord]:
        row = self._conn.execute(
            "SELECT * FROM weak_skills WHERE user_id = ? AND skill_name = ?",
            (user_id, skill_name),
        ).fetchone()
        return WeakSkillRecord(**dict(row)) if row else None

    def insert_weak_skill(self, user_id: str, skill_name: str, occurred_at: dt.datetime) -> None:
        self._conn.execute(
            """INSERT INTO weak_skills (id, user_id, skill_name, weakness_count, last_occurred_at)
               VALUES (?, ?, ?, 1, ?)""",
            (_new_id(), user_id, skill_name, occurred_at.isoformat()),
        )

    def increment_weak_skill(self, record_id: str, occurred_at: dt.datetime) -> None:
        self._conn.execute(
            """UPDATE weak_skills
               SET weakness_count = weakness_count + 1, last_occurred_at = ?
               WHERE id = ?""",
            (occurred_at.isoformat(), record_id),
        )

    def list_weak_skills(self, user_id: str, limit: Optional[int] = None) -> List[WeakSkillRecord]:
        sql = """SELECT * FROM weak_skills WHERE user_id = ?
                 ORDER BY weakness_count DESC, last_occurred_at DESC, skill_name"""
        params: List[object] = [user_id]
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        rows = self._conn.execute(sql, params).fetchall()
        return [WeakSkillRecord(**dict(row)) for row in rows]

    def count_weak_skills(self, user_id: str) -> int:
        row = self._conn.execute(
            "SELECT COUNT(*) FROM weak_skills WHERE user_id = ?",
            (user_id,),
        ).fetchone()
        return int(row[0])

    # ------------------------------------------------------------------
    # Badges and readiness
    # ------------------------------------------------------------------
    def list_badges(self, user_id: str) -> List[BadgeRow]:
        rows = self._conn.execute(
            """SELECT user_id, badge_name, awarded_at FROM badges
               WHERE user_id = ? ORDER BY awarded_at DESC, rowid DESC""",
            (user_id,),
        ).fetchall()
        return [BadgeRow(**dict(row)) for row in rows]

    def insert_badge_if_absent(self, user_id: str, badge_name: str, awarded_at: dt.datetime) -> bool:
        cur = self._conn.execute(
            """INSERT OR IGNORE INTO badges (id, user_id, badge_name, awarded_at)
               VALUES (?, ?, ?, ?)""",
            (_new_id(), user_id, badge_name, awarded_at.isoformat()),
        )
        return cur.rowcount == 1

    def get_badge(self, user_id: str, badge_name: str) -> Optional[BadgeRow]:
        row = self._conn.execute(
            "SELECT user_id, badge_name, awarded_at FROM badges WHERE user_id = ? AND badge_name = ?",
            (user_id, badge_name),
        ).fetchone()
        return BadgeRow(**dict(row)) if row else None

    def get_readiness(self, user_id: str) -> Optional[ReadinessRow]:
        row = self._conn.execute(
            "SELECT user_id, readiness_score, calculated_at FROM readiness_index WHERE user_id = ?",
            (user_id,),
        ).fetchone()
        return ReadinessRow(**dict(row)) if row else None

    def upsert_readiness(self, user_id: str, readiness_score: float, calculated_at: dt.datetime) -> None:
        self._conn.execute(
            """INSERT INTO readiness_index (id, user_id, readiness_score, calculated_at)
               VALUES (?, ?, ?, ?)
               ON CONFLICT(user_id) DO UPDATE SET
                 readiness_score = excluded.readiness_score,
                 calculated_at = excluded.calculated_at""",
            (_new_id(), user_id, readiness_score, calculated_at.isoformat()),
        )

    # ------------------------------------------------------------------
    # Improvement plans
    # ------------------------------------------------------------------
    def create_improvement_plan(self, user_id: str, plan_json: str, generated_at: dt.datetime) -> ImprovementPlanRow:
        row = ImprovementPlanRow(id=_new_id(), user_id=user_id, plan_json=plan_json, generated_at=generated_at)
        self._conn.execute(
            """INSERT INTO improvement_plans (id, user_id, plan_json, generated_at)
               VALUES (?, ?, ?, ?)""",
            (row.id, row.user_id, row.plan_json, row.generated_at.isoformat()),
        )
        return row

    def latest_improvement_plan(self, user_id: str) -> Optional[ImprovementPlanRow]:
        row = self._conn.execute(
            """SELECT * FROM improvement_plans
               WHERE user_id = ?
               ORDER BY generated_at DESC, rowid DESC
               LIMIT 1""",
            (user_id,),
        ).fetchone()
        return ImprovementPlanRow(**dict(row)) if row else None


class SqliteStore:  # SQLite-backed TransactionalStore
    def __init__(self, path: Optional[Path | str] = None) -> None:
        self._path = str(path) if path is not None else None

    @property
    def path(self) -> Optional[str]:
        return self._path

    def with_transaction(self, fn: Callable[[StoreTx], T], *, immediate: bool = True) -> T:
        """Run ``fn`` inside one transaction; commit on return, roll back on error."""

        with get_conn(self._path, immediate=immediate) as conn:
            return fn(SqliteTx(conn))


__all__ = [
    "StoreTx",
    "TransactionalStore",
    "SqliteTx",
    "SqliteStore",
    "normalize_category",
]
