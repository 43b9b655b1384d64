"""Lightweight CLI helpers for inspecting coaching tables and seeding the question bank."""
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import List

from pydantic import BaseModel, TypeAdapter

from config.settings import settings
from domain.types import Difficulty
from storage.migrate import migrate
from storage.sqlite import get_conn
from storage.store import SqliteStore, StoreTx


class BankQuestion(BaseModel):  # One entry of a question-bank seed file
    text: str
    difficulty: Difficulty
    category: str = "general"


def tail_badges(limit: int = 20) -> None:
    with get_conn(immediate=False) as conn:
        rows = conn.execute(
            """
            SELECT awarded_at, user_id, badge_name
            FROM badges
            ORDER BY awarded_at DESC
            LIMIT ?
            """,
            (limit,),
        ).fetchall()
    for row in rows:
        print(f"[{row['awarded_at']}] {row['user_id']} -> {row['badge_name']}")


def tail_breakdowns(limit: int = 20) -> None:
    with get_conn(immediate=False) as conn:
        rows = conn.execute(
            """
            SELECT b.updated_at, b.session_id, s.user_id, s.difficulty, b.overall_score,
                   b.technical_average, b.communication_average, b.confidence_average,
                   b.logic_average, b.depth_average
            FROM score_breakdowns b JOIN interview_sessions s ON s.id = b.session_id
            ORDER BY b.updated_at DESC
            LIMIT ?
            """,
            (limit,),
        ).fetchall()
    for row in rows:
        print(
            f"[{row['updated_at']}] {row['user_id']}/{row['session_id']} ({row['difficulty']}) "
            f"overall={row['overall_score']} tech={row['technical_average']} comm={row['communication_average']} "
            f"conf={row['confidence_average']} logic={row['logic_average']} depth={row['depth_average']}"
        )


def show_weak_skills(user_id: str) -> None:
    records = SqliteStore().with_transaction(lambda tx: tx.list_weak_skills(user_id), immediate=False)
    for record in records:
        print(f"{record.skill_name}: {record.weakness_count} (last {record.last_occurred_at.isoformat()})")


def seed_questions(path: Path) -> int:
    """Insert bank-level questions from a JSON list; returns how many were added."""

    entries = TypeAdapter(List[BankQuestion]).validate_python(json.loads(path.read_text(encoding="utf-8")))

    def _insert(tx: StoreTx) -> int:
        for entry in entries:
            tx.create_question(entry.text, difficulty=entry.difficulty, category=entry.category)
        return len(entries)

    return SqliteStore().with_transaction(_insert)


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--migrate", action="store_true", help="Create or upgrade the database schema")
    parser.add_argument("--tail-badges", type=int, help="Show the latest awarded badges")
    parser.add_argument("--tail-breakdowns", type=int, help="Show the latest session score breakdowns")
    parser.add_argument("--weak-skills", metavar="USER_ID", help="List a user's weak skills")
    parser.add_argument("--seed-questions", type=Path, metavar="FILE", help="Load bank questions from a JSON file")
    args = parser.parse_args()

    if args.migrate:
        migrate(settings.DB_PATH)
    if args.seed_questions:
        print(f"seeded {seed_questions(args.seed_questions)} questions")
    if args.tail_badges:
        tail_badges(args.tail_badges)
    if args.tail_breakdowns:
        tail_breakdowns(args.tail_breakdowns)
    if args.weak_skills:
        show_weak_skills(args.weak_skills)


if __name__ == "__main__":
    main()
