"""SQLite schema migrations."""
from __future__ import annotations

import os
import sqlite3
from typing import Iterable

SCHEMA: Iterable[str] = [
    """
CREATE TABLE IF NOT EXISTS interview_sessions (
  id TEXT PRIMARY KEY,
  user_id TEXT NOT NULL,
  role TEXT NOT NULL,
  difficulty TEXT NOT NULL,
  mode TEXT NOT NULL,
  started_at TEXT NOT NULL,
  completed_at TEXT,
  overall_score REAL NOT NULL DEFAULT 0
);
""",
    """
CREATE INDEX IF NOT EXISTS idx_interview_sessions_user
  ON interview_sessions (user_id, started_at);
""",
    """
CREATE TABLE IF NOT EXISTS questions (
  id TEXT PRIMARY KEY,
  session_id TEXT REFERENCES interview_sessions(id) ON DELETE CASCADE,
  text TEXT NOT NULL,
  difficulty TEXT NOT NULL,
  category TEXT NOT NULL,
  created_at TEXT NOT NULL
);
""",
    """
CREATE INDEX IF NOT EXISTS idx_questions_difficulty
  ON questions (difficulty, category);
""",
    """
CREATE TABLE IF NOT EXISTS responses (
  id TEXT PRIMARY KEY,
  session_id TEXT NOT NULL REFERENCES interview_sessions(id) ON DELETE CASCADE,
  question_id TEXT NOT NULL REFERENCES questions(id) ON DELETE CASCADE,
  answer_text TEXT NOT NULL,
  technical_score REAL NOT NULL CHECK (technical_score BETWEEN 0 AND 100),
  communication_score REAL NOT NULL CHECK (communication_score BETWEEN 0 AND 100),
  confidence_score REAL NOT NULL CHECK (confidence_score BETWEEN 0 AND 100),
  logic_score REAL NOT NULL CHECK (logic_score BETWEEN 0 AND 100),
  depth_score REAL NOT NULL CHECK (depth_score BETWEEN 0 AND 100),
  feedback TEXT,
  ideal_answer TEXT,
  improvement_tip TEXT,
  created_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS score_breakdowns (
  id TEXT PRIMARY KEY,
  session_id TEXT NOT NULL UNIQUE REFERENCES interview_sessions(id) ON DELETE CASCADE,
  overall_score REAL NOT NULL DEFAULT 0,
  technical_average REAL NOT NULL DEFAULT 0,
  communication_average REAL NOT NULL DEFAULT 0,
  confidence_average REAL NOT NULL DEFAULT 0,
  logic_average REAL NOT NULL DEFAULT 0,
  depth_average REAL NOT NULL DEFAULT 0,
  updated_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS weak_skills (
  id TEXT PRIMARY KEY,
  user_id TEXT NOT NULL,
  skill_name TEXT NOT NULL,
  weakness_count INTEGER NOT NULL DEFAULT 1,
  last_occurred_at TEXT NOT NULL,
  UNIQUE (user_id, skill_name)
);
""",
    """
CREATE TABLE IF NOT EXISTS badges (
  id TEXT PRIMARY KEY,
  user_id TEXT NOT NULL,
  badge_name TEXT NOT NULL,
  awarded_at TEXT NOT NULL,
  UNIQUE (user_id, badge_name)
);
""",
    """
CREATE TABLE IF NOT EXISTS readiness_index (
  id TEXT PRIMARY KEY,
  user_id TEXT NOT NULL UNIQUE,
  readiness_score REAL NOT NULL DEFAULT 0,
  calculated_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS improvement_plans (
  id TEXT PRIMARY KEY,
  user_id TEXT NOT NULL,
  plan_json TEXT NOT NULL,
  generated_at TEXT NOT NULL
);
""",
    """
CREATE INDEX IF NOT EXISTS idx_improvement_plans_user
  ON improvement_plans (user_id, generated_at);
""",
]


def migrate(db_path: str = "data/coach.db") -> None:
    """Apply schema migrations to the SQLite database."""

    directory = os.path.dirname(db_path) or "."
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        for stmt in SCHEMA:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


if __name__ == "__main__":
    migrate()
