"""Deterministic 30-day improvement plan built from weak skills and averages."""
from __future__ import annotations

from typing import Dict, List, Literal, Sequence

from pydantic import BaseModel, Field

from domain.types import Difficulty

Priority = Literal["high", "medium", "low"]

LOW_SCORE_THRESHOLD = 65.0
INTENSITY: Dict[str, Dict[str, str]] = {
    "easy": {"daily": "2-3 problems/day", "mocks": "1 mock interview/week"},
    "medium": {"daily": "3-5 problems/day", "mocks": "2 mock interviews/week"},
    "hard": {"daily": "4-6 problems/day", "mocks": "3 mock interviews/week"},
}


class WeekTask(BaseModel):
    topic: str
    action: str
    frequency: str
    priority: Priority


class Roadmap(BaseModel):  # Four weekly task lists
    week1: List[WeekTask] = Field(default_factory=list)
    week2: List[WeekTask] = Field(default_factory=list)
    week3: List[WeekTask] = Field(default_factory=list)
    week4: List[WeekTask] = Field(default_factory=list)


class RoadmapParams(BaseModel):
    weak_skills: List[str] = Field(default_factory=list)
    technical_average: float = 0.0
    communication_average: float = 0.0
    logic_average: float = 0.0
    difficulty: Difficulty = "easy"


def low_categories(params: RoadmapParams) -> List[str]:
    """Scoring categories under the low-score threshold, in a fixed order."""

    low: List[str] = []
    if params.technical_average < LOW_SCORE_THRESHOLD:
        low.append("technical skills")
    if params.communication_average < LOW_SCORE_THRESHOLD:
        low.append("communication")
    if params.logic_average < LOW_SCORE_THRESHOLD:
        low.append("logical reasoning")
    return low


def _task(topic: str, action: str, frequency: str, priority: Priority) -> WeekTask:
    return WeekTask(topic=topic, action=action, frequency=frequency, priority=priority)


def _week1(top: Sequence[str], low: Sequence[str], daily: str) -> List[WeekTask]:
    tasks = [
        _task(
            skill,
            f'Study fundamentals of "{skill}". Review core concepts, practice basic problems, and build a cheat sheet.',
            daily,
            "high",
        )
        for skill in top
    ]
    if not tasks:
        tasks.append(
            _task(
                "General Fundamentals",
                "Review data structures, algorithms, and system design basics. Build a revision schedule.",
                daily,
                "high",
            )
        )
    for category in low[:1]:
        tasks.append(
            _task(
                category,
                f"Targeted practice for {category}. Focus on structured explanations and clarity.",
                "30 min/day",
                "high",
            )
        )
    tasks.append(
        _task(
            "Self-Assessment",
            "Take a diagnostic practice session to benchmark current skill levels.",
            "Once this week",
            "medium",
        )
    )
    return tasks


def _week2(secondary: Sequence[str], low: Sequence[str], daily: str, mocks: str) -> List[WeekTask]:
    tasks = [
        _task(
            "Timed Problem Solving",
            "Solve problems under a 25-minute timer. Focus on speed and accuracy.",
            daily,
            "high",
        )
    ]
    for category in low:
        tasks.append(
            _task(
                category,
                f"Intermediate practice for {category}. Work through medium-difficulty scenarios.",
                "45 min/day",
                "medium",
            )
        )
    for skill in secondary:
        tasks.append(
            _task(
                skill,
                f'Practice "{skill}" at medium difficulty. Attempt 2-3 problems and review solutions.',
                "Every other day",
                "medium",
            )
        )
    tasks.append(
        _task(
            "Mock Interview",
            "Complete a timed mock interview session focusing on areas from Week 1.",
            mocks,
            "high",
        )
    )
    return tasks


def _week3(top: Sequence[str], daily: str, mocks: str) -> List[WeekTask]:
    tasks = [
        _task(
            "Full Mock Interviews",
            "Simulate complete interview rounds. Practice both technical and behavioral questions.",
            mocks,
            "high",
        ),
        _task(
            "Behavioral Questions",
            "Practice STAR method responses. Prepare stories for leadership, conflict, and failure scenarios.",
            "2-3 stories/day",
            "high",
        ),
    ]
    if top:
        tasks.append(
            _task(
                top[0],
                f'Advanced practice for "{top[0]}". Attempt hard-level problems and edge cases.',
                daily,
                "medium",
            )
        )
    tasks.append(
        _task(
            "Communication Drill",
            "Practice explaining solutions out loud. Record yourself and review for clarity and structure.",
            "1 session/day",
            "medium",
        )
    )
    return tasks


def _week4(weak_skills: Sequence[str], daily: str, mocks: str) -> List[WeekTask]:
    review = ", ".join(weak_skills[:4]) if weak_skills else "general topics"
    return [
        _task(
            "Stress Interview Simulation",
            'Run interview sessions in "stress" mode. Practice under pressure with tight time limits.',
            mocks,
            "high",
        ),
        _task(
            "Hard-Difficulty Problems",
            "Attempt hard-level questions across all categories. Focus on system design and complex algorithms.",
            daily,
            "high",
        ),
        _task(
            "Weakness Review",
            f"Review all weak areas: {review}. Ensure gaps are closed.",
            "Daily review sessions",
            "high",
        ),
        _task(
            "Final Assessment",
            "Take a comprehensive mock interview covering all categories. Compare scores to Week 1 benchmark.",
            "End of week",
            "high",
        ),
    ]


def generate_roadmap(params: RoadmapParams) -> Roadmap:
    """Build the four-week plan.

    Week 1 covers the top two weak skills and fundamentals, week 2 timed
    practice plus the next three weak skills, week 3 mock and behavioral
    rounds, week 4 stress simulation and a final assessment. The result
    depends only on ``params`` and every week is non-empty.
    """

    weak = list(params.weak_skills)
    top, secondary = weak[:2], weak[2:5]
    low = low_categories(params)
    pace = INTENSITY[params.difficulty]
    return Roadmap(
        week1=_week1(top, low, pace["daily"]),
        week2=_week2(secondary, low, pace["daily"], pace["mocks"]),
        week3=_week3(top, pace["daily"], pace["mocks"]),
        week4=_week4(weak, pace["daily"], pace["mocks"]),
    )


__all__ = ["WeekTask", "Roadmap", "RoadmapParams", "low_categories", "generate_roadmap", "LOW_SCORE_THRESHOLD"]
