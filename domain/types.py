"""Shared type definitions for the scoring, adaptive and badge layers."""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

Difficulty = Literal["easy", "medium", "hard"]
Recommendation = Literal["increase", "decrease", "maintain"]
InterviewMode = Literal["normal", "stress", "company"]
CompanyPreset = Literal["google", "amazon", "meta", "startup", "consulting", "generic"]

DIFFICULTIES: tuple[str, ...] = ("easy", "medium", "hard")
RECOMMENDATIONS: tuple[str, ...] = ("increase", "decrease", "maintain")
INTERVIEW_MODES: tuple[str, ...] = ("normal", "stress", "company")
COMPANY_PRESETS: tuple[str, ...] = ("google", "amazon", "meta", "startup", "consulting", "generic")


class ScoreSet(BaseModel):
    technical_score: float
    communication_score: float
    confidence_score: float
    logic_score: float
    depth_score: float


class SessionScoreAverages(BaseModel):
    overall_score: float = 0.0
    technical_average: float = 0.0
    communication_average: float = 0.0
    confidence_average: float = 0.0
    logic_average: float = 0.0
    depth_average: float = 0.0
    response_count: int = 0


class SelectedQuestion(BaseModel):
    id: str
    text: str
    difficulty: str
    category: str


class WeakSkillRecord(BaseModel):
    id: str
    user_id: str
    skill_name: str
    weakness_count: int
    last_occurred_at: datetime


class MemoryUpdateResult(BaseModel):
    updated_weak_skills: List[WeakSkillRecord] = Field(default_factory=list)
    top_weak_skills: List[str] = Field(default_factory=list)


class AdaptiveStepResult(BaseModel):
    next_difficulty: Difficulty
    next_question: Optional[SelectedQuestion] = None


class BadgeContext(BaseModel):
    readiness_score: float = 0.0
    technical_average: float = 0.0
    communication_average: float = 0.0
    confidence_average: float = 0.0
    logic_average: float = 0.0
    depth_average: float = 0.0
    total_sessions: int = 0


class AwardedBadge(BaseModel):
    badge_name: str
    description: str
    awarded_at: datetime
    is_new: bool
