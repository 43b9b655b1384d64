"""Pydantic schemas for the coaching API."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from domain.types import Difficulty, SelectedQuestion
from evaluation.schema import EvaluationResult
from roadmap.generator import Roadmap


class StepReq(BaseModel):
    session_id: str
    user_id: str
    current_difficulty: Difficulty
    evaluation: EvaluationResult


class NextQuestionReq(BaseModel):
    session_id: str
    difficulty: Difficulty
    category: Optional[str] = None
    weak_topics: List[str] = Field(default_factory=list)


class NextQuestionResp(BaseModel):
    question: Optional[SelectedQuestion] = None


class ReadinessResp(BaseModel):
    user_id: str
    readiness_score: float


class RoadmapResp(BaseModel):
    user_id: str
    roadmap: Optional[Roadmap] = None
