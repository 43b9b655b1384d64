"""Row and payload models for the persistence layer."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class InterviewSessionRow(BaseModel):
    id: str
    user_id: str
    role: str
    difficulty: str
    mode: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    overall_score: float = 0.0


class QuestionRow(BaseModel):
    id: str
    session_id: Optional[str] = None
    text: str
    difficulty: str
    category: str
    created_at: datetime


class ResponsePayload(BaseModel):
    session_id: str
    question_id: str
    answer_text: str
    technical_score: float = Field(ge=0.0, le=100.0)
    communication_score: float = Field(ge=0.0, le=100.0)
    confidence_score: float = Field(ge=0.0, le=100.0)
    logic_score: float = Field(ge=0.0, le=100.0)
    depth_score: float = Field(ge=0.0, le=100.0)
    feedback: Optional[str] = None
    ideal_answer: Optional[str] = None
    improvement_tip: Optional[str] = None


class ResponseRow(ResponsePayload):
    id: str
    created_at: datetime


class ScoreBreakdownRow(BaseModel):
    session_id: str
    overall_score: float
    technical_average: float
    communication_average: float
    confidence_average: float
    logic_average: float
    depth_average: float
    updated_at: datetime


class BadgeRow(BaseModel):
    user_id: str
    badge_name: str
    awarded_at: datetime


class ReadinessRow(BaseModel):
    user_id: str
    readiness_score: float = Field(ge=0.0, le=100.0)
    calculated_at: datetime


class ImprovementPlanRow(BaseModel):
    id: str
    user_id: str
    plan_json: str
    generated_at: datetime
