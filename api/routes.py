"""FastAPI routes for answer evaluation, adaptive steps, badges, readiness and roadmaps."""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from adaptive.question_selector import QuestionSelectionParams
from api.schemas import NextQuestionReq, NextQuestionResp, ReadinessResp, RoadmapResp, StepReq
from domain.types import AwardedBadge
from evaluation.service import EvaluationInput, EvaluationOutput
from services.coach import InterviewStepParams, InterviewStepResult
from services.engine import Engine, build_engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/coach")


def get_engine() -> Engine:
    return build_engine()


@router.post("/evaluate", response_model=EvaluationOutput)
def evaluate(req: EvaluationInput, engine: Engine = Depends(get_engine)) -> EvaluationOutput:
    return engine.evaluation.evaluate_response(req)


@router.post("/step", response_model=InterviewStepResult)
def step(req: StepReq, engine: Engine = Depends(get_engine)) -> InterviewStepResult:
    return engine.coach.process_interview_step(
        InterviewStepParams(
            session_id=req.session_id,
            user_id=req.user_id,
            current_difficulty=req.current_difficulty,
            evaluation=req.evaluation,
        )
    )


@router.post("/next-question", response_model=NextQuestionResp)
def next_question(req: NextQuestionReq, engine: Engine = Depends(get_engine)) -> NextQuestionResp:
    try:
        question = engine.selector.select_next_question(
            QuestionSelectionParams(
                session_id=req.session_id,
                difficulty=req.difficulty,
                category=req.category,
                weak_topics=req.weak_topics,
            )
        )
    except Exception as exc:  # noqa: BLE001
        logger.error("Question selection failed: %s", exc)
        raise HTTPException(status_code=503, detail="question bank unavailable") from exc
    return NextQuestionResp(question=question)


@router.post("/users/{user_id}/badges/evaluate", response_model=List[AwardedBadge])
def evaluate_badges(user_id: str, engine: Engine = Depends(get_engine)) -> List[AwardedBadge]:
    return engine.badges.evaluate_and_award_badges(user_id)


@router.get("/users/{user_id}/badges", response_model=List[AwardedBadge])
def list_badges(user_id: str, engine: Engine = Depends(get_engine)) -> List[AwardedBadge]:
    return engine.badges.get_user_badges(user_id)


@router.post("/users/{user_id}/readiness", response_model=ReadinessResp)
def refresh_readiness(user_id: str, engine: Engine = Depends(get_engine)) -> ReadinessResp:
    return ReadinessResp(user_id=user_id, readiness_score=engine.readiness.update_readiness_index(user_id))


@router.get("/users/{user_id}/readiness", response_model=ReadinessResp)
def get_readiness(user_id: str, engine: Engine = Depends(get_engine)) -> ReadinessResp:
    return ReadinessResp(user_id=user_id, readiness_score=engine.readiness.get_readiness_score(user_id))


@router.post("/users/{user_id}/roadmap", response_model=RoadmapResp)
def generate_roadmap(user_id: str, engine: Engine = Depends(get_engine)) -> RoadmapResp:
    return RoadmapResp(user_id=user_id, roadmap=engine.roadmap.generate_and_store_roadmap(user_id))


@router.get("/users/{user_id}/roadmap", response_model=RoadmapResp)
def get_roadmap(user_id: str, engine: Engine = Depends(get_engine)) -> RoadmapResp:
    return RoadmapResp(user_id=user_id, roadmap=engine.roadmap.get_latest_roadmap(user_id))
