"""Adaptive difficulty and question selection."""
from .difficulty import next_difficulty
from .orchestrator import AdaptiveOrchestrator, AdaptiveStepParams
from .question_selector import QuestionSelectionParams, QuestionSelector

__all__ = [
    "next_difficulty",
    "AdaptiveOrchestrator",
    "AdaptiveStepParams",
    "QuestionSelectionParams",
    "QuestionSelector",
]
