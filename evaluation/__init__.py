"""Answer evaluation: prompt, validation and the persistence pipeline."""
from .prompt import EvaluationPromptParams, build_evaluation_prompt
from .schema import EvaluationResult, ParseOutcome, fallback_evaluation, parse_evaluation, safe_parse
from .service import EvaluationInput, EvaluationOutput, EvaluationService, Scorer

__all__ = [
    "EvaluationPromptParams",
    "build_evaluation_prompt",
    "EvaluationResult",
    "ParseOutcome",
    "fallback_evaluation",
    "parse_evaluation",
    "safe_parse",
    "EvaluationInput",
    "EvaluationOutput",
    "EvaluationService",
    "Scorer",
]
