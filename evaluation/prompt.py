from __future__ import annotations  # Mode- and difficulty-aware evaluation prompt builder

from textwrap import dedent
from typing import Dict, Optional

from pydantic import BaseModel

from domain.types import CompanyPreset, Difficulty, InterviewMode


class EvaluationPromptParams(BaseModel):  # Inputs for one evaluation prompt
    question_text: str
    user_answer: str
    role: str
    difficulty: Difficulty
    mode: InterviewMode
    category: str = "general"
    company_preset: Optional[CompanyPreset] = None


MODE_DIRECTIVES: Dict[str, str] = {
    "normal": (
        "You are a fair, experienced technical interviewer. Evaluate the candidate objectively. "
        "Balance encouragement with honest feedback. Identify both strengths and areas for improvement. "
        "Be constructive in your feedback."
    ),
    "stress": (
        "You are a demanding, high-pressure interviewer with very high standards who expects precision. "
        "Score strictly. Penalize vagueness, hesitation markers and filler words. "
        "Be critical but fair, and point out exactly where the candidate fell short."
    ),
}

COMPANY_DIRECTIVES: Dict[str, str] = {
    "google": (
        "You are a Google L5+ interviewer. Evaluate for intellectual curiosity, ownership and collaboration. "
        "Expect scalability thinking, clean algorithmic reasoning and trade-off analysis. "
        "Surface-level answers score below 40 on depth."
    ),
    "amazon": (
        "You are an Amazon Bar Raiser. Evaluate against the Leadership Principles: Ownership, Dive Deep, "
        "Bias for Action, Customer Obsession. Expect STAR-format answers with measurable outcomes. "
        "Score harshly when impact is not quantified."
    ),
    "meta": (
        "You are a Meta E5+ interviewer. Evaluate for impact-driven thinking, speed of execution and systems reasoning. "
        "Expect clear problem decomposition and practical solutions. "
        "Unclear explanations score below 35 on communication."
    ),
    "startup": (
        "You are a startup CTO. Evaluate for scrappiness, breadth of knowledge and the ability to wear multiple hats. "
        "Value practical solutions over theoretical perfection and reward resourcefulness."
    ),
    "consulting": (
        "You are a management-consulting case interviewer. Evaluate for structured, hypothesis-driven analysis "
        "and clear communication. Expect MECE frameworks and data-driven reasoning. "
        "Unstructured answers score below 30 on logic."
    ),
    "generic": (
        "You are a senior technical interviewer at a large company. Evaluate for technical depth, "
        "communication clarity and professional maturity. Expect well-structured answers with concrete examples."
    ),
}

DIFFICULTY_DIRECTIVES: Dict[str, str] = {
    "easy": (
        "This is an entry-level question. Be lenient with scoring and accept simplified explanations "
        "as long as the core concepts are correct. Scores above 70 suit correct but basic answers."
    ),
    "medium": (
        "This is a mid-level question. Score fairly on completeness and accuracy and expect some discussion "
        "of trade-offs. Scores of 60-80 suit solid but not exceptional answers."
    ),
    "hard": (
        "This is an advanced question. Be strict. Expect deep technical knowledge, edge-case awareness and "
        "trade-off discussion. Only truly exceptional answers score above 80. "
        "Penalize missing scalability or performance considerations."
    ),
}

OUTPUT_CONTRACT = dedent(
    """
    You MUST respond with ONLY a single valid JSON object. No markdown, no code fences,
    no text before or after the JSON, no comments, no trailing commas.

    The JSON object MUST have exactly these fields and types:
    {
      "technical_score": <number 0-100>,
      "communication_score": <number 0-100>,
      "confidence_score": <number 0-100>,
      "logic_score": <number 0-100>,
      "depth_score": <number 0-100>,
      "difficulty_recommendation": <"increase" | "decrease" | "maintain">,
      "weak_topics": <array of strings>,
      "strengths": <array of strings>,
      "feedback": <non-empty string>,
      "ideal_answer": <non-empty string>,
      "improvement_tip": <non-empty string>
    }

    Scoring scale:
    - 0-20: completely wrong or no answer
    - 21-40: major gaps, fundamental misunderstanding
    - 41-60: partial understanding, missing key points
    - 61-80: good answer with minor gaps
    - 81-100: excellent, comprehensive, expert-level
    """
).strip()


def _mode_directive(mode: str, preset: Optional[str]) -> str:
    if mode == "company":
        return COMPANY_DIRECTIVES[preset or "generic"]
    return MODE_DIRECTIVES.get(mode, MODE_DIRECTIVES["normal"])


def build_evaluation_prompt(params: EvaluationPromptParams) -> str:  # Compose the scorer prompt
    mode_label = params.mode
    if params.mode == "company":
        mode_label = f"company ({params.company_preset or 'generic'})"
    sections = [
        "ROLE: AI Interview Evaluator",
        "",
        "INTERVIEWER PERSONALITY:",
        _mode_directive(params.mode, params.company_preset),
        "",
        "DIFFICULTY CALIBRATION:",
        DIFFICULTY_DIRECTIVES.get(params.difficulty, DIFFICULTY_DIRECTIVES["medium"]),
        "",
        "EVALUATION CONTEXT:",
        f"- Target Role: {params.role}",
        f"- Question Category: {params.category or 'general'}",
        f"- Question Difficulty: {params.difficulty}",
        f"- Interview Mode: {mode_label}",
        "",
        "QUESTION ASKED:",
        f'"{params.question_text}"',
        "",
        "CANDIDATE'S ANSWER:",
        f'"{params.user_answer}"',
        "",
        "SCORING CRITERIA:",
        "1. technical_score: correctness of technical content, accuracy of concepts, proper terminology.",
        "2. communication_score: clarity, structure of the answer, ability to articulate ideas.",
        "3. confidence_score: assertiveness, decisiveness, absence of excessive hedging or filler words.",
        "4. logic_score: logical reasoning, step-by-step thinking, problem decomposition.",
        "5. depth_score: depth of knowledge, edge cases, trade-offs and real-world implications.",
        "",
        "ADDITIONAL REQUIREMENTS:",
        '- "difficulty_recommendation": whether to increase, decrease or maintain the difficulty level.',
        '- "weak_topics": specific topics the candidate struggles with (empty array if none).',
        '- "strengths": specific strengths demonstrated (empty array if none).',
        '- "feedback": detailed, actionable feedback on the answer (2-4 sentences).',
        '- "ideal_answer": what a strong answer would contain (2-4 sentences).',
        '- "improvement_tip": one concrete, actionable tip.',
        "",
        "OUTPUT FORMAT:",
        OUTPUT_CONTRACT,
    ]
    return "\n".join(sections)


__all__ = ["EvaluationPromptParams", "build_evaluation_prompt"]
