from __future__ import annotations  # Offline scorer that returns well-formed evaluation JSON

import json
import random
from typing import Optional


def mock_completion(prompt: str, *, rng: Optional[random.Random] = None) -> str:  # Development stand-in for a real model
    rnd = rng or random.Random()
    base = 55 + rnd.randrange(30)

    def _vary() -> int:
        return max(0, min(100, base + rnd.randrange(20) - 10))

    scores = {name: _vary() for name in ("technical_score", "communication_score", "confidence_score", "logic_score", "depth_score")}
    mean = sum(scores.values()) / len(scores)
    recommendation = "increase" if mean >= 75 else "decrease" if mean < 60 else "maintain"

    evaluation = {
        **scores,
        "difficulty_recommendation": recommendation,
        "weak_topics": ["error handling", "edge cases"],
        "strengths": ["core concept understanding", "clear structure"],
        "feedback": (
            "The answer shows a solid grasp of the core concept but lacks depth on edge cases "
            "and concrete examples. The structure is clear and could be tightened further."
        ),
        "ideal_answer": (
            "A strong answer covers the core concept, walks through two or three edge cases, "
            "compares alternative approaches and ties them to real-world performance trade-offs."
        ),
        "improvement_tip": "For every concept you explain, name one edge case and one trade-off.",
    }
    return json.dumps(evaluation)
