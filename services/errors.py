"""Error taxonomy shared by the coaching engine layers."""
from __future__ import annotations

from typing import Any


class CoachEngineError(RuntimeError):  # Base engine error
    pass


class InputValidationError(CoachEngineError):  # Malformed caller arguments, raised before side effects
    pass


class NotFoundError(CoachEngineError):  # Missing session/question or ownership mismatch
    pass


class ExternalServiceError(CoachEngineError):  # Scorer unreachable, timed out or returned nothing
    pass


class OutputValidationError(CoachEngineError):  # Scorer output not well-formed
    def __init__(self, errors: list[str], *, parsed: Any = None, decoded: bool = False) -> None:
        super().__init__("; ".join(errors) or "scorer output failed validation")
        self.errors = list(errors)
        self.parsed = parsed
        self.decoded = decoded


class TransactionError(CoachEngineError):  # Persistence failure, transaction rolled back
    pass


__all__ = [
    "CoachEngineError",
    "InputValidationError",
    "NotFoundError",
    "ExternalServiceError",
    "OutputValidationError",
    "TransactionError",
]
