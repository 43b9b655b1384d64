"""Interview readiness index."""
from .calculator import ReadinessParams, calculate_readiness
from .engine import ReadinessEngine

__all__ = ["ReadinessParams", "calculate_readiness", "ReadinessEngine"]
