"""Achievement badges."""
from .engine import BadgeEngine
from .rules import DEFAULT_RULES, BadgeRule

__all__ = ["BadgeEngine", "BadgeRule", "DEFAULT_RULES"]
