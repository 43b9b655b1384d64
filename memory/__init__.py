"""Weak-skill memory across sessions."""
from .orchestrator import MemoryService
from .updater import normalize_topic, top_weak_skills, update_weak_skills

__all__ = ["MemoryService", "normalize_topic", "top_weak_skills", "update_weak_skills"]
