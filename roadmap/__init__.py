"""30-day improvement roadmap."""
from .engine import RoadmapEngine, default_roadmap
from .generator import Roadmap, RoadmapParams, WeekTask, generate_roadmap

__all__ = ["Roadmap", "RoadmapParams", "WeekTask", "generate_roadmap", "RoadmapEngine", "default_roadmap"]
