"""Database models."""

from pathcraft.models.roadmap import Milestone, Roadmap, UserProgress
from pathcraft.models.user import User

__all__ = [
    "User",
    "Roadmap",
    "Milestone",
    "UserProgress",
]
