"""Roadmap schemas for API requests and responses."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from pathcraft.schemas.base import CamelModel


class LearningGoal(str, Enum):
    """What the learner wants out of the roadmap."""

    PROJECT_BUILDING = "project-building"
    EXAM_PREPARATION = "exam-preparation"
    CONCEPT_MASTERY = "concept-mastery"


class SkillLevel(str, Enum):
    """Learner skill level, also used to grade resources."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class RoadmapStatus(str, Enum):
    """Lifecycle state of a roadmap."""

    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class RoadmapFormInput(CamelModel):
    """What the learner submits to generate a roadmap."""

    topic: str = Field(min_length=1)
    goal: LearningGoal
    skill_level: SkillLevel
    time_per_week: int = Field(ge=1, le=40)
    duration: int = Field(ge=1, le=52)
    learning_style: list[str] = Field(min_length=1)
    details: str | None = None

    @field_validator("topic")
    @classmethod
    def _topic_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Topic is required")
        return value

    @field_validator("learning_style")
    @classmethod
    def _distinct_styles(cls, value: list[str]) -> list[str]:
        # A set of tags: drop blanks and repeats, keep first-seen order
        styles: list[str] = []
        for tag in value:
            tag = tag.strip()
            if tag and tag not in styles:
                styles.append(tag)
        if not styles:
            raise ValueError("At least one learning style is required")
        return styles


class RoadmapUpdate(CamelModel):
    """Update an existing roadmap."""

    status: RoadmapStatus


class RoadmapResponse(CamelModel):
    """Roadmap response."""

    id: int
    user_id: int
    title: str
    topic: str
    goal: str
    skill_level: str
    time_per_week: int
    duration: int
    learning_style: list[str]
    details: str | None
    phases: list[dict[str, Any]]
    status: str
    progress: int
    created_at: datetime
    updated_at: datetime


class MilestoneResponse(CamelModel):
    """Milestone response."""

    id: int
    roadmap_id: int
    phase_id: str
    title: str
    description: str
    order: int
    completed: bool
    resources: list[dict[str, Any]]
    completed_at: datetime | None


class UserProgressResponse(CamelModel):
    """User progress response."""

    id: int
    user_id: int
    roadmap_id: int
    total_hours: int
    streak: int
    last_activity: datetime


class RoadmapDetailResponse(CamelModel):
    """A roadmap with its milestones (in order) and the caller's progress record."""

    roadmap: RoadmapResponse
    milestones: list[MilestoneResponse]
    progress: UserProgressResponse | None


class ToggleMilestoneResponse(CamelModel):
    success: bool = True
    milestone: MilestoneResponse
