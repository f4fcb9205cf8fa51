"""Progress view and statistics schemas."""

from enum import Enum

from pathcraft.schemas.base import CamelModel
from pathcraft.schemas.roadmap import MilestoneResponse


class PhaseStatus(str, Enum):
    COMPLETED = "completed"
    IN_PROGRESS = "in-progress"
    UPCOMING = "upcoming"


class MilestoneProgress(MilestoneResponse):
    """A milestone plus whether the learner may work on it now."""

    unlocked: bool


class PhaseProgress(CamelModel):
    id: str
    title: str
    description: str
    weeks: int | None
    status: PhaseStatus
    progress: int  # 0..100
    completed_count: int
    total_count: int
    milestones: list[MilestoneProgress]


class RoadmapProgressView(CamelModel):
    """Progress data for a roadmap."""

    roadmap_id: int
    progress: int
    completed_count: int
    total_count: int
    phases: list[PhaseProgress]


class StatsResponse(CamelModel):
    """Aggregate counts across a user's roadmaps.

    ``streak`` and ``completed_projects`` are placeholders, not tracked values.
    """

    streak: int
    completed_milestones: int
    total_milestones: int
    total_hours: int
    completed_projects: int
    total_roadmaps: int
    active_roadmaps: int
