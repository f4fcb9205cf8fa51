"""Pydantic schemas."""

from pathcraft.schemas.generation import (
    ArticleResource,
    CourseResource,
    GeneratedMilestone,
    GeneratedPhase,
    GenerateRoadmapResponse,
    GeneratedProject,
    GeneratedRoadmapDocument,
    Resource,
    VideoResource,
)
from pathcraft.schemas.progress import (
    MilestoneProgress,
    PhaseProgress,
    PhaseStatus,
    RoadmapProgressView,
    StatsResponse,
)
from pathcraft.schemas.roadmap import (
    LearningGoal,
    MilestoneResponse,
    RoadmapDetailResponse,
    RoadmapFormInput,
    RoadmapResponse,
    RoadmapStatus,
    RoadmapUpdate,
    SkillLevel,
    ToggleMilestoneResponse,
    UserProgressResponse,
)

__all__ = [
    "RoadmapFormInput",
    "LearningGoal",
    "SkillLevel",
    "RoadmapStatus",
    "RoadmapUpdate",
    "RoadmapResponse",
    "RoadmapDetailResponse",
    "MilestoneResponse",
    "ToggleMilestoneResponse",
    "UserProgressResponse",
    "GeneratedRoadmapDocument",
    "GenerateRoadmapResponse",
    "GeneratedPhase",
    "GeneratedMilestone",
    "GeneratedProject",
    "Resource",
    "VideoResource",
    "ArticleResource",
    "CourseResource",
    "PhaseStatus",
    "MilestoneProgress",
    "PhaseProgress",
    "RoadmapProgressView",
    "StatsResponse",
]
