"""Typed shape of a model-generated roadmap.

These models only live between parsing the model output and persisting
it. Resources are a tagged union on ``type``, so a resource whose shape
does not match its type is rejected at the parse boundary.
"""

from typing import Annotated, Literal

from pydantic import ConfigDict, Field, PositiveInt, model_validator

from pathcraft.schemas.base import CamelModel
from pathcraft.schemas.roadmap import RoadmapResponse, SkillLevel


class _GeneratedModel(CamelModel):
    # Models write ids and durations as bare numbers ("id": 1, "duration": 45)
    model_config = ConfigDict(coerce_numbers_to_str=True)


class _ResourceBase(_GeneratedModel):
    title: str
    url: str
    source: str = ""
    level: SkillLevel | None = None


class VideoResource(_ResourceBase):
    type: Literal["video"]
    duration: str | None = None


class ArticleResource(_ResourceBase):
    type: Literal["article"]
    read_time: str | None = None


class CourseResource(_ResourceBase):
    type: Literal["course"]
    duration: str | None = None


Resource = Annotated[
    VideoResource | ArticleResource | CourseResource,
    Field(discriminator="type"),
]


class GeneratedMilestone(_GeneratedModel):
    title: str
    description: str
    resources: list[Resource]


class GeneratedPhase(_GeneratedModel):
    id: str
    title: str
    description: str = ""
    weeks: PositiveInt | None = None
    milestones: list[GeneratedMilestone]


class GeneratedProject(_GeneratedModel):
    title: str
    description: str = ""
    phase: str | None = None
    skills: list[str] = Field(default_factory=list)
    difficulty: str | None = None


class GeneratedRoadmapDocument(_GeneratedModel):
    """Phases and milestones keep the order the model produced them in."""

    title: str
    description: str = ""
    total_weeks: int | None = None
    phases: list[GeneratedPhase]
    projects: list[GeneratedProject] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_phase_ids(self) -> "GeneratedRoadmapDocument":
        seen: set[str] = set()
        for phase in self.phases:
            if phase.id in seen:
                raise ValueError(f"Duplicate phase id: {phase.id}")
            seen.add(phase.id)
        return self

    def milestone_count(self) -> int:
        return sum(len(phase.milestones) for phase in self.phases)


class GenerateRoadmapResponse(CamelModel):
    """The stored roadmap plus the full generated document it came from."""

    success: bool = True
    roadmap: RoadmapResponse
    generated_data: GeneratedRoadmapDocument
