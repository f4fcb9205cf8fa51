"""Roadmap API routes."""

from fastapi import APIRouter, status

from pathcraft.api.deps import CurrentUser, DBDep, ModelClientDep
from pathcraft.core.config import get_settings
from pathcraft.core.exceptions import NotFoundError
from pathcraft.core.logging import get_logger
from pathcraft.schemas import (
    GenerateRoadmapResponse,
    MilestoneResponse,
    RoadmapDetailResponse,
    RoadmapFormInput,
    RoadmapProgressView,
    RoadmapResponse,
    RoadmapUpdate,
    UserProgressResponse,
)
from pathcraft.services import generation_service, progress_service, roadmap_service

logger = get_logger(__name__)
router = APIRouter(prefix="/roadmaps", tags=["roadmaps"])


@router.post("/generate", response_model=GenerateRoadmapResponse)
async def generate_roadmap(
    data: RoadmapFormInput,
    db: DBDep,
    user_id: CurrentUser,
    client: ModelClientDep,
) -> dict:
    """Generate a roadmap with the model and store it."""
    roadmap, document = await generation_service.generate_roadmap(
        db,
        user_id=user_id,
        form=data,
        client=client,
        timeout=get_settings().GENERATION_TIMEOUT_SECONDS,
    )
    return GenerateRoadmapResponse(
        roadmap=RoadmapResponse.model_validate(roadmap),
        generated_data=document,
    ).model_dump(mode="json", by_alias=True)


@router.get("", response_model=list[RoadmapResponse])
async def list_roadmaps(db: DBDep, user_id: CurrentUser) -> list[dict]:
    """List the current user's roadmaps, newest first."""
    roadmaps = await roadmap_service.list_user_roadmaps(db, user_id)
    return [RoadmapResponse.model_validate(r).model_dump(mode="json", by_alias=True) for r in roadmaps]


@router.get("/{roadmap_id}", response_model=RoadmapDetailResponse)
async def get_roadmap(roadmap_id: int, db: DBDep, user_id: CurrentUser) -> dict:
    """Get a roadmap with its milestones and the user's progress record."""
    roadmap = await roadmap_service.get_roadmap(db, roadmap_id, user_id)
    if not roadmap:
        raise NotFoundError("Roadmap not found")

    milestones = await roadmap_service.list_roadmap_milestones(db, roadmap_id)
    progress = await roadmap_service.get_user_progress(db, user_id, roadmap_id)
    return RoadmapDetailResponse(
        roadmap=RoadmapResponse.model_validate(roadmap),
        milestones=[MilestoneResponse.model_validate(m) for m in milestones],
        progress=UserProgressResponse.model_validate(progress) if progress else None,
    ).model_dump(mode="json", by_alias=True)


@router.patch("/{roadmap_id}", response_model=RoadmapResponse)
async def update_roadmap(
    roadmap_id: int,
    data: RoadmapUpdate,
    db: DBDep,
    user_id: CurrentUser,
) -> dict:
    """Change a roadmap's status (active, paused, completed)."""
    roadmap = await roadmap_service.update_roadmap_status(db, roadmap_id, data.status, user_id)
    if not roadmap:
        raise NotFoundError("Roadmap not found")
    return RoadmapResponse.model_validate(roadmap).model_dump(mode="json", by_alias=True)


@router.delete("/{roadmap_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_roadmap(roadmap_id: int, db: DBDep, user_id: CurrentUser) -> None:
    """Delete a roadmap together with its milestones and progress."""
    deleted = await roadmap_service.delete_roadmap(db, roadmap_id, user_id)
    if not deleted:
        raise NotFoundError("Roadmap not found")


@router.get("/{roadmap_id}/progress", response_model=RoadmapProgressView)
async def get_roadmap_progress(roadmap_id: int, db: DBDep, user_id: CurrentUser) -> dict:
    """Get phase statuses and milestone unlock state for a roadmap."""
    roadmap = await roadmap_service.get_roadmap(db, roadmap_id, user_id)
    if not roadmap:
        raise NotFoundError("Roadmap not found")

    milestones = await roadmap_service.list_roadmap_milestones(db, roadmap_id)
    view = progress_service.build_progress_view(roadmap, milestones)
    return view.model_dump(mode="json", by_alias=True)
