"""Milestone routes."""

from fastapi import APIRouter

from pathcraft.api.deps import CurrentUser, DBDep, RoadmapLocksDep
from pathcraft.schemas import MilestoneResponse, ToggleMilestoneResponse
from pathcraft.services import progress_service

router = APIRouter(prefix="/milestones", tags=["milestones"])


@router.patch("/{milestone_id}/toggle", response_model=ToggleMilestoneResponse)
async def toggle_milestone(
    milestone_id: int,
    db: DBDep,
    user_id: CurrentUser,
    locks: RoadmapLocksDep,
) -> dict:
    """Mark a milestone done (or not done) and update roadmap progress."""
    milestone = await progress_service.toggle_milestone(db, milestone_id, locks, user_id)
    return ToggleMilestoneResponse(
        milestone=MilestoneResponse.model_validate(milestone),
    ).model_dump(mode="json", by_alias=True)
