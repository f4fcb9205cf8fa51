"""Statistics routes."""

from fastapi import APIRouter

from pathcraft.api.deps import CurrentUser, DBDep
from pathcraft.schemas import StatsResponse
from pathcraft.services import progress_service

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=StatsResponse)
async def get_stats(db: DBDep, user_id: CurrentUser) -> dict:
    """Aggregate counts across the current user's roadmaps."""
    stats = await progress_service.get_user_stats(db, user_id)
    return stats.model_dump(mode="json", by_alias=True)
