"""API dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from pathcraft.agent.llm import ModelClient, get_model_client
from pathcraft.core.auth import get_auth_user
from pathcraft.core.database import get_session
from pathcraft.services.progress_service import RoadmapLocks


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async for session in get_session():
        yield session


def get_roadmap_locks(request: Request) -> RoadmapLocks:
    """Per-roadmap locks owned by the running application."""
    return request.app.state.roadmap_locks


# Database dependency
DBDep = Annotated[AsyncSession, Depends(get_db)]

# Auth user dependency - returns user_id (default: 1 for anonymous access)
CurrentUser = Annotated[int, Depends(get_auth_user)]

ModelClientDep = Annotated[ModelClient, Depends(get_model_client)]
RoadmapLocksDep = Annotated[RoadmapLocks, Depends(get_roadmap_locks)]
