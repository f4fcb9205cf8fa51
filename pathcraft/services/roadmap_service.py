"""Roadmap service for materializing generated roadmaps and CRUD operations."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pathcraft.core.exceptions import PersistenceError
from pathcraft.core.logging import get_logger
from pathcraft.models.roadmap import Milestone, Roadmap, UserProgress
from pathcraft.schemas.generation import GeneratedRoadmapDocument
from pathcraft.schemas.roadmap import RoadmapFormInput, RoadmapStatus

logger = get_logger(__name__)


# ============================================================================
# Materialization
# ============================================================================


def _phase_payloads(document: GeneratedRoadmapDocument) -> list[dict]:
    """Phases as stored on the roadmap: everything except their milestones."""
    return [
        phase.model_dump(mode="json", by_alias=True, exclude={"milestones"})
        for phase in document.phases
    ]


async def materialize_roadmap(
    db: AsyncSession,
    *,
    user_id: int,
    form: RoadmapFormInput,
    document: GeneratedRoadmapDocument,
) -> Roadmap:
    """Persist a resolved roadmap document as one unit.

    Creates the roadmap (active, 0% progress), one milestone per generated
    milestone with ``order`` counting from 1 across all phases in document
    order, and the user's progress record. Everything is committed in a
    single transaction; on failure it is rolled back, so no roadmap is
    ever visible without its milestones and progress record.

    Raises:
        PersistenceError: If any write fails.

    Note: This function commits the transaction.
    """
    try:
        roadmap = Roadmap(
            user_id=user_id,
            title=document.title,
            topic=form.topic,
            goal=form.goal.value,
            skill_level=form.skill_level.value,
            time_per_week=form.time_per_week,
            duration=form.duration,
            learning_style=list(form.learning_style),
            details=form.details,
            phases=_phase_payloads(document),
            status=RoadmapStatus.ACTIVE.value,
            progress=0,
        )
        db.add(roadmap)
        await db.flush()

        order = 1
        for phase in document.phases:
            for item in phase.milestones:
                db.add(
                    Milestone(
                        roadmap_id=roadmap.id,
                        phase_id=phase.id,
                        title=item.title,
                        description=item.description,
                        order=order,
                        completed=False,
                        completed_at=None,
                        resources=[
                            r.model_dump(mode="json", by_alias=True, exclude_none=True)
                            for r in item.resources
                        ],
                    )
                )
                order += 1

        db.add(
            UserProgress(
                user_id=user_id,
                roadmap_id=roadmap.id,
                total_hours=0,
                streak=0,
                last_activity=datetime.utcnow(),
            )
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Roadmap materialization failed", user_id=user_id, error=str(e), exc_info=True)
        raise PersistenceError(f"Failed to persist roadmap: {e}") from e

    logger.info(
        "Roadmap created",
        roadmap_id=roadmap.id,
        user_id=user_id,
        phases=len(document.phases),
        milestones=order - 1,
    )
    return roadmap


# ============================================================================
# CRUD Operations
# ============================================================================


async def get_roadmap(
    db: AsyncSession,
    roadmap_id: int,
    user_id: int | None = None,
) -> Roadmap | None:
    """Get a roadmap by ID.

    Args:
        db: Database session
        roadmap_id: Roadmap ID
        user_id: When given, roadmaps owned by anyone else are treated as missing

    Returns:
        Roadmap or None
    """
    roadmap = await db.get(Roadmap, roadmap_id)
    if roadmap is None:
        return None
    if user_id is not None and roadmap.user_id != user_id:
        return None
    return roadmap


async def list_user_roadmaps(db: AsyncSession, user_id: int) -> list[Roadmap]:
    """List a user's roadmaps, newest first."""
    result = await db.execute(
        select(Roadmap)
        .where(Roadmap.user_id == user_id)
        .order_by(Roadmap.created_at.desc(), Roadmap.id.desc())
    )
    return list(result.scalars().all())


async def list_roadmap_milestones(db: AsyncSession, roadmap_id: int) -> list[Milestone]:
    """List a roadmap's milestones in ``order``."""
    result = await db.execute(
        select(Milestone).where(Milestone.roadmap_id == roadmap_id).order_by(Milestone.order)
    )
    return list(result.scalars().all())


async def get_user_progress(
    db: AsyncSession,
    user_id: int,
    roadmap_id: int,
) -> UserProgress | None:
    result = await db.execute(
        select(UserProgress).where(
            UserProgress.user_id == user_id,
            UserProgress.roadmap_id == roadmap_id,
        )
    )
    return result.scalar_one_or_none()


async def update_roadmap_status(
    db: AsyncSession,
    roadmap_id: int,
    status: RoadmapStatus,
    user_id: int | None = None,
) -> Roadmap | None:
    """Set a roadmap's lifecycle status.

    Returns:
        Updated roadmap or None

    Note: This function commits the transaction.
    """
    roadmap = await get_roadmap(db, roadmap_id, user_id)
    if not roadmap:
        return None

    roadmap.status = status.value
    roadmap.updated_at = datetime.utcnow()
    await db.commit()

    logger.info("Roadmap status updated", roadmap_id=roadmap_id, status=status.value)
    return roadmap


async def delete_roadmap(
    db: AsyncSession,
    roadmap_id: int,
    user_id: int | None = None,
) -> bool:
    """Delete a roadmap with its milestones and progress records.

    Returns:
        False if the roadmap does not exist

    Note: This function commits the transaction.
    """
    roadmap = await get_roadmap(db, roadmap_id, user_id)
    if not roadmap:
        return False

    # ORM cascade removes milestones and user_progress rows
    await db.delete(roadmap)
    await db.commit()

    logger.info("Roadmap deleted", roadmap_id=roadmap_id)
    return True
