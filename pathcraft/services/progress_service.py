"""Milestone completion, progress aggregation and derived progress views."""

import asyncio
import weakref
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pathcraft.core.exceptions import NotFoundError
from pathcraft.core.logging import get_logger
from pathcraft.models.roadmap import Milestone, Roadmap, UserProgress
from pathcraft.schemas.progress import (
    MilestoneProgress,
    PhaseProgress,
    PhaseStatus,
    RoadmapProgressView,
    StatsResponse,
)
from pathcraft.schemas.roadmap import MilestoneResponse, RoadmapStatus

logger = get_logger(__name__)

# Placeholders kept from the reference behavior; neither value is tracked.
STREAK_PLACEHOLDER = 12
MILESTONES_PER_PROJECT_ESTIMATE = 4


class RoadmapLocks:
    """One asyncio.Lock per roadmap, for read-recompute-write sections.

    Locks are held weakly: a roadmap nobody is toggling has no lock.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[int, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def for_roadmap(self, roadmap_id: int) -> asyncio.Lock:
        lock = self._locks.get(roadmap_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[roadmap_id] = lock
        return lock


# ============================================================================
# Progress Calculation
# ============================================================================


def _completed_count():
    return func.coalesce(func.sum(case((Milestone.completed.is_(True), 1), else_=0)), 0)


def calc_progress(completed: int, total: int) -> int:
    """Percentage of completed milestones, rounded half up.

    A roadmap without milestones is at 0%.
    """
    if total <= 0:
        return 0
    return (200 * completed + total) // (2 * total)


async def recompute_roadmap_progress(db: AsyncSession, roadmap: Roadmap) -> int:
    """Recount a roadmap's milestones and store the new progress.

    Call with pending milestone changes flushed. Does not commit.
    """
    result = await db.execute(
        select(
            func.count(Milestone.id),
            _completed_count(),
        ).where(Milestone.roadmap_id == roadmap.id)
    )
    total, completed = result.one()

    roadmap.progress = calc_progress(completed, total)
    roadmap.updated_at = datetime.utcnow()
    await db.flush()
    return roadmap.progress


async def toggle_milestone(
    db: AsyncSession,
    milestone_id: int,
    locks: RoadmapLocks,
    user_id: int | None = None,
) -> Milestone:
    """Flip a milestone's completion and refresh its roadmap's progress.

    Completing sets ``completed_at`` to now; un-completing clears it. The
    flip and the recount run under the roadmap's lock so concurrent
    toggles on one roadmap cannot lose an update.

    Raises:
        NotFoundError: If the milestone does not exist (or belongs to
            another user's roadmap when ``user_id`` is given).

    Note: This function commits the transaction.
    """
    milestone = await db.get(Milestone, milestone_id)
    if milestone is None:
        raise NotFoundError("Milestone not found")
    roadmap = await db.get(Roadmap, milestone.roadmap_id)
    if roadmap is None or (user_id is not None and roadmap.user_id != user_id):
        raise NotFoundError("Milestone not found")

    async with locks.for_roadmap(roadmap.id):
        # Another toggle may have committed while we waited
        await db.refresh(milestone)

        milestone.completed = not milestone.completed
        milestone.completed_at = datetime.utcnow() if milestone.completed else None
        await db.flush()

        progress = await recompute_roadmap_progress(db, roadmap)
        await db.commit()

    logger.info(
        "Milestone toggled",
        milestone_id=milestone.id,
        roadmap_id=roadmap.id,
        completed=milestone.completed,
        progress=progress,
    )
    return milestone


# ============================================================================
# Derived View
# ============================================================================


def _group_by_phase(milestones: Sequence[Milestone]) -> dict[str, list[Milestone]]:
    grouped: dict[str, list[Milestone]] = {}
    for milestone in sorted(milestones, key=lambda m: m.order):
        grouped.setdefault(milestone.phase_id, []).append(milestone)
    return grouped


def _is_finished(milestones: Sequence[Milestone]) -> bool:
    return bool(milestones) and all(m.completed for m in milestones)


def calc_phase_status(
    phase_index: int,
    phase_ids: Sequence[str],
    milestones_by_phase: dict[str, list[Milestone]],
) -> PhaseStatus:
    """Status of one phase given every phase's milestones.

    completed: all of its milestones are done (vacuously so for an empty phase).
    in-progress: some are done, or none are but every earlier phase is
    finished and non-empty.
    upcoming: otherwise.
    """
    current = milestones_by_phase.get(phase_ids[phase_index], [])
    done = sum(1 for m in current if m.completed)

    if done == len(current):
        return PhaseStatus.COMPLETED
    if done > 0:
        return PhaseStatus.IN_PROGRESS

    earlier = phase_ids[:phase_index]
    if all(_is_finished(milestones_by_phase.get(pid, [])) for pid in earlier):
        return PhaseStatus.IN_PROGRESS
    return PhaseStatus.UPCOMING


def derive_phase_statuses(
    phase_ids: Sequence[str],
    milestones: Sequence[Milestone],
) -> list[PhaseStatus]:
    """Statuses for phases in declared order."""
    grouped = _group_by_phase(milestones)
    return [calc_phase_status(i, phase_ids, grouped) for i in range(len(phase_ids))]


def unlocked_flags(status: PhaseStatus, phase_milestones: Sequence[Milestone]) -> list[bool]:
    """A milestone is unlocked when its phase is in progress and all
    milestones before it in the phase are completed."""
    flags = []
    all_previous_done = True
    for milestone in phase_milestones:
        flags.append(status == PhaseStatus.IN_PROGRESS and all_previous_done)
        all_previous_done = all_previous_done and milestone.completed
    return flags


def build_progress_view(roadmap: Roadmap, milestones: Sequence[Milestone]) -> RoadmapProgressView:
    """Per-phase status and per-milestone unlock state for a roadmap."""
    grouped = _group_by_phase(milestones)
    phase_ids = [str(phase.get("id")) for phase in roadmap.phases]

    phases = []
    for index, phase in enumerate(roadmap.phases):
        phase_milestones = grouped.get(phase_ids[index], [])
        status = calc_phase_status(index, phase_ids, grouped)
        done = sum(1 for m in phase_milestones if m.completed)
        phases.append(
            PhaseProgress(
                id=phase_ids[index],
                title=str(phase.get("title", "")),
                description=str(phase.get("description", "")),
                weeks=phase.get("weeks"),
                status=status,
                progress=calc_progress(done, len(phase_milestones)),
                completed_count=done,
                total_count=len(phase_milestones),
                milestones=[
                    MilestoneProgress(
                        **MilestoneResponse.model_validate(m).model_dump(),
                        unlocked=unlocked,
                    )
                    for m, unlocked in zip(
                        phase_milestones, unlocked_flags(status, phase_milestones)
                    )
                ],
            )
        )

    completed = sum(1 for m in milestones if m.completed)
    return RoadmapProgressView(
        roadmap_id=roadmap.id,
        progress=calc_progress(completed, len(milestones)),
        completed_count=completed,
        total_count=len(milestones),
        phases=phases,
    )


# ============================================================================
# Statistics
# ============================================================================


async def get_user_stats(db: AsyncSession, user_id: int) -> StatsResponse:
    """Aggregate milestone and roadmap counts across a user's roadmaps.

    ``streak`` is the fixed placeholder and ``completed_projects`` a rough
    estimate (one project per four completed milestones), as in the
    reference behavior.
    """
    roadmap_rows = await db.execute(select(Roadmap.status).where(Roadmap.user_id == user_id))
    statuses = list(roadmap_rows.scalars().all())

    milestone_row = await db.execute(
        select(
            func.count(Milestone.id),
            _completed_count(),
        )
        .join(Roadmap, Roadmap.id == Milestone.roadmap_id)
        .where(Roadmap.user_id == user_id)
    )
    total_milestones, completed_milestones = milestone_row.one()

    hours_row = await db.execute(
        select(func.coalesce(func.sum(UserProgress.total_hours), 0))
        .join(Roadmap, Roadmap.id == UserProgress.roadmap_id)
        .where(UserProgress.user_id == user_id, Roadmap.user_id == user_id)
    )
    total_hours = hours_row.scalar_one()

    return StatsResponse(
        streak=STREAK_PLACEHOLDER,
        completed_milestones=completed_milestones,
        total_milestones=total_milestones,
        total_hours=total_hours,
        completed_projects=completed_milestones // MILESTONES_PER_PROJECT_ESTIMATE,
        total_roadmaps=len(statuses),
        active_roadmaps=sum(1 for s in statuses if s == RoadmapStatus.ACTIVE.value),
    )
