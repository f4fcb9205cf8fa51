"""Roadmap, milestone and progress models."""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pathcraft.core.database import Base


class Roadmap(Base):
    """A generated study roadmap.

    ``phases`` keeps the phase list as generated, minus each phase's
    milestones; those live in the ``milestones`` table keyed by ``phase_id``.
    """

    __tablename__ = "roadmaps"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)

    # Request
    title: Mapped[str] = mapped_column(String)
    topic: Mapped[str] = mapped_column(String)
    goal: Mapped[str] = mapped_column(String)
    skill_level: Mapped[str] = mapped_column(String)
    time_per_week: Mapped[int] = mapped_column(Integer)
    duration: Mapped[int] = mapped_column(Integer)
    learning_style: Mapped[list[str]] = mapped_column(JSON, default=list)
    details: Mapped[str | None] = mapped_column(Text, default=None)

    # Generated structure
    phases: Mapped[list[dict[str, object]]] = mapped_column(JSON, default=list)

    # State
    status: Mapped[str] = mapped_column(String, default="active")  # active | paused | completed
    progress: Mapped[int] = mapped_column(Integer, default=0)  # 0..100

    milestones: Mapped[list["Milestone"]] = relationship(
        back_populates="roadmap",
        cascade="all, delete-orphan",
        order_by="Milestone.order",
    )
    user_progress: Mapped[list["UserProgress"]] = relationship(
        back_populates="roadmap",
        cascade="all, delete-orphan",
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class Milestone(Base):
    """One completable step of a roadmap phase."""

    __tablename__ = "milestones"
    __table_args__ = (UniqueConstraint("roadmap_id", "order", name="uq_milestone_order"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    roadmap_id: Mapped[int] = mapped_column(
        ForeignKey("roadmaps.id", ondelete="CASCADE"), index=True
    )
    # Refers to an entry of Roadmap.phases, not to a table
    phase_id: Mapped[str] = mapped_column(String)

    title: Mapped[str] = mapped_column(String)
    description: Mapped[str] = mapped_column(Text)
    order: Mapped[int] = mapped_column(Integer)
    resources: Mapped[list[dict[str, object]]] = mapped_column(JSON, default=list)

    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, default=None)

    roadmap: Mapped[Roadmap] = relationship(back_populates="milestones")


class UserProgress(Base):
    """Per-user study activity on a roadmap."""

    __tablename__ = "user_progress"
    __table_args__ = (UniqueConstraint("user_id", "roadmap_id", name="uq_user_progress"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    roadmap_id: Mapped[int] = mapped_column(ForeignKey("roadmaps.id", ondelete="CASCADE"))

    total_hours: Mapped[int] = mapped_column(Integer, default=0)
    streak: Mapped[int] = mapped_column(Integer, default=0)
    last_activity: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    roadmap: Mapped[Roadmap] = relationship(back_populates="user_progress")
