"""API routes."""

from pathcraft.api.routes import milestones, roadmaps, stats

__all__ = ["roadmaps", "milestones", "stats"]
