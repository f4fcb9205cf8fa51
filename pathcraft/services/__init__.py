"""Service layer modules."""

from pathcraft.services import generation_service, progress_service, roadmap_service

__all__ = [
    "generation_service",
    "progress_service",
    "roadmap_service",
]
