"""Pathcraft: LLM-generated study roadmaps with progress tracking."""
