"""Roadmap generation pipeline: form in, persisted roadmap out."""

import asyncio
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from pathcraft.agent.llm_utils import parse_roadmap_response, repair_llm_json
from pathcraft.agent.prompts import build_roadmap_prompt
from pathcraft.agent.resources import resolve_resource_links
from pathcraft.core.exceptions import ProviderError
from pathcraft.core.logging import get_logger
from pathcraft.models.roadmap import Roadmap
from pathcraft.schemas.generation import GeneratedRoadmapDocument
from pathcraft.schemas.roadmap import RoadmapFormInput
from pathcraft.services import roadmap_service

logger = get_logger(__name__)


class TextModel(Protocol):
    async def submit(self, prompt: str) -> str: ...


async def generate_roadmap(
    db: AsyncSession,
    *,
    user_id: int,
    form: RoadmapFormInput,
    client: TextModel,
    timeout: float | None = None,
) -> tuple[Roadmap, GeneratedRoadmapDocument]:
    """Generate a roadmap for a validated form and persist it.

    Steps: build prompt, call the model (bounded by ``timeout``), repair
    and parse the output, resolve video search links, then materialize.
    Nothing is retried; any failure leaves no roadmap behind.

    Raises:
        ProviderError: The model call failed or timed out.
        MalformedRoadmapError: The output could not be parsed into a roadmap.
        PersistenceError: Storing the roadmap failed.
    """
    prompt = build_roadmap_prompt(form)
    logger.info(
        "Generating roadmap",
        user_id=user_id,
        topic=form.topic,
        skill_level=form.skill_level.value,
        duration=form.duration,
    )

    try:
        raw = await asyncio.wait_for(client.submit(prompt), timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.error("Model call timed out", timeout=timeout)
        raise ProviderError(f"Model call timed out after {timeout}s") from e

    document = parse_roadmap_response(repair_llm_json(raw))
    document = resolve_resource_links(document)

    roadmap = await roadmap_service.materialize_roadmap(
        db,
        user_id=user_id,
        form=form,
        document=document,
    )
    return roadmap, document
