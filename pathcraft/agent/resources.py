"""Rewriting of placeholder video links into search URLs."""

from urllib.parse import quote

from pathcraft.agent.prompts import VIDEO_SEARCH_DIRECTIVE
from pathcraft.core.logging import get_logger
from pathcraft.schemas.generation import (
    GeneratedMilestone,
    GeneratedPhase,
    GeneratedRoadmapDocument,
    Resource,
    VideoResource,
)

logger = get_logger(__name__)

VIDEO_SEARCH_URL = "https://www.youtube.com/results?search_query="
VIDEO_SOURCE = "YouTube"
VIDEO_SEARCH_SOURCE = "YouTube Search"

# Characters a JavaScript encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def video_search_url(query: str) -> str:
    """Build the search results URL for a free-text query."""
    return VIDEO_SEARCH_URL + quote(query.strip(), safe=_URI_COMPONENT_SAFE)


def resolve_resource(resource: Resource) -> Resource:
    """Return the resource with its search directive, if any, resolved.

    Only video resources whose url starts with the directive change.
    The input is never mutated.
    """
    if not isinstance(resource, VideoResource):
        return resource
    if not resource.url.startswith(VIDEO_SEARCH_DIRECTIVE):
        return resource

    query = resource.url[len(VIDEO_SEARCH_DIRECTIVE) :]
    update: dict[str, str] = {"url": video_search_url(query)}
    if resource.source == VIDEO_SOURCE:
        update["source"] = VIDEO_SEARCH_SOURCE
    return resource.model_copy(update=update)


def resolve_resource_links(document: GeneratedRoadmapDocument) -> GeneratedRoadmapDocument:
    """Resolve every video search directive in a roadmap document.

    Returns a new document; the input is left as it was. Running this on
    its own output changes nothing, since no directive survives.
    """
    resolved = 0
    phases: list[GeneratedPhase] = []
    for phase in document.phases:
        milestones: list[GeneratedMilestone] = []
        for milestone in phase.milestones:
            resources = [resolve_resource(r) for r in milestone.resources]
            resolved += sum(
                1 for before, after in zip(milestone.resources, resources) if before is not after
            )
            milestones.append(milestone.model_copy(update={"resources": resources}))
        phases.append(phase.model_copy(update={"milestones": milestones}))

    logger.debug("Resolved video search links", count=resolved)
    return document.model_copy(update={"phases": phases})
