"""Repair and parsing of model output into a typed roadmap."""

import json
import re

import pydantic

from pathcraft.core.exceptions import MalformedRoadmapError
from pathcraft.core.logging import get_logger
from pathcraft.schemas.generation import GeneratedRoadmapDocument

logger = get_logger(__name__)

# A fenced block on its own lines: ```json ... ```, ```JSON ... ``` or bare ```
_CODE_BLOCK = re.compile(r"```(?:json)?[ \t]*\n(.*?)\n\s*```", re.DOTALL | re.IGNORECASE)
# Leftover fence markers, e.g. an opening fence on truncated output
_CODE_FENCE = re.compile(r"\n?```(?:json)?\n?", re.IGNORECASE)
# One or more commas (with whitespace) directly before a closing bracket
_TRAILING_COMMAS = re.compile(r"(?:,\s*)+([}\]])")
_WHITESPACE_RUN = re.compile(r"\s+")


def _extract_from_code_block(text: str) -> str | None:
    """Content of the first fenced code block, or None if there is none."""
    match = _CODE_BLOCK.search(text)
    if match:
        return match.group(1)
    return None


def _extract_json_substring(text: str) -> str | None:
    """Extract the first complete JSON object or array using bracket counting.

    Brackets inside string values are ignored, so prose around the JSON
    is dropped while the JSON itself is kept verbatim.

    Returns:
        First complete JSON substring or None if not found
    """
    start_idx = -1
    for i, char in enumerate(text):
        if char in ("{", "["):
            start_idx = i
            break

    if start_idx == -1:
        return None

    depth = 0
    in_string = False
    escape_next = False

    for i in range(start_idx, len(text)):
        char = text[i]

        if escape_next:
            escape_next = False
            continue

        if char == "\\":
            escape_next = True
            continue

        if char == '"':
            in_string = not in_string
            continue

        if not in_string:
            if char in ("{", "["):
                depth += 1
            elif char in ("}", "]"):
                depth -= 1
                if depth == 0:
                    return text[start_idx : i + 1]

    return None


def _strip_code_fences(text: str) -> str:
    """Narrow model output to the JSON it carries.

    Prefers the first fenced block, then the first balanced JSON value
    within it. Text with no balanced JSON (truncated output) only loses
    its fence markers.
    """
    block = _extract_from_code_block(text)
    if block is not None:
        text = block

    json_text = _extract_json_substring(text)
    if json_text is not None:
        return json_text
    return _CODE_FENCE.sub("", text)


def _fix_trailing_commas(text: str) -> str:
    """Remove trailing commas before closing brackets.

    Args:
        text: JSON string potentially containing trailing commas

    Returns:
        JSON string with trailing commas removed
    """
    return _TRAILING_COMMAS.sub(r"\1", text)


def _collapse_whitespace(text: str) -> str:
    """Turn newlines and whitespace runs into single spaces.

    Models sometimes emit raw line breaks inside JSON strings, which
    json.loads rejects. Flattening them is a heuristic: it also flattens
    intentional line breaks inside string values.
    """
    return _WHITESPACE_RUN.sub(" ", text).strip()


def _repair_once(text: str) -> str:
    text = _strip_code_fences(text)
    text = _fix_trailing_commas(text)
    return _collapse_whitespace(text)


def repair_llm_json(content: str | None) -> str:
    """Best-effort cleanup of near-JSON model output.

    Applies, in order: narrowing to the fenced block or first JSON value,
    trailing comma removal and whitespace collapsing. The passes repeat
    until the text stops changing, so
    ``repair_llm_json(repair_llm_json(x)) == repair_llm_json(x)``.
    Every pass only removes or replaces characters, so this terminates.

    Never raises. Text that is still not JSON fails at parse time.
    """
    repaired = content or ""
    while True:
        candidate = _repair_once(repaired)
        if candidate == repaired:
            return candidate
        repaired = candidate


def parse_roadmap_response(text: str) -> GeneratedRoadmapDocument:
    """Parse repaired model output into a roadmap document.

    Phase and milestone order is kept exactly as given.

    Raises:
        MalformedRoadmapError: If the text is not JSON, or a required field
            (title, phases, phase id/title/milestones, milestone
            title/description/resources) is missing or has the wrong shape.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError) as e:
        _log_malformed("Roadmap response is not valid JSON", text, error=str(e))
        raise MalformedRoadmapError(f"Roadmap response is not valid JSON: {e}", text) from e

    if not isinstance(data, dict):
        _log_malformed("Roadmap response is not a JSON object", text)
        raise MalformedRoadmapError("Roadmap response is not a JSON object", text)

    try:
        document = GeneratedRoadmapDocument.model_validate(data)
    except pydantic.ValidationError as e:
        _log_malformed(
            "Roadmap response is missing required fields",
            text,
            errors=e.errors(include_url=False, include_context=False, include_input=False),
        )
        raise MalformedRoadmapError(f"Roadmap response has an invalid structure: {e}", text) from e

    logger.debug(
        "Parsed roadmap response",
        phases=len(document.phases),
        milestones=document.milestone_count(),
    )
    return document


def _log_malformed(event: str, text: str, **context: object) -> None:
    excerpt = MalformedRoadmapError.EXCERPT_CHARS
    logger.error(
        event,
        length=len(text),
        head=text[:excerpt],
        tail=text[-excerpt:],
        **context,
    )
