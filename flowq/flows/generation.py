"""
Parsing the flow generator's response.

The generator is asked for strict JSON of the shape
{"manifest": {...}, "templates": [{"name", "emailType", "mjml"}, ...]}.
Models sometimes wrap it in a markdown code block, which is stripped before
parsing. Anything that still does not parse or validate is a hard failure:
there is no manifest to repair.
"""

from __future__ import annotations

import json
import re

from pydantic import BaseModel, Field, ValidationError

from flowq.flows.errors import FlowGenerationError
from flowq.flows.models import FlowManifest
from flowq.flows.templates import GeneratedTemplate
from flowq.observability.logging import get_logger
from flowq.observability.structured import EventType, get_event_logger

logger = get_logger(__name__)

_CODE_FENCE_OPEN = re.compile(r"^```(?:json)?\s*\n?")
_CODE_FENCE_CLOSE = re.compile(r"\n?```\s*$")


class GenerationResponse(BaseModel):
    """A generated manifest plus one starter template per email action."""

    manifest: FlowManifest
    templates: list[GeneratedTemplate] = Field(default_factory=list)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` block if present."""
    stripped = text.strip()
    if stripped.startswith("```"):
        stripped = _CODE_FENCE_OPEN.sub("", stripped)
        stripped = _CODE_FENCE_CLOSE.sub("", stripped)
    return stripped.strip()


def parse_generation_response(content: str | None) -> GenerationResponse:
    """
    Parse and validate the generator's JSON response.

    Raises:
        FlowGenerationError: empty content, malformed JSON, or schema mismatch
    """
    if not content or not content.strip():
        raise FlowGenerationError("Assistant did not return any content")

    json_text = strip_code_fences(content)

    try:
        payload = json.loads(json_text)
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse generation response JSON: %s", e)
        get_event_logger().log_event(EventType.GENERATION_PARSE_ERROR, error=str(e), stage="json")
        raise FlowGenerationError(f"Failed to parse assistant response JSON: {e}") from e

    try:
        return GenerationResponse.model_validate(payload)
    except ValidationError as e:
        logger.warning("Generation response failed schema validation: %d error(s)", e.error_count())
        get_event_logger().log_event(EventType.GENERATION_PARSE_ERROR, error=str(e), stage="schema")
        raise FlowGenerationError(f"Assistant response does not match the flow schema: {e}") from e
