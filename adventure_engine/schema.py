"""Story-turn schema: what the story model must return, and how bad output
is repaired.

There is one structural definition; only the field descriptions differ per
language, so every language asks for exactly the same shape. Anything that
does not validate against StoryTurn, including a choices list that is not
exactly three long, is replaced by the language's pre-authored fallback
turn. The replacement is logged, never raised.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from adventure_engine.locales import get_locale
from adventure_engine.models import StoryTurn

logger = logging.getLogger(__name__)

# Wire name → (locale description attribute, schema type)
_FIELDS: dict[str, tuple[str, dict[str, Any]]] = {
    "storySegment": ("story_segment", {"type": "STRING"}),
    "imagePrompt": ("image_prompt", {"type": "STRING"}),
    "choices": ("choices", {"type": "ARRAY", "items": {"type": "STRING"}}),
    "inventory": ("inventory", {"type": "ARRAY", "items": {"type": "STRING"}}),
    "quest": ("quest", {"type": "STRING"}),
}


def story_schema(language: str) -> dict[str, Any]:
    """Response schema for one story turn, described in the given language."""
    fields = get_locale(language).fields
    properties: dict[str, Any] = {}
    for wire_name, (attr, shape) in _FIELDS.items():
        properties[wire_name] = {**shape, "description": getattr(fields, attr)}
    return {
        "type": "OBJECT",
        "properties": properties,
        "required": list(_FIELDS),
    }


def fallback_turn(language: str) -> StoryTurn:
    """The fixed "crossroads" turn substituted for malformed output."""
    fb = get_locale(language).fallback
    return StoryTurn(
        narrative_text=fb.story_segment,
        scene_prompt=fb.image_prompt,
        choices=list(fb.choices),
        inventory=[],
        quest_summary=fb.quest,
    )


def _strip_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)
    return cleaned


def validate(raw_text: str, language: str) -> StoryTurn:
    """Parse a story-model response into a StoryTurn.

    Returns the language's fallback turn when the text is not JSON or does
    not match the schema. Only the wire (camelCase) keys are read.
    """
    try:
        data = json.loads(_strip_fences(raw_text))
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, oversized integers and pathological nesting
        logger.warning("Story output is not valid JSON, using fallback turn: %s", e)
        logger.debug("Received text: %r", raw_text[:500])
        return fallback_turn(language)

    if not isinstance(data, dict):
        logger.warning(
            "Story output must be a JSON object, got %s; using fallback turn",
            type(data).__name__,
        )
        return fallback_turn(language)

    wire = {k: v for k, v in data.items() if k in _FIELDS}
    try:
        return StoryTurn.model_validate(wire)
    except ValidationError as e:
        logger.warning("Story output does not match the turn schema, using fallback turn: %s", e)
        return fallback_turn(language)
