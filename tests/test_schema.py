"""Tests for story-turn schema generation, validation and fallback."""

import json
import logging

import pytest

from adventure_engine.locales import get_locale
from adventure_engine.schema import fallback_turn, story_schema, validate


# ── story_schema ─────────────────────────────────────────────


@pytest.mark.parametrize("language", ["en", "bn"])
def test_schema_requires_all_fields(language) -> None:
    schema = story_schema(language)
    assert schema["type"] == "OBJECT"
    assert schema["required"] == ["storySegment", "imagePrompt", "choices", "inventory", "quest"]


def test_schema_structure_identical_across_languages() -> None:
    def shape(schema):
        return {
            name: {k: v for k, v in prop.items() if k != "description"}
            for name, prop in schema["properties"].items()
        }
    assert shape(story_schema("en")) == shape(story_schema("bn"))


def test_schema_descriptions_localized() -> None:
    bn = story_schema("bn")["properties"]
    assert bn["choices"]["description"] == get_locale("bn").fields.choices
    assert story_schema("en")["properties"]["quest"]["description"] != bn["quest"]["description"]


def test_schema_arrays_of_strings() -> None:
    props = story_schema("en")["properties"]
    assert props["choices"]["type"] == "ARRAY"
    assert props["choices"]["items"] == {"type": "STRING"}
    assert props["inventory"]["items"] == {"type": "STRING"}


# ── validate ─────────────────────────────────────────────────


def test_valid_response_returned_unchanged(story_json) -> None:
    turn = validate(story_json(1), "en")
    assert turn.narrative_text == "Narrative 1."
    assert turn.scene_prompt == "Scene 1."
    assert turn.choices == ["Choice 1a", "Choice 1b", "Choice 1c"]
    assert turn.inventory == ["torch"]
    assert turn.quest_summary == "Quest 1."


def test_markdown_fences_stripped(story_json) -> None:
    raw = "```json\n" + story_json(2) + "\n```"
    assert validate(raw, "en").narrative_text == "Narrative 2."


def test_empty_inventory_and_quest_allowed(story_json) -> None:
    turn = validate(story_json(1, inventory=[], quest=""), "en")
    assert turn.inventory == []
    assert turn.quest_summary == ""


@pytest.mark.parametrize("language", ["en", "bn"])
def test_invalid_json_yields_fallback(language) -> None:
    assert validate("not json {", language) == fallback_turn(language)


@pytest.mark.parametrize("language", ["en", "bn"])
def test_missing_field_yields_fallback(language) -> None:
    raw = '{"storySegment": "x", "imagePrompt": "y", "choices": ["a", "b", "c"], "inventory": []}'
    assert validate(raw, language) == fallback_turn(language)


@pytest.mark.parametrize("choices", [[], ["a"], ["a", "b"], ["a", "b", "c", "d"]])
def test_wrong_choice_count_yields_fallback(story_json, choices) -> None:
    assert validate(story_json(1, choices=choices), "en") == fallback_turn("en")


def test_choices_not_array_yields_fallback(story_json) -> None:
    assert validate(story_json(1, choices="go left"), "en") == fallback_turn("en")


def test_oversized_integer_yields_fallback() -> None:
    raw = '{"quest": ' + "1" * 5000 + "}"
    assert validate(raw, "en") == fallback_turn("en")


def test_deeply_nested_json_yields_fallback() -> None:
    raw = "[" * 100000 + "]" * 100000
    assert validate(raw, "bn") == fallback_turn("bn")


def test_snake_case_keys_yield_fallback() -> None:
    raw = json.dumps({
        "narrative_text": "x",
        "scene_prompt": "y",
        "choices": ["a", "b", "c"],
        "inventory": [],
        "quest_summary": "z",
    })
    assert validate(raw, "en") == fallback_turn("en")


def test_json_array_yields_fallback() -> None:
    assert validate('["a", "b", "c"]', "bn") == fallback_turn("bn")


def test_empty_text_yields_fallback() -> None:
    assert validate("", "en") == fallback_turn("en")


def test_fallback_is_logged(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="adventure_engine.schema"):
        validate("oops", "en")
    assert "fallback" in caplog.text


# ── fallback_turn ────────────────────────────────────────────


def test_english_fallback_content() -> None:
    fb = fallback_turn("en")
    assert fb.narrative_text.startswith("An unexpected twist of fate")
    assert fb.scene_prompt == "A mysterious, shimmering portal in a dark forest."
    assert fb.choices == ["Step through the portal", "Look for another path", "Wait for something to happen"]
    assert fb.inventory == []
    assert fb.quest_summary == "Find your bearings in a new reality."


def test_bengali_fallback_content() -> None:
    fb = fallback_turn("bn")
    loc = get_locale("bn").fallback
    assert fb.narrative_text == loc.story_segment
    assert fb.choices == loc.choices
    assert fb.inventory == []
    assert fb.scene_prompt == fallback_turn("en").scene_prompt


def test_fallback_returns_fresh_lists() -> None:
    fallback_turn("en").choices.append("mutated")
    assert len(fallback_turn("en").choices) == 3
