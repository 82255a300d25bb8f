"""Tests for prompt composition: Handlebars rendering, history strategies,
and the story/image/chat composers."""

import pytest

from adventure_engine.prompts import (
    ART_STYLE_PREFIX,
    FullHistory,
    PromptError,
    SlidingWindow,
    compose_chat_system_instruction,
    compose_image_prompt,
    compose_story_prompt,
    compose_story_system_instruction,
    history_strategy,
    render_prompt,
)


# ── render_prompt ────────────────────────────────────────────


def test_render_simple_variable():
    assert render_prompt("Hello {{name}}!", {"name": "World"}) == "Hello World!"


def test_render_triple_stash_unescaped():
    assert render_prompt("{{{x}}}", {"x": "a & b"}) == "a & b"


def test_render_missing_variable():
    assert render_prompt("Hello {{name}}!", {}) == "Hello !"


def test_render_invalid_template():
    with pytest.raises(PromptError):
        render_prompt("{{> missing_partial}}", {})


# ── history strategies ───────────────────────────────────────


TRANSCRIPT = ["seed", 'Player chose: "a"', "n1", 'Player chose: "b"', "n2"]


def test_full_history_keeps_everything():
    assert FullHistory().select(TRANSCRIPT) == TRANSCRIPT


def test_sliding_window_keeps_seed_and_newest():
    assert SlidingWindow(2).select(TRANSCRIPT) == ["seed", 'Player chose: "b"', "n2"]


def test_sliding_window_short_transcript_untouched():
    assert SlidingWindow(10).select(TRANSCRIPT) == TRANSCRIPT


def test_sliding_window_does_not_mutate():
    transcript = list(TRANSCRIPT)
    SlidingWindow(1).select(transcript)
    assert transcript == TRANSCRIPT


def test_sliding_window_rejects_zero():
    with pytest.raises(ValueError):
        SlidingWindow(0)


def test_history_strategy_by_name():
    assert isinstance(history_strategy("full", 5), FullHistory)
    window = history_strategy("window", 5)
    assert isinstance(window, SlidingWindow)
    assert window.max_entries == 5


def test_history_strategy_unknown():
    with pytest.raises(ValueError, match="Unknown history strategy"):
        history_strategy("summary", 5)


# ── composers ────────────────────────────────────────────────


def test_story_prompt_joins_with_newlines():
    assert compose_story_prompt(TRANSCRIPT) == '\n'.join(TRANSCRIPT)


def test_story_prompt_single_entry():
    assert compose_story_prompt(["only"]) == "only"


def test_story_prompt_with_window():
    assert compose_story_prompt(TRANSCRIPT, SlidingWindow(1)) == "seed\nn2"


def test_english_story_instruction():
    text = compose_story_system_instruction("en")
    assert "master storyteller" in text
    assert "provide 3 choices" in text
    assert "JSON" in text
    assert "must be in English" in text
    assert "{{" not in text


def test_bengali_story_instruction():
    text = compose_story_system_instruction("bn")
    assert "৩টি পছন্দ" in text
    assert "বাংলায়" in text
    assert "JSON" in text
    assert "{{" not in text


def test_story_instruction_is_static():
    assert compose_story_system_instruction("en") == compose_story_system_instruction("en")


def test_image_prompt_prefixed():
    prompt = compose_image_prompt("A dragon over the hills.")
    assert prompt == ART_STYLE_PREFIX + "A dragon over the hills."
    assert prompt.startswith("Epic fantasy digital painting")


def test_image_prompt_custom_style():
    assert compose_image_prompt("x", style="Watercolor. ") == "Watercolor. x"


def test_chat_instructions():
    assert compose_chat_system_instruction("en") == (
        "You are a helpful and friendly chatbot. Answer user questions concisely."
    )
    assert "চ্যাটবট" in compose_chat_system_instruction("bn")
