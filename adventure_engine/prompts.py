"""Prompt composition for the story, image and chat capabilities.

System instructions are Handlebars templates stored in the locale table and
rendered here. The story prompt itself is the transcript, oldest entry first,
one entry per line; a HistoryStrategy decides which entries make it in.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol

import pybars

from adventure_engine.locales import get_locale
from adventure_engine.models import CHOICE_COUNT

ART_STYLE_PREFIX = (
    "Epic fantasy digital painting, detailed, cinematic lighting, "
    "in the style of a high-quality RPG concept art. "
)

_compiler = pybars.Compiler()
_cache: dict[str, Callable] = {}


class PromptError(Exception):
    """Raised when a Handlebars template fails to compile or render."""


def render_prompt(template_str: str, context: dict[str, Any]) -> str:
    """Compile and render a Handlebars template with the given context.

    Templates are cached by source string to avoid recompilation.
    """
    try:
        compiled = _cache.get(template_str)
        if compiled is None:
            compiled = _compiler.compile(template_str)
            _cache[template_str] = compiled
        return compiled(context)
    except Exception as e:
        raise PromptError(f"Template error: {e}") from e


# ── History strategies ───────────────────────────────────


class HistoryStrategy(Protocol):
    def select(self, transcript: Sequence[str]) -> list[str]: ...


class FullHistory:
    """Every entry, unbounded. The prompt grows with the adventure."""

    def select(self, transcript: Sequence[str]) -> list[str]:
        return list(transcript)


class SlidingWindow:
    """The opening scene plus the newest max_entries entries."""

    def __init__(self, max_entries: int) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries

    def select(self, transcript: Sequence[str]) -> list[str]:
        entries = list(transcript)
        if len(entries) <= self.max_entries + 1:
            return entries
        return [entries[0], *entries[-self.max_entries:]]


def history_strategy(name: str, window: int) -> HistoryStrategy:
    """Build a strategy from its config name ("full" or "window")."""
    if name == "full":
        return FullHistory()
    if name == "window":
        return SlidingWindow(window)
    raise ValueError(f"Unknown history strategy: {name!r}")


# ── Composers ────────────────────────────────────────────


def compose_story_prompt(
    transcript: Sequence[str], strategy: HistoryStrategy | None = None
) -> str:
    """Join the selected transcript entries with newlines, oldest first."""
    strategy = strategy or FullHistory()
    return "\n".join(strategy.select(transcript))


def compose_story_system_instruction(language: str) -> str:
    locale = get_locale(language)
    return render_prompt(locale.story_instruction, {
        "choice_count": locale.format_number(CHOICE_COUNT),
        "language_name": locale.language_name,
    })


def compose_image_prompt(scene_prompt: str, style: str = ART_STYLE_PREFIX) -> str:
    return style + scene_prompt


def compose_chat_system_instruction(language: str) -> str:
    locale = get_locale(language)
    return render_prompt(locale.chat_instruction, {
        "language_name": locale.language_name,
    })
