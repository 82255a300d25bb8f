"""Core domain models.

The orchestrator, chat manager and HTTP layer all operate on these types.
Pydantic is used for validation and serialisation at every data boundary.

StoryTurn keeps the provider's camelCase field names as aliases so the
same model validates raw JSON from the story model and dumps snake_case
for the API.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from adventure_engine.locales import Language

CHOICE_COUNT = 3

ChatRole = Literal["user", "model"]


class StoryTurn(BaseModel):
    """One round of generated adventure content."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    narrative_text: str = Field(alias="storySegment")
    scene_prompt: str = Field(alias="imagePrompt")
    choices: list[str]
    inventory: list[str]
    quest_summary: str = Field(alias="quest")

    @field_validator("choices")
    @classmethod
    def _exactly_three_choices(cls, v: list[str]) -> list[str]:
        if len(v) != CHOICE_COUNT:
            raise ValueError(f"expected {CHOICE_COUNT} choices, got {len(v)}")
        return v


class ChatMessage(BaseModel):
    """A single entry in a chat session's visible log."""

    role: ChatRole
    text: str


class GameSession(BaseModel):
    """All state for one running adventure. Lives in memory only."""

    language: Language = Field(frozen=True)
    transcript: list[str] = Field(default_factory=list)  # append-only
    current_turn: StoryTurn | None = None
    turn_id: int = 0
    image_url: str | None = None
    is_loading: bool = False
    is_image_loading: bool = False
    last_error: str | None = None

    def snapshot(self) -> dict[str, Any]:
        """State as the presentation layer sees it."""
        return {
            "language": self.language,
            "turn_id": self.turn_id,
            "turn": self.current_turn.model_dump() if self.current_turn else None,
            "image_url": self.image_url,
            "is_loading": self.is_loading,
            "is_image_loading": self.is_image_loading,
            "last_error": self.last_error,
        }


class ChatSession(BaseModel):
    """An owned conversational context plus its visible message log."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    language: Language
    conversation: Any = Field(exclude=True)  # adventure_engine.llm.Conversation
    messages: list[ChatMessage] = Field(default_factory=list)
    busy: bool = False
    closed: bool = False
