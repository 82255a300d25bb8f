"""Runtime settings read from the environment (and .env at the repo root)."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

from adventure_engine.llm import (
    CHAT_MODEL,
    DEFAULT_BASE_URL,
    IMAGE_MODEL,
    STORY_MODEL,
    EchoProvider,
    GeminiProvider,
    GenerativeProvider,
)
from adventure_engine.prompts import HistoryStrategy, history_strategy

ROOT = Path(__file__).parent.parent

PLACEHOLDER_IMAGE_URL = "https://picsum.photos/1280/720?blur=2&grayscale"


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


class Settings(BaseModel):
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    story_model: str = STORY_MODEL
    chat_model: str = CHAT_MODEL
    image_model: str = IMAGE_MODEL
    timeout: float = 120.0
    history_strategy: str = "full"
    history_window: int = 40
    placeholder_image_url: str = PLACEHOLDER_IMAGE_URL
    guard_stale_images: bool = True
    echo: bool = False

    def build_history_strategy(self) -> HistoryStrategy:
        try:
            return history_strategy(self.history_strategy, self.history_window)
        except ValueError as e:
            raise ConfigError(str(e)) from e

    def build_provider(self) -> GenerativeProvider:
        if self.echo:
            return EchoProvider()
        if not self.api_key:
            raise ConfigError("GEMINI_API_KEY environment variable not set")
        return GeminiProvider(
            api_key=self.api_key,
            base_url=self.base_url,
            story_model=self.story_model,
            chat_model=self.chat_model,
            image_model=self.image_model,
            timeout=self.timeout,
        )


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_settings(env_file: Path | None = None) -> Settings:
    """Read settings, letting real environment variables win over .env."""
    load_dotenv(env_file or ROOT / ".env")
    return Settings(
        api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY", ""),
        base_url=os.getenv("GEMINI_BASE_URL", DEFAULT_BASE_URL),
        story_model=os.getenv("STORY_MODEL", STORY_MODEL),
        chat_model=os.getenv("CHAT_MODEL", CHAT_MODEL),
        image_model=os.getenv("IMAGE_MODEL", IMAGE_MODEL),
        timeout=float(os.getenv("LLM_TIMEOUT", "120")),
        history_strategy=os.getenv("HISTORY_STRATEGY", "full"),
        history_window=int(os.getenv("HISTORY_WINDOW", "40")),
        placeholder_image_url=os.getenv("PLACEHOLDER_IMAGE_URL", PLACEHOLDER_IMAGE_URL),
        guard_stale_images=_env_bool("GUARD_STALE_IMAGES", True),
        echo=_env_bool("ECHO_PROVIDER", False),
    )
