"""Story orchestrator — runs the adventure one player choice at a time.

Turn flow (advance):
  1. Append 'Player chose: "<choice>"' to the transcript.
  2. Raise the narrative and image loading flags.
  3. Await the story call; the response goes through schema validation, so
     malformed output becomes the fallback turn and still counts as a turn.
  4. Append the narrative text, replace the current turn, bump turn_id and
     clear the narrative flag. advance() returns here.
  5. A detached task requests the scene image. Success sets image_url to a
     data URL; failure sets the placeholder URL. Either way the image flag
     clears and the narrative is left alone.

If the story call itself fails (LLMError), the turn does not advance: the
player record stays in the transcript, the narrative flag clears, the current
turn is kept and the error is logged and kept in session.last_error. The image
flag stays up only while the previous turn's image is still pending. Nothing
is retried.

Only one turn may be in flight; a second advance() while loading raises
TurnInFlightError.
"""

from __future__ import annotations

import asyncio
import base64
import logging

from adventure_engine.config import PLACEHOLDER_IMAGE_URL
from adventure_engine.llm import GenerativeProvider, LLMError
from adventure_engine.locales import Language, get_locale
from adventure_engine.models import GameSession, StoryTurn
from adventure_engine.prompts import (
    ART_STYLE_PREFIX,
    FullHistory,
    HistoryStrategy,
    compose_image_prompt,
    compose_story_prompt,
    compose_story_system_instruction,
)
from adventure_engine.schema import story_schema, validate

logger = logging.getLogger(__name__)


class TurnInFlightError(RuntimeError):
    """Raised when a new turn is requested while one is still generating."""


class AdventureNotStartedError(RuntimeError):
    """Raised when a choice is made before start_adventure()."""


def player_record(choice: str) -> str:
    return f'Player chose: "{choice}"'


class StoryOrchestrator:
    """Owns the single GameSession and drives its turns.

    Args:
        provider:              Generative provider used for story and image calls.
        strategy:              Which transcript entries feed the story prompt.
        placeholder_image_url: Shown when image generation fails.
        art_style:             Prefix for every image prompt.
        guard_stale_images:    Drop image results that belong to an earlier
                               turn instead of letting them overwrite a newer one.
    """

    def __init__(
        self,
        provider: GenerativeProvider,
        *,
        strategy: HistoryStrategy | None = None,
        placeholder_image_url: str = PLACEHOLDER_IMAGE_URL,
        art_style: str = ART_STYLE_PREFIX,
        guard_stale_images: bool = True,
    ) -> None:
        self._provider = provider
        self._strategy = strategy or FullHistory()
        self._placeholder_image_url = placeholder_image_url
        self._art_style = art_style
        self._guard_stale_images = guard_stale_images
        self._image_task: asyncio.Task | None = None
        self._pending_images: set[asyncio.Task] = set()
        self.session: GameSession | None = None

    async def start_adventure(self, language: Language) -> GameSession:
        """Begin a new session in `language` and play the opening turn."""
        if self.session is not None and self.session.is_loading:
            raise TurnInFlightError("Cannot restart while a turn is generating")
        locale = get_locale(language)
        self._image_task = None
        self.session = GameSession(language=language, transcript=[locale.initial_history])
        logger.info("Adventure started language=%s", language)
        await self.advance(locale.initial_choice)
        return self.session

    async def advance(self, choice: str) -> StoryTurn | None:
        """Play one turn. Returns the new turn, or None if the story call failed."""
        session = self.session
        if session is None:
            raise AdventureNotStartedError("Start an adventure before choosing")
        if session.is_loading:
            raise TurnInFlightError("A turn is already in flight")

        # 1–2. Player record, loading flags
        session.transcript.append(player_record(choice))
        session.is_loading = True
        session.is_image_loading = True
        session.last_error = None

        # 3. Story call
        prompt = compose_story_prompt(session.transcript, self._strategy)
        try:
            raw = await self._provider.generate_structured_text(
                prompt,
                compose_story_system_instruction(session.language),
                story_schema(session.language),
            )
            turn = validate(raw, session.language)
        except LLMError as e:
            logger.exception("Story generation failed, turn not advanced")
            session.last_error = str(e)
            self._clear_loading(session)
            return None
        except Exception:
            self._clear_loading(session)
            raise

        # 4. State update
        session.transcript.append(turn.narrative_text)
        session.current_turn = turn
        session.turn_id += 1
        session.is_loading = False
        logger.debug("turn=%d transcript_len=%d", session.turn_id, len(session.transcript))

        # 5. Image, detached
        self._image_task = asyncio.create_task(
            self._generate_image(session, session.turn_id, turn.scene_prompt)
        )
        self._pending_images.add(self._image_task)
        self._image_task.add_done_callback(self._pending_images.discard)
        return turn

    async def wait_for_image(self) -> None:
        """Block until the most recent image request has settled."""
        if self._image_task is not None:
            await self._image_task

    async def _generate_image(self, session: GameSession, turn_id: int, scene_prompt: str) -> None:
        try:
            image = await self._provider.generate_image(
                compose_image_prompt(scene_prompt, self._art_style)
            )
            url = "data:image/jpeg;base64," + base64.b64encode(image).decode("ascii")
        except Exception as e:
            logger.warning("Image generation failed for turn %d: %s", turn_id, e)
            url = self._placeholder_image_url

        if self._guard_stale_images and (session is not self.session or session.turn_id != turn_id):
            logger.debug("Dropping stale image for turn %d", turn_id)
            return
        session.image_url = url
        session.is_image_loading = False

    def _clear_loading(self, session: GameSession) -> None:
        # An earlier turn's image may still be on its way for this session
        task = self._image_task
        session.is_loading = False
        session.is_image_loading = task is not None and not task.done()
