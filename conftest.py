import asyncio
import json

import pytest

from adventure_engine.chat import ChatSessionManager
from adventure_engine.orchestrator import StoryOrchestrator

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg"


def _next(queue: list, default=None):
    """Pop the next canned item. Exceptions are raised, futures are awaited."""
    if queue:
        item = queue.pop(0)
    elif default is not None:
        item = default
    else:
        raise AssertionError("StubProvider ran out of canned responses")
    return item


async def _resolve(item):
    if isinstance(item, asyncio.Future):
        item = await item
    if isinstance(item, BaseException):
        raise item
    return item


class StubConversation:
    def __init__(self, provider: "StubProvider", system_instruction: str) -> None:
        self.provider = provider
        self.system_instruction = system_instruction
        self.sent: list[str] = []

    async def send(self, message: str) -> str:
        self.sent.append(message)
        return await _resolve(_next(self.provider.replies, default="ok"))


class StubProvider:
    """Provider with canned responses, consumed in call order.

    Queue items may be a value, an exception instance (raised), or an
    asyncio.Future (awaited first, which lets a test hold a call open).
    """

    def __init__(self, stories=(), images=(), replies=()) -> None:
        self.stories = list(stories)
        self.images = list(images)
        self.replies = list(replies)
        self.story_calls: list[tuple[str, str, dict]] = []
        self.image_calls: list[str] = []
        self.conversations: list[StubConversation] = []

    async def generate_structured_text(self, prompt, system_instruction, schema):
        self.story_calls.append((prompt, system_instruction, schema))
        return await _resolve(_next(self.stories))

    async def generate_image(self, prompt):
        self.image_calls.append(prompt)
        return await _resolve(_next(self.images, default=JPEG_BYTES))

    def create_conversation(self, system_instruction):
        conv = StubConversation(self, system_instruction)
        self.conversations.append(conv)
        return conv


def make_story_json(n: int = 1, **overrides) -> str:
    data = {
        "storySegment": f"Narrative {n}.",
        "imagePrompt": f"Scene {n}.",
        "choices": [f"Choice {n}a", f"Choice {n}b", f"Choice {n}c"],
        "inventory": ["torch"],
        "quest": f"Quest {n}.",
    }
    data.update(overrides)
    return json.dumps(data)


@pytest.fixture
def story_json():
    """Factory for a valid story-model response."""
    return make_story_json


@pytest.fixture
def provider():
    return StubProvider()


@pytest.fixture
def orchestrator(provider):
    return StoryOrchestrator(provider)


@pytest.fixture
def chat_manager(provider):
    return ChatSessionManager(provider)
