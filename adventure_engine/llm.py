"""Generative provider client — HTTP connection to the Gemini API.

The orchestrator and chat manager take a provider matching the protocol:

    async def generate_structured_text(prompt, system_instruction, schema) -> str
    async def generate_image(prompt) -> bytes
    def create_conversation(system_instruction) -> Conversation

and a Conversation matching:

    async def send(message) -> str

Two implementations are provided:

    GeminiProvider — real HTTP client for the Gemini REST API
                      (generateContent for text and chat, predict for Imagen).
    EchoProvider   — no network. Echoes prompts back; useful for
                      smoke-testing the wiring without an API key.

Production code constructs a GeminiProvider from Settings. Tests use
StubProvider (defined in the test helpers) instead.
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Protocol

import httpx

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols — every provider implementation must match these signatures
# ---------------------------------------------------------------------------

class Conversation(Protocol):
    async def send(self, message: str) -> str: ...


class GenerativeProvider(Protocol):
    async def generate_structured_text(
        self, prompt: str, system_instruction: str, schema: dict[str, Any]
    ) -> str: ...

    async def generate_image(self, prompt: str) -> bytes: ...

    def create_conversation(self, system_instruction: str) -> Conversation: ...


# ---------------------------------------------------------------------------
# GeminiProvider — connects to the real API
# ---------------------------------------------------------------------------

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
STORY_MODEL = "gemini-2.5-flash-lite"
CHAT_MODEL = "gemini-2.5-flash"
IMAGE_MODEL = "imagen-4.0-generate-001"


class GeminiProvider:
    """Async HTTP client for the Gemini REST API.

    Endpoints:
      text/chat  — POST {base}/models/{model}:generateContent
                   Response: {"candidates": [{"content": {"parts": [{"text": "..."}]}}]}
      image      — POST {base}/models/{model}:predict
                   Response: {"predictions": [{"bytesBase64Encoded": "..."}]}

    Args:
        api_key:     Gemini API key, sent as x-goog-api-key.
        base_url:    API root. Defaults to the public v1beta endpoint.
        story_model: Model for structured story turns.
        chat_model:  Model for the assistant chat.
        image_model: Imagen model for scene pictures.
        timeout:     HTTP timeout in seconds. Defaults to 120.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        story_model: str = STORY_MODEL,
        chat_model: str = CHAT_MODEL,
        image_model: str = IMAGE_MODEL,
        timeout: float = 120.0,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._story_model = story_model
        self._chat_model = chat_model
        self._image_model = image_model
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-goog-api-key": self._api_key,
        }

    def _url(self, model: str, method: str) -> str:
        return f"{self._base_url}/models/{model}:{method}"

    async def _post(self, stage: str, url: str, body: dict) -> dict:
        logger.debug("llm call stage=%s url=%s", stage, url)
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(url, json=body, headers=self._headers())
                resp.raise_for_status()
        except httpx.ConnectError as e:
            raise LLMError(f"Cannot connect to Gemini API at {self._base_url}") from e
        except httpx.HTTPStatusError as e:
            raise LLMError(
                f"Gemini API returned HTTP {e.response.status_code}"
            ) from e
        except httpx.TimeoutException as e:
            raise LLMError(f"Gemini API timed out after {self._timeout}s") from e
        except httpx.HTTPError as e:
            raise LLMError(f"Gemini API request failed: {e}") from e

        try:
            return resp.json()
        except ValueError as e:
            raise LLMError("Gemini API returned a non-JSON body") from e

    async def generate_content(
        self,
        stage: str,
        model: str,
        contents: list[dict],
        system_instruction: str,
        generation_config: dict | None = None,
    ) -> str:
        """Run one generateContent call and return the first candidate's text."""
        body: dict[str, Any] = {
            "contents": contents,
            "systemInstruction": {"parts": [{"text": system_instruction}]},
        }
        if generation_config:
            body["generationConfig"] = generation_config
        data = await self._post(stage, self._url(model, "generateContent"), body)
        text = _candidate_text(data)
        logger.debug("llm response stage=%s len=%d", stage, len(text))
        return text

    async def generate_structured_text(
        self, prompt: str, system_instruction: str, schema: dict[str, Any]
    ) -> str:
        logger.debug("story prompt_len=%d", len(prompt))
        return await self.generate_content(
            "story",
            self._story_model,
            [_user_content(prompt)],
            system_instruction,
            {"responseMimeType": "application/json", "responseSchema": schema},
        )

    async def generate_image(self, prompt: str) -> bytes:
        body = {
            "instances": [{"prompt": prompt}],
            "parameters": {
                "sampleCount": 1,
                "aspectRatio": "16:9",
                "outputOptions": {"mimeType": "image/jpeg"},
            },
        }
        data = await self._post("image", self._url(self._image_model, "predict"), body)
        predictions = data.get("predictions")
        if not predictions or "bytesBase64Encoded" not in predictions[0]:
            raise LLMError("Image generation failed")
        return base64.b64decode(predictions[0]["bytesBase64Encoded"])

    def create_conversation(self, system_instruction: str) -> GeminiConversation:
        return GeminiConversation(self, self._chat_model, system_instruction)


class GeminiConversation:
    """Stateful chat over generateContent.

    The full history is resent on every call. A user/model exchange is
    committed to history only once the reply has arrived, so a failed send
    leaves the context unchanged.
    """

    def __init__(self, provider: GeminiProvider, model: str, system_instruction: str) -> None:
        self._provider = provider
        self._model = model
        self._system_instruction = system_instruction
        self.history: list[dict] = []

    async def send(self, message: str) -> str:
        user = _user_content(message)
        reply = await self._provider.generate_content(
            "chat", self._model, [*self.history, user], self._system_instruction,
        )
        self.history.append(user)
        self.history.append({"role": "model", "parts": [{"text": reply}]})
        return reply


def _user_content(text: str) -> dict:
    return {"role": "user", "parts": [{"text": text}]}


def _candidate_text(data: dict) -> str:
    """Extract the completion text from a generateContent response body."""
    candidates = data.get("candidates")
    if not candidates:
        raise LLMError("Unexpected response format from Gemini API")
    parts = (candidates[0].get("content") or {}).get("parts") or []
    texts = [p["text"] for p in parts if "text" in p]
    if not texts:
        raise LLMError("Unexpected response format from Gemini API")
    return "".join(texts)


# ---------------------------------------------------------------------------
# EchoProvider — no network; useful for wiring smoke tests
# ---------------------------------------------------------------------------

class EchoProvider:
    """Returns prompts as-is. No network calls.

    Lets you click through the adventure without an API key. Story output
    won't be valid JSON, so every turn exercises the fallback path; image
    generation always fails, so the placeholder is shown.
    """

    async def generate_structured_text(
        self, prompt: str, system_instruction: str, schema: dict[str, Any]
    ) -> str:
        logger.debug("EchoProvider story prompt_len=%d", len(prompt))
        return prompt

    async def generate_image(self, prompt: str) -> bytes:
        raise LLMError("EchoProvider does not generate images")

    def create_conversation(self, system_instruction: str) -> EchoConversation:
        return EchoConversation()


class EchoConversation:
    async def send(self, message: str) -> str:
        return message


# ---------------------------------------------------------------------------
# LLMError — raised by providers for all connection and protocol failures
# ---------------------------------------------------------------------------

class LLMError(RuntimeError):
    """Raised when the provider cannot be reached or returns an error."""
