"""Assistant chat, independent of the story.

Each open_session() call returns a fresh ChatSession owning its own
conversation; nothing is shared between sessions or with the orchestrator.
Provider failures are turned into the localized error reply so the chat
log always gains exactly one model message per send.
"""

from __future__ import annotations

import logging

from adventure_engine.llm import GenerativeProvider, LLMError
from adventure_engine.locales import Language, get_locale
from adventure_engine.models import ChatMessage, ChatSession
from adventure_engine.prompts import compose_chat_system_instruction

logger = logging.getLogger(__name__)


class ChatBusyError(RuntimeError):
    """Raised when a message is sent while the previous reply is pending."""


class ChatClosedError(RuntimeError):
    """Raised when sending on a session that has been closed."""


class ChatSessionManager:
    def __init__(self, provider: GenerativeProvider) -> None:
        self._provider = provider

    def open_session(self, language: Language) -> ChatSession:
        locale = get_locale(language)
        conversation = self._provider.create_conversation(
            compose_chat_system_instruction(language)
        )
        return ChatSession(
            language=language,
            conversation=conversation,
            messages=[ChatMessage(role="model", text=locale.chatbot.initial_message)],
        )

    async def send_message(self, session: ChatSession, text: str) -> str:
        """Send one user message and return the reply shown in the log."""
        if session.closed:
            raise ChatClosedError("Chat session is closed")
        if session.busy:
            raise ChatBusyError("A chat reply is still pending")

        session.messages.append(ChatMessage(role="user", text=text))
        session.busy = True
        try:
            reply = await session.conversation.send(text)
        except LLMError as e:
            logger.warning("Chat reply failed: %s", e)
            reply = get_locale(session.language).chatbot.error_message
        finally:
            session.busy = False

        if session.closed:
            logger.debug("Chat closed while waiting; reply discarded")
            return reply
        session.messages.append(ChatMessage(role="model", text=reply))
        return reply

    def close_session(self, session: ChatSession) -> None:
        session.closed = True
