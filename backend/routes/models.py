"""Pydantic request models for API endpoints."""

from pydantic import BaseModel

from adventure_engine.locales import DEFAULT_LANGUAGE, Language


class StartBody(BaseModel):
    language: Language = DEFAULT_LANGUAGE


class ChooseBody(BaseModel):
    choice: str


class OpenChatBody(BaseModel):
    language: Language = DEFAULT_LANGUAGE


class ChatMessageBody(BaseModel):
    text: str
