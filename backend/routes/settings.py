"""Health check and localized UI string endpoints."""

from fastapi import APIRouter, HTTPException

from adventure_engine.locales import LOCALES, get_locale, random_loading_message

router = APIRouter()

# Prompt material stays server-side; the rest is UI text
_PRIVATE_FIELDS = {"story_instruction", "chat_instruction", "fields", "fallback", "digits"}


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/locales")
async def list_locales():
    """Available languages for the pre-adventure selector."""
    return [{"code": code, "name": loc.language_name} for code, loc in LOCALES.items()]


@router.get("/locales/{language}")
async def get_locale_strings(language: str):
    """UI strings for one language."""
    try:
        locale = get_locale(language)
    except KeyError:
        raise HTTPException(404, "Language not found")
    return locale.model_dump(exclude=_PRIVATE_FIELDS)


@router.get("/locales/{language}/loading-message")
async def loading_message(language: str):
    """One random loader line, for the rotating loading indicator."""
    try:
        return {"message": random_loading_message(language)}
    except KeyError:
        raise HTTPException(404, "Language not found")
