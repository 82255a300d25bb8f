import logging
import os

from fastapi import FastAPI

from adventure_engine.chat import ChatSessionManager
from adventure_engine.config import Settings, load_settings
from adventure_engine.llm import GenerativeProvider
from adventure_engine.orchestrator import StoryOrchestrator
from backend.routes import router

logger = logging.getLogger(__name__)


def create_app(
    provider: GenerativeProvider | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the app around one in-memory adventure and one chat slot.

    Run with: uvicorn backend.app:create_app --factory
    """
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = settings or load_settings()
    provider = provider or settings.build_provider()

    app = FastAPI(title="Adventure Engine")
    app.state.orchestrator = StoryOrchestrator(
        provider,
        strategy=settings.build_history_strategy(),
        placeholder_image_url=settings.placeholder_image_url,
        guard_stale_images=settings.guard_stale_images,
    )
    app.state.chat_manager = ChatSessionManager(provider)
    app.state.chat_session = None
    app.include_router(router, prefix="/api")

    logger.info("App ready provider=%s history=%s", type(provider).__name__, settings.history_strategy)
    return app
