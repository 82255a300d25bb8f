"""FastAPI API endpoints under /api.

Endpoint groups: health + locales, adventure (start, choose, state), chat
(open, send, close). The process holds a single adventure and at most one
open chat session; there is no persistence.
"""

from fastapi import APIRouter

from .adventure import router as adventure_router
from .chat import router as chat_router
from .settings import router as settings_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(adventure_router)
router.include_router(chat_router)
