"""Adventure start, choice and state endpoints."""

from fastapi import APIRouter, HTTPException, Request

from adventure_engine.orchestrator import (
    AdventureNotStartedError,
    StoryOrchestrator,
    TurnInFlightError,
)

from .models import ChooseBody, StartBody

router = APIRouter()


def _orchestrator(request: Request) -> StoryOrchestrator:
    return request.app.state.orchestrator


@router.get("/adventure")
async def get_adventure(request: Request):
    """Current session state: turn, image URL and loading flags."""
    session = _orchestrator(request).session
    if session is None:
        raise HTTPException(404, "No adventure in progress")
    return session.snapshot()


@router.post("/adventure/start")
async def start_adventure(request: Request, body: StartBody):
    """Start a new adventure in the chosen language and play the opening turn."""
    orchestrator = _orchestrator(request)
    try:
        session = await orchestrator.start_adventure(body.language)
    except TurnInFlightError as e:
        raise HTTPException(409, str(e))
    return session.snapshot()


@router.post("/adventure/choose")
async def choose(request: Request, body: ChooseBody):
    """Play one of the current turn's choices."""
    orchestrator = _orchestrator(request)
    try:
        await orchestrator.advance(body.choice)
    except AdventureNotStartedError as e:
        raise HTTPException(404, str(e))
    except TurnInFlightError as e:
        raise HTTPException(409, str(e))
    return orchestrator.session.snapshot()
