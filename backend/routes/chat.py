"""Assistant chat endpoints. Opening a chat replaces any previous one."""

from fastapi import APIRouter, HTTPException, Request

from adventure_engine.chat import ChatBusyError, ChatClosedError
from adventure_engine.models import ChatSession

from .models import ChatMessageBody, OpenChatBody

router = APIRouter()


def _messages(session: ChatSession) -> list[dict]:
    return [m.model_dump() for m in session.messages]


def _open_session(request: Request) -> ChatSession:
    session = request.app.state.chat_session
    if session is None or session.closed:
        raise HTTPException(404, "No chat session open")
    return session


@router.post("/chat/open")
async def open_chat(request: Request, body: OpenChatBody):
    """Open a fresh chat session seeded with the greeting."""
    state = request.app.state
    if state.chat_session is not None:
        state.chat_manager.close_session(state.chat_session)
    state.chat_session = state.chat_manager.open_session(body.language)
    return {"messages": _messages(state.chat_session)}


@router.post("/chat/messages")
async def send_chat_message(request: Request, body: ChatMessageBody):
    """Send a message and return the reply plus the full log."""
    session = _open_session(request)
    try:
        reply = await request.app.state.chat_manager.send_message(session, body.text)
    except ChatBusyError as e:
        raise HTTPException(409, str(e))
    except ChatClosedError as e:
        raise HTTPException(404, str(e))
    return {"reply": reply, "messages": _messages(session)}


@router.delete("/chat")
async def close_chat(request: Request):
    """Close the chat session; a reply still in flight is discarded."""
    session = _open_session(request)
    request.app.state.chat_manager.close_session(session)
    request.app.state.chat_session = None
    return {"ok": True}
