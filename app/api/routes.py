"""FastAPI routes for the tutor chat."""
import logging

from fastapi import APIRouter, HTTPException, Request

from app.core import tutor_client
from app.core.config import get_settings
from app.core.conversation import ConversationEntry, SessionStore, exchange
from app.models.schemas import ChatRequest, ChatResponse, MessageOut, SessionHistory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["tutor"])


def _sessions(request: Request) -> SessionStore:
    return request.app.state.sessions


def _to_out(entry: ConversationEntry) -> MessageOut:
    return MessageOut(id=entry.id, text=entry.text, is_user=entry.is_user)


@router.post("/chat", response_model=ChatResponse)
def chat(req: ChatRequest, request: Request) -> ChatResponse:
    """Send a question and get the formatted reply. Pass session_id for multi-turn conversation."""
    if not req.message.strip():
        raise HTTPException(status_code=400, detail="Message must not be empty")

    session = _sessions(request).get_or_create(req.session_id)
    user_entry, bot_entry = exchange(
        session,
        req.message,
        tutor_client.ask,
        escape_html=get_settings().escape_reply_html,
    )
    logger.info("Session %s: %d entries", session.id, len(session))
    return ChatResponse(
        reply=bot_entry.text,
        session_id=session.id,
        messages=[_to_out(user_entry), _to_out(bot_entry)],
    )


@router.get("/sessions/{session_id}/messages", response_model=SessionHistory)
def session_messages(session_id: str, request: Request) -> SessionHistory:
    """Full history of a session, oldest first."""
    session = _sessions(request).get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return SessionHistory(session_id=session.id, messages=[_to_out(e) for e in session.entries])


@router.get("/health")
def health() -> dict:
    """Health check."""
    return {"status": "ok"}
