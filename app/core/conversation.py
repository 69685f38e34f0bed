"""
Chat sessions kept in memory: one ordered, append-only list of entries per session id.

The store lives on the running app (app.state.sessions); nothing is persisted.
"""
import html
import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Any, Callable

from app.core.formatter import format_response, strip_markup
from app.core.tutor_client import TutorServiceError

logger = logging.getLogger(__name__)

# Shown in place of a reply when the tutor call fails; the error itself stays in the log
APOLOGY_TEXT = "Sorry, I encountered an error. Please try again."


@dataclass(frozen=True)
class ConversationEntry:
    id: str
    text: str
    is_user: bool


class ChatSession:
    """One conversation. Entries are only ever appended."""

    def __init__(self, session_id: str | None = None):
        self.id = session_id or str(uuid.uuid4())
        self._entries: list[ConversationEntry] = []
        self._lock = threading.Lock()

    @property
    def entries(self) -> tuple[ConversationEntry, ...]:
        with self._lock:
            return tuple(self._entries)

    def add_user_message(self, text: str) -> ConversationEntry:
        return self._append(text, is_user=True)

    def add_bot_message(self, text: str) -> ConversationEntry:
        return self._append(text, is_user=False)

    def _append(self, text: str, *, is_user: bool) -> ConversationEntry:
        entry = ConversationEntry(id=str(uuid.uuid4()), text=text, is_user=is_user)
        with self._lock:
            self._entries.append(entry)
        return entry

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class SessionStore:
    def __init__(self):
        self._sessions: dict[str, ChatSession] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> ChatSession | None:
        with self._lock:
            return self._sessions.get(session_id)

    def get_or_create(self, session_id: str | None = None) -> ChatSession:
        """Return the session for session_id; unknown or missing ids start a new one (under that id if given)."""
        with self._lock:
            if session_id and session_id in self._sessions:
                return self._sessions[session_id]
            session = ChatSession(session_id)
            self._sessions[session.id] = session
            logger.debug("New chat session %s", session.id)
            return session

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


def exchange(
    session: ChatSession,
    question: str,
    ask: Callable[[str], Any],
    *,
    escape_html: bool = False,
) -> tuple[ConversationEntry, ConversationEntry]:
    """
    Run one question/reply round on the session and return (user_entry, bot_entry).
    Exactly one bot entry is added: the formatted reply, or APOLOGY_TEXT if the tutor failed.
    """
    user_entry = session.add_user_message(question)
    try:
        reply = ask(question)
    except TutorServiceError as e:
        logger.warning("Session %s: tutor failed, sending apology: %s", session.id, e)
        return user_entry, session.add_bot_message(APOLOGY_TEXT)

    markup = format_response(reply, escape_html=escape_html)
    if escape_html and not isinstance(reply, str):
        # Structured replies come back verbatim; the page still injects them as markup
        markup = html.escape(markup, quote=False)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Session %s reply: %.80r", session.id, strip_markup(markup))
    return user_entry, session.add_bot_message(markup)
