import dataclasses
import threading

import pytest

from app.core.conversation import (
    APOLOGY_TEXT,
    ChatSession,
    ConversationEntry,
    SessionStore,
    exchange,
)
from app.core.tutor_client import TutorServiceError


def test_session_appends_in_order_with_unique_ids():
    session = ChatSession()
    a = session.add_user_message("hi")
    b = session.add_bot_message("<p>hello</p>")
    assert session.entries == (a, b)
    assert a.is_user and not b.is_user
    assert a.id != b.id


def test_entries_are_immutable_snapshots():
    session = ChatSession("s1")
    entry = session.add_user_message("x")
    snapshot = session.entries
    session.add_bot_message("y")
    assert len(snapshot) == 1
    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.text = "changed"


def test_concurrent_appends_are_all_kept():
    session = ChatSession()

    def worker():
        for _ in range(200):
            session.add_user_message("q")

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(session) == 800
    assert len({e.id for e in session.entries}) == 800


def test_store_reuses_known_sessions():
    store = SessionStore()
    first = store.get_or_create()
    assert store.get_or_create(first.id) is first
    assert store.get(first.id) is first
    assert len(store) == 1


def test_store_creates_unknown_id_under_that_id():
    store = SessionStore()
    session = store.get_or_create("client-chosen")
    assert session.id == "client-chosen"
    assert store.get("missing") is None


def test_exchange_formats_reply():
    session = ChatSession()
    user, bot = exchange(session, "Explain **this**", lambda q: "# Answer")
    assert user == ConversationEntry(id=user.id, text="Explain **this**", is_user=True)
    assert bot.text == '<h3 class="font-bold text-lg mb-2 text-white">Answer</h3>'
    assert session.entries == (user, bot)


def test_exchange_structured_reply_is_json():
    session = ChatSession()
    _, bot = exchange(session, "q", lambda q: {"answer": 1})
    assert bot.text == '{\n  "answer": 1\n}'


def test_exchange_passes_escape_flag():
    session = ChatSession()
    _, bot = exchange(session, "q", lambda q: "<i>x</i>", escape_html=True)
    assert bot.text == '<p class="mb-2">&lt;i&gt;x&lt;/i&gt;</p>'


def test_exchange_failure_adds_one_apology_entry():
    session = ChatSession()

    def broken(question):
        raise TutorServiceError("HTTP 500: Traceback (most recent call last)")

    user, bot = exchange(session, "q", broken)
    assert session.entries == (user, bot)
    assert bot.text == APOLOGY_TEXT
    assert not bot.is_user
    assert all("Traceback" not in e.text for e in session.entries)


def test_exchange_does_not_hide_programming_errors():
    session = ChatSession()

    def buggy(question):
        raise RuntimeError("bug")

    with pytest.raises(RuntimeError):
        exchange(session, "q", buggy)


def test_exchange_escapes_structured_reply_when_asked():
    session = ChatSession()
    _, bot = exchange(session, "q", lambda q: {"a": "<img src=x onerror=alert(1)>"}, escape_html=True)
    assert bot.text == '{\n  "a": "&lt;img src=x onerror=alert(1)&gt;"\n}'


def test_exchange_leaves_structured_reply_verbatim_without_escaping():
    session = ChatSession()
    _, bot = exchange(session, "q", lambda q: {"a": "<b>"})
    assert bot.text == '{\n  "a": "<b>"\n}'
