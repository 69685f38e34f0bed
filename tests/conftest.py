import pytest
from fastapi.testclient import TestClient

from app.core import tutor_client
from app.core.tutor_client import TutorServiceError
from app.main import create_app


class FakeTutor:
    """Stand-in for tutor_client.ask: returns queued replies, or raises when given an exception."""

    def __init__(self):
        self.replies = []
        self.questions = []

    def __call__(self, question):
        self.questions.append(question)
        reply = self.replies.pop(0) if self.replies else "ok"
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture()
def fake_tutor(monkeypatch):
    tutor = FakeTutor()
    monkeypatch.setattr(tutor_client, "ask", tutor)
    return tutor


@pytest.fixture()
def failing_tutor(fake_tutor):
    fake_tutor.replies = [TutorServiceError("HTTP 502 from upstream: Bad Gateway")] * 10
    return fake_tutor


@pytest.fixture()
def app():
    """A fresh app (and session store) per test."""
    return create_app()


@pytest.fixture()
def client(app):
    return TestClient(app)
