import json

import pytest
from fastapi.testclient import TestClient

from mathprep.core.config import Settings
from mathprep.crud import crud_question
from mathprep.main import create_app
from mathprep.services.quiz_generator import QuestionGenerator


class FakeGeminiClient:
    """Stands in for GeminiClient; replays canned reply text in order."""

    def __init__(self):
        self.replies = []
        self.prompts = []

    def queue(self, *replies):
        self.replies.extend(replies)

    def get_response(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.replies:
            raise AssertionError("unexpected generator call")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def mcq(question, answer, wrong=("1", "2", "3"), pattern="linear equation"):
    return {"question": question, "correct_answer": answer, "wrong_options": list(wrong), "pattern": pattern}


def fenced(payload) -> str:
    return "```json\n" + json.dumps(payload) + "\n```"


@pytest.fixture
def gemini():
    return FakeGeminiClient()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        GEMINI_API_KEY="test-key",
        DATABASE_URL="sqlite://",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        ENVIRONMENT="test",
    )


@pytest.fixture
def app(settings, gemini):
    return create_app(settings, generator=QuestionGenerator(gemini))


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def seed(app):
    def _seed(*rows):
        with app.state.session_factory() as db:
            return [q.id for q in crud_question.create_questions(db, list(rows))]

    return _seed


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    yield session
    session.close()
