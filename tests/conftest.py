"""
Shared fixtures: in-memory SQLite, seeded question bank, fake LLM.

DATABASE_URL must be set before anything imports studybot.config.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["OPENAI_API_KEY"] = ""
os.environ["MANYCHAT_SEND_ENABLED"] = "false"
os.environ["RESET_DATABASE"] = "false"

import pytest

from studybot.content.seed_questions import QUESTIONS
from studybot.database import Base, SessionLocal, engine, init_db
from studybot.handlers import build_dispatcher
from studybot.services import Services
from studybot.state.session import MenuTag, SessionPatch
from studybot.state.store import SqlSessionStore
from studybot.tutor.llm import LLMResult


class FakeLLM:
    """Records prompts; returns canned text or raises."""

    def __init__(self, text: str = "Take it one small step at a time.", fail: bool = False):
        self.text = text
        self.fail = fail
        self.calls = []

    async def generate(self, messages, **kwargs):
        self.calls.append(messages)
        if self.fail:
            raise RuntimeError("LLM unavailable")
        return LLMResult(text=self.text, latency_ms=1, model="fake", usage={})


@pytest.fixture
def db_tables():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def services(db_tables, fake_llm):
    services = Services.build(SessionLocal, llm=fake_llm)
    services.questions.seed(QUESTIONS)
    return services


@pytest.fixture
def store(db_tables):
    return SqlSessionStore(SessionLocal)


@pytest.fixture
def dispatcher(store, services):
    return build_dispatcher(store, services)


@pytest.fixture
def make_user(store):
    """Create a fully registered user sitting in `menu`."""

    def _make(subscriber_id="sub-1", username="thabo", name="Thabo", menu=MenuTag.WELCOME, **fields):
        session = store.ensure_session(subscriber_id)
        store.patch(session.id, SessionPatch(
            display_name=name,
            username=username,
            grade="10",
            preferred_subjects=["math"],
            current_subject="math",
            current_menu=menu,
            **fields,
        ))
        return store.get(session.id)

    return _make
