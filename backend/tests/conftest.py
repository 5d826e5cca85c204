import json

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.errors import LLMServiceError
from app.main import app
from app.models.database import Base, get_db
from app.services.llm import llm_service


class FakeLLM:
    """Scripted stand-in for the completion API.

    Queued strings/dicts are returned in order; queued exceptions are raised.
    With nothing queued the call fails like an unreachable API.
    """

    def __init__(self):
        self.responses = []
        self.calls = []
        self.models = []

    def queue(self, *responses):
        self.responses.extend(responses)

    async def complete(self, messages, temperature=None, max_tokens=None, model=None):
        self.calls.append(messages)
        self.models.append(model)
        if not self.responses:
            raise LLMServiceError("LLM unavailable in tests")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response if isinstance(response, str) else json.dumps(response)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def fake_llm(monkeypatch):
    fake = FakeLLM()
    monkeypatch.setattr(llm_service, "complete", fake.complete)
    return fake


@pytest.fixture
def client(session_factory, fake_llm):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
