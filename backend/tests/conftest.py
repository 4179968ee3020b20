import os
import tempfile

# must be set before skillbridge.config is imported
_TMP = tempfile.mkdtemp(prefix="skillbridge-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["GROQ_API_KEY"] = "gsk_test_key_123456"
os.environ["AUTH_JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from skillbridge.db import Base, SessionLocal, engine
from skillbridge.main import app
from skillbridge.services import llm_groq


class FakeLLM:
    """Stands in for llm_groq.chat so tests never reach Groq."""

    def __init__(self):
        self.calls = []
        self.reply = "{}"

    async def __call__(self, messages, temperature=0.2, response_format=None):
        self.calls.append({"messages": messages, "response_format": response_format})
        return self.reply

    def prompt(self, i: int = -1) -> str:
        return "\n".join(m["content"] for m in self.calls[i]["messages"])


@pytest.fixture(autouse=True)
def _tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def fake_llm(monkeypatch):
    fake = FakeLLM()
    monkeypatch.setattr(llm_groq, "chat", fake)
    return fake


def make_token(user_id: str, role=None) -> str:
    claims = {"sub": user_id, "aud": "authenticated", "email": f"{user_id}@example.com"}
    if role is not None:
        claims["user_metadata"] = {"role": role}
    return jwt.encode(claims, os.environ["AUTH_JWT_SECRET"], algorithm="HS256")


def auth(user_id: str, role=None) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id, role)}"}


@pytest.fixture
def candidate_headers():
    return auth("cand-1", "candidate")


@pytest.fixture
def enterprise_headers():
    return auth("corp-1", "Enterprise")
