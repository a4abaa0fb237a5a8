from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr
from quizforge.api.dependencies import get_quiz_service
from quizforge.core.settings import Settings, settings
from quizforge.main import app
from quizforge.services.quiz_service import QuizService
from quizforge.services.quiz_store import AttemptStore, QuizStore
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel


class _FakeLLM:
    def __init__(self, reply: str) -> None:
        self.reply = reply

    def complete(self, prompt: str) -> str:
        return self.reply


@pytest.fixture
def api(quiz_reply) -> Iterator[tuple[TestClient, _FakeLLM, dict]]:
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    SQLModel.metadata.create_all(engine)
    llm = _FakeLLM(quiz_reply)
    cfg = {"OPENAI_API_KEY": "sk-test"}

    def _service() -> Iterator[QuizService]:
        session = Session(engine)
        try:
            yield QuizService(
                quiz_store=QuizStore(session),
                attempt_store=AttemptStore(session),
                llm=llm,  # type: ignore[arg-type]
                retrieval=None,
                cfg=Settings(**cfg),
            )
        finally:
            session.close()

    app.dependency_overrides[get_quiz_service] = _service
    try:
        yield TestClient(app), llm, cfg
    finally:
        app.dependency_overrides.clear()


def _generate(client: TestClient, topic: str = "Java Programming") -> dict:
    resp = client.post("/api/quizzes/generate", json={"topic": topic})
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_generate_returns_stored_quiz(api):
    client, _, _ = api

    quiz = _generate(client)

    assert quiz["id"] is not None
    assert quiz["title"] == "Java Programming Basics"
    assert len(quiz["questions"]) == 5
    first = quiz["questions"][0]
    assert first["question_number"] == 1
    assert [o["option_label"] for o in first["options"]] == ["A", "B", "C", "D"]
    assert first["correct_answer"] == "public static void main(String[] args)"


def test_generate_validates_topic_length(api):
    client, _, _ = api

    resp = client.post("/api/quizzes/generate", json={"topic": "ab"})

    assert resp.status_code == 422
    assert resp.json()["code"] == "validation_error"


def test_generate_reports_parse_failures(api):
    client, llm, _ = api
    llm.reply = "No quiz today."

    resp = client.post("/api/quizzes/generate", json={"topic": "Java Programming"})

    assert resp.status_code == 502
    assert resp.json()["code"] == "parse_error"
    assert client.get("/api/quizzes").json() == []


def test_generate_without_api_key_is_configuration_error(api):
    client, _, cfg = api
    cfg["OPENAI_API_KEY"] = ""

    resp = client.post("/api/quizzes/generate", json={"topic": "Java Programming"})

    assert resp.status_code == 500
    assert resp.json()["code"] == "configuration_error"


def test_get_list_search_and_delete(api):
    client, _, _ = api
    java = _generate(client, "Java Programming")
    rome = _generate(client, "Roman History")

    assert client.get(f"/api/quizzes/{java['id']}").json()["topic"] == "Java Programming"
    assert [q["id"] for q in client.get("/api/quizzes").json()] == [rome["id"], java["id"]]
    assert [q["id"] for q in client.get("/api/quizzes/search", params={"topic": "JAVA"}).json()] == [
        java["id"]
    ]

    assert client.delete(f"/api/quizzes/{java['id']}").status_code == 204
    missing = client.get(f"/api/quizzes/{java['id']}")
    assert missing.status_code == 404
    assert missing.json()["code"] == "not_found"
    assert client.delete(f"/api/quizzes/{java['id']}").status_code == 404


def test_config_check_never_exposes_key(api, monkeypatch):
    client, _, _ = api
    monkeypatch.setattr(settings, "openai_api_key", SecretStr("sk-very-secret"))

    resp = client.get("/api/quizzes/config/check")

    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "OK"
    assert data["api_key_configured"] is True
    assert data["model"] == settings.llm_model
    assert "sk-very-secret" not in resp.text
