import pytest
from quizforge.connectors.base import SourceDocument
from quizforge.core.exceptions import ConfigurationError, NotFoundError, ParseError, UpstreamError
from quizforge.core.settings import Settings
from quizforge.schemas.quiz import AnswerInput, SubmissionInput
from quizforge.services.quiz_service import QuizService
from quizforge.services.quiz_store import AttemptStore, QuizStore
from quizforge.services.retrieval import RetrievalService
from sqlalchemy import create_engine
from sqlmodel import Session, SQLModel


class _FakeLLM:
    def __init__(self, reply: str = "", exc: Exception | None = None) -> None:
        self.reply = reply
        self.exc = exc
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.exc is not None:
            raise self.exc
        return self.reply


class _FakeSource:
    def __init__(self, docs: list[SourceDocument]) -> None:
        self.docs = docs
        self.calls: list[str] = []

    def fetch(self, topic: str) -> list[SourceDocument]:
        self.calls.append(topic)
        return list(self.docs)


def _session() -> Session:
    engine = create_engine("sqlite:///:memory:")
    SQLModel.metadata.create_all(engine)
    return Session(engine)


def _service(llm: _FakeLLM, *, retrieval=None, **cfg) -> QuizService:
    session = _session()
    values = {"OPENAI_API_KEY": "sk-test"}
    values.update(cfg)
    return QuizService(
        quiz_store=QuizStore(session),
        attempt_store=AttemptStore(session),
        llm=llm,  # type: ignore[arg-type]
        retrieval=retrieval,
        cfg=Settings(**values),
    )


def _retrieval() -> tuple[RetrievalService, _FakeSource]:
    source = _FakeSource([SourceDocument(title="Java", content="Java is a language.")])
    return RetrievalService(encyclopedic=source), source


def test_generate_quiz_persists_parsed_quiz(quiz_reply):
    service = _service(_FakeLLM(quiz_reply))

    quiz = service.generate_quiz("  Java Programming ")

    assert quiz.id is not None
    assert quiz.topic == "Java Programming"
    assert len(quiz.questions) == 5
    assert quiz.questions[0].correct_answer_text == "public static void main(String[] args)"
    assert service.get_quiz(quiz.id) == quiz
    assert [q.id for q in service.list_quizzes()] == [quiz.id]


def test_missing_api_key_fails_before_model_call(quiz_reply):
    llm = _FakeLLM(quiz_reply)
    service = _service(llm, OPENAI_API_KEY="")

    with pytest.raises(ConfigurationError):
        service.generate_quiz("Java Programming")
    assert llm.prompts == []


def test_model_failure_is_fatal_and_persists_nothing():
    service = _service(_FakeLLM(exc=UpstreamError("model down")))

    with pytest.raises(UpstreamError):
        service.generate_quiz("Java Programming")
    assert service.list_quizzes() == []


def test_unparseable_reply_persists_nothing():
    service = _service(_FakeLLM("I would rather not."))

    with pytest.raises(ParseError):
        service.generate_quiz("Java Programming")
    assert service.list_quizzes() == []


def test_factual_topic_is_grounded(quiz_reply):
    llm = _FakeLLM(quiz_reply)
    retrieval, source = _retrieval()
    service = _service(llm, retrieval=retrieval)

    service.generate_quiz("Java Programming")

    assert source.calls == ["Java Programming"]
    assert llm.prompts[0].startswith("FACTUAL CONTEXT")
    assert "Java is a language." in llm.prompts[0]


def test_retrieval_respects_flags(quiz_reply):
    llm = _FakeLLM(quiz_reply)
    retrieval, source = _retrieval()

    _service(llm, retrieval=retrieval).generate_quiz("Java Programming", use_retrieval=False)
    _service(llm, retrieval=retrieval, RAG_ENABLED=False).generate_quiz("Java Programming")
    _service(llm, retrieval=retrieval).generate_quiz("Cooking pasta")
    assert source.calls == []

    _service(llm, retrieval=retrieval).generate_quiz("Cooking pasta", use_retrieval=True)
    assert source.calls == ["Cooking pasta"]


def test_request_description_fills_blank_parsed_description(make_reply):
    service = _service(_FakeLLM(make_reply(description="")))

    quiz = service.generate_quiz("Java Programming", description="Warm-up round")

    assert quiz.description == "Warm-up round"


def test_submit_quiz_grades_and_records_attempt(quiz_reply):
    service = _service(_FakeLLM(quiz_reply))
    quiz = service.generate_quiz("Java Programming")
    q1, q2, q3 = quiz.questions[:3]

    result = service.submit_quiz(
        SubmissionInput(
            quiz_id=quiz.id or 0,
            user_name="ada",
            answers=[
                AnswerInput(question_id=q1.id or 0, selected_answer="0"),
                AnswerInput(question_id=q2.id or 0, selected_answer="false"),
                AnswerInput(question_id=q3.id or 0, selected_answer="0"),
            ],
        )
    )

    assert result.attempt_id is not None
    assert result.submitted_at is not None
    assert result.score == 2
    assert result.total_questions == 5
    assert result.percentage == 40.0
    assert [a.attempt_id for a in service.user_history("ada")] == [result.attempt_id]
    assert [a.attempt_id for a in service.quiz_attempts(quiz.id or 0)] == [result.attempt_id]


def test_missing_quiz_raises_not_found():
    service = _service(_FakeLLM())

    with pytest.raises(NotFoundError):
        service.get_quiz(42)
    with pytest.raises(NotFoundError):
        service.delete_quiz(42)
    with pytest.raises(NotFoundError):
        service.submit_quiz(
            SubmissionInput(
                quiz_id=42, user_name="ada", answers=[AnswerInput(question_id=1, selected_answer="0")]
            )
        )


def test_search_and_delete(quiz_reply):
    service = _service(_FakeLLM(quiz_reply))
    quiz = service.generate_quiz("Java Programming")

    assert [q.id for q in service.search_quizzes("JAVA")] == [quiz.id]
    service.delete_quiz(quiz.id or 0)
    assert service.search_quizzes("java") == []
