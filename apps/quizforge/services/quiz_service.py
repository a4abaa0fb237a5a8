"""Quiz generation and submission pipeline.

generate: topic -> (retrieval) -> prompt -> model -> unwrap/parse -> store
submit:   stored quiz + answers -> grade -> attempt store
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from quizforge.core.exceptions import NotFoundError, ParseError
from quizforge.core.settings import Settings, settings
from quizforge.schemas.quiz import QuizSpec, RetrievalContext, SubmissionInput, SubmissionResult
from quizforge.services.grading import QuizGradingEngine
from quizforge.services.llm_service import LLMService, validate_llm_settings
from quizforge.services.quiz_parser import parse_quiz, unwrap_completion
from quizforge.services.quiz_prompt import build_prompt
from quizforge.services.quiz_store import AttemptStore, QuizStore
from quizforge.services.retrieval import RetrievalService

logger = logging.getLogger(__name__)


@dataclass
class QuizService:
    """Coordinates the stores, the model client and the retrieval aggregator."""

    quiz_store: QuizStore
    attempt_store: AttemptStore
    llm: LLMService
    retrieval: Optional[RetrievalService] = None
    grader: QuizGradingEngine = field(default_factory=QuizGradingEngine)
    cfg: Settings = field(default_factory=lambda: settings)

    # ---------- generation ----------

    def wants_retrieval(self, topic: str, use_retrieval: Optional[bool] = None) -> bool:
        """Explicit flag wins; otherwise RAG must be enabled and the topic look factual."""
        if self.retrieval is None or use_retrieval is False:
            return False
        if use_retrieval:
            return True
        return self.cfg.rag_enabled and self.retrieval.should_use_retrieval(topic)

    def generate_quiz(
        self,
        topic: str,
        *,
        use_retrieval: Optional[bool] = None,
        description: Optional[str] = None,
    ) -> QuizSpec:
        topic = topic.strip()
        validate_llm_settings(self.cfg)
        logger.info("Generating quiz for topic: %s using model: %s", topic, self.cfg.llm_model)

        context = RetrievalContext.empty(topic)
        if self.retrieval is not None and self.wants_retrieval(topic, use_retrieval):
            context = self.retrieval.retrieve_context(topic)
            if context.has_content():
                logger.info("Grounding prompt with %d sources", len(context.sources))

        prompt = build_prompt(topic, context)
        raw = self.llm.complete(prompt)
        try:
            quiz = parse_quiz(unwrap_completion(raw), topic)
        except ParseError:
            logger.error("Error generating quiz for topic: %s", topic)
            raise

        if not quiz.description and description and description.strip():
            quiz = quiz.model_copy(update={"description": description.strip()})

        stored = self.quiz_store.save(quiz)
        logger.info(
            "Stored quiz %s with %d questions for topic: %s", stored.id, len(stored.questions), topic
        )
        return stored

    # ---------- quiz lookups ----------

    def get_quiz(self, quiz_id: int) -> QuizSpec:
        quiz = self.quiz_store.get(quiz_id)
        if quiz is None:
            raise NotFoundError(f"Quiz not found with ID: {quiz_id}")
        return quiz

    def list_quizzes(self) -> list[QuizSpec]:
        return self.quiz_store.list_all()

    def search_quizzes(self, topic: str) -> list[QuizSpec]:
        return self.quiz_store.search(topic)

    def delete_quiz(self, quiz_id: int) -> None:
        if not self.quiz_store.delete(quiz_id):
            raise NotFoundError(f"Quiz not found with ID: {quiz_id}")
        logger.info("Deleted quiz %s", quiz_id)

    # ---------- submissions ----------

    def submit_quiz(self, submission: SubmissionInput) -> SubmissionResult:
        logger.info(
            "Processing quiz submission for quiz ID: %s by user: %s",
            submission.quiz_id,
            submission.user_name,
        )
        quiz = self.get_quiz(submission.quiz_id)
        result = self.grader.grade(quiz, submission)
        saved = self.attempt_store.save(result)
        logger.info(
            "Quiz submission processed. Score: %d/%d", saved.score, saved.total_questions
        )
        return saved

    def user_history(self, user_name: str) -> list[SubmissionResult]:
        return self.attempt_store.find_by_user(user_name)

    def quiz_attempts(self, quiz_id: int) -> list[SubmissionResult]:
        return self.attempt_store.find_by_quiz(quiz_id)


__all__ = ["QuizService"]
