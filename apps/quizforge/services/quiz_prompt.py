"""Compose the quiz-generation prompt.

The marker vocabulary below is what `quiz_parser` scans for; the template in
``prompts/quiz/generate.md`` must use these tokens verbatim.
"""

from __future__ import annotations

from typing import Optional

from quizforge.prompts import load_prompt
from quizforge.schemas.quiz import OPTION_LABELS, RetrievalContext

TITLE_MARKER = "TITLE:"
DESCRIPTION_MARKER = "DESCRIPTION:"
CORRECT_MARKER = "CORRECT:"
EXPLANATION_MARKER = "EXPLANATION:"
OPTION_MARKERS: tuple[str, ...] = tuple(f"{label})" for label in OPTION_LABELS)


def question_marker(number: int) -> str:
    return f"QUESTION {number}:"


def build_prompt(topic: str, context: Optional[RetrievalContext] = None) -> str:
    """Return the instruction text for `topic`, grounded in `context` when it has content."""
    body = load_prompt("quiz", "generate.md").format(topic=topic.strip())
    if context is None or not context.has_content():
        return body
    return context.context_for_prompt() + body


__all__ = [
    "CORRECT_MARKER",
    "DESCRIPTION_MARKER",
    "EXPLANATION_MARKER",
    "OPTION_MARKERS",
    "TITLE_MARKER",
    "build_prompt",
    "question_marker",
]
