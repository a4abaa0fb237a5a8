"""Parse a model's marker-formatted reply into a `QuizSpec`.

Each question is tried with the marker-scan parser first. When any required
field (question text, an option, or the CORRECT label) comes back missing, the
line-oriented fallback parser gets the same section. A question both parsers
reject is dropped, never fabricated.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from quizforge.core.exceptions import ParseError
from quizforge.schemas.quiz import OPTION_LABELS, QUESTIONS_PER_QUIZ, OptionSpec, QuestionSpec, QuizSpec
from quizforge.services.answer_resolution import resolve_correct_answer
from quizforge.services.quiz_prompt import (
    CORRECT_MARKER,
    DESCRIPTION_MARKER,
    EXPLANATION_MARKER,
    OPTION_MARKERS,
    TITLE_MARKER,
    question_marker,
)

logger = logging.getLogger(__name__)

# Keys of the chat-completion envelope that sometimes trail the assistant text.
ENVELOPE_KEYS: tuple[str, ...] = (
    '"refusal":',
    '"annotations":',
    '"logprobs":',
    '"finish_reason":',
    '"usage":',
    '"choices":',
    '"model":',
    '"object":',
    '"created":',
)

_TRAILING_JSON_FIELD = re.compile(r',\s*"[^"]*":\s*[^,}]*$')
_TRAILING_JSON_OBJECT = re.compile(r'\}\s*,\s*"[^"]*".*$', re.DOTALL)
_JSON_STRING_TAIL = re.compile(r'(?<!\\)"\s*\}[\s}\]]*$')
_LEADING_COLONS = re.compile(r"^[:\s]+")
_WHITESPACE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# text helpers
# ---------------------------------------------------------------------------


def clean_text(text: Optional[str]) -> str:
    """Unescape literal escape sequences and trim."""
    if not text:
        return ""
    return (
        text.replace("\\n", "\n")
        .replace("\\t", "\t")
        .replace('\\"', '"')
        .replace("\\\\", "\\")
        .strip()
    )


def clean_explanation(text: Optional[str]) -> str:
    """Strip envelope leftovers, a leading label and symbol glyphs from an explanation."""
    cleaned = clean_text(text)
    if not cleaned:
        return ""

    for fragment in ('"refusal":', '}, "logprobs":'):
        cut = cleaned.find(fragment)
        if cut > 0:
            cleaned = cleaned[:cut].strip()
    cleaned = _TRAILING_JSON_FIELD.sub("", cleaned)
    cleaned = _TRAILING_JSON_OBJECT.sub("", cleaned)

    for prefix in ("Explanation:", "EXPLANATION:", "Explanation", "EXPLANATION"):
        if cleaned.startswith(prefix):
            cleaned = cleaned[len(prefix) :].strip()
    cleaned = _LEADING_COLONS.sub("", cleaned)

    cleaned = "".join(ch for ch in cleaned if unicodedata.category(ch) not in ("So", "Sk"))
    return _WHITESPACE.sub(" ", cleaned).strip()


def unwrap_completion(text: Optional[str]) -> str:
    """Recover the marker text from a completion that may carry envelope residue."""
    if not text:
        return ""
    cleaned = text

    title_at = cleaned.find(TITLE_MARKER)
    if title_at > 0:
        cleaned = cleaned[title_at:]

    cuts = [pos for pos in (cleaned.find(key) for key in ENVELOPE_KEYS) if pos > 0]
    if cuts:
        cleaned = cleaned[: min(cuts)].rstrip().rstrip(",").rstrip()
        # closing quote of the JSON string value the marker text sat in
        if cleaned.endswith('"') and not cleaned.endswith('\\"'):
            cleaned = cleaned[:-1]

    # closing quote of a JSON string value followed by the object closers
    cleaned = _JSON_STRING_TAIL.sub("", cleaned.rstrip())

    return clean_text(cleaned)


# ---------------------------------------------------------------------------
# marker scanning
# ---------------------------------------------------------------------------


def extract_value(text: Optional[str], start_marker: str, end_marker: str = "") -> Optional[str]:
    """Return the trimmed text between two markers.

    None when `start_marker` is absent. An empty `start_marker` means the start
    of `text`; an empty or missing `end_marker` reads to the end.
    """
    if text is None:
        return None
    start = 0
    if start_marker:
        found = text.find(start_marker)
        if found == -1:
            return None
        start = found + len(start_marker)

    end = text.find(end_marker, start) if end_marker else -1
    if end == -1:
        end = len(text)
    return text[start:end].strip()


def extract_question_section(text: str, number: int) -> Optional[str]:
    start_marker = question_marker(number)
    end_marker = question_marker(number + 1) if number < QUESTIONS_PER_QUIZ else ""
    start = text.find(start_marker)
    if start == -1:
        return None
    start += len(start_marker)
    end = text.find(end_marker, start) if end_marker else -1
    if end == -1:
        end = len(text)
    return text[start:end].strip()


def _build_question(
    number: int,
    question_text: str,
    options: list[str],
    correct_answer: str,
    explanation: str,
) -> QuestionSpec:
    return QuestionSpec(
        question_text=question_text,
        ordinal=number,
        options=[OptionSpec(label=label, text=text) for label, text in zip(OPTION_LABELS, options)],
        correct_answer_text=correct_answer,
        explanation=explanation,
    )


def parse_question_primary(section: str, number: int) -> Optional[QuestionSpec]:
    """Marker-scan parse. None when a required field is missing."""
    a, b, c, d = OPTION_MARKERS
    question_text = extract_value(section, "", a)
    options = [
        extract_value(section, a, b),
        extract_value(section, b, c),
        extract_value(section, c, d),
        extract_value(section, d, CORRECT_MARKER),
    ]
    correct_raw = extract_value(section, CORRECT_MARKER, EXPLANATION_MARKER)
    explanation = extract_value(section, EXPLANATION_MARKER)

    required = [question_text, *options, correct_raw]
    if any(value is None or not value.strip() for value in required):
        logger.info(
            "Question %d is missing required fields (text=%r, options=%r, correct=%r)",
            number,
            question_text,
            options,
            correct_raw,
        )
        return None

    option_texts = [clean_text(o) for o in options]
    try:
        return _build_question(
            number,
            clean_text(question_text),
            option_texts,
            resolve_correct_answer(correct_raw, option_texts),
            clean_explanation(explanation),
        )
    except PydanticValidationError as exc:
        logger.info("Question %d failed validation after marker scan: %s", number, exc)
        return None


def parse_question_fallback(section: str, number: int) -> Optional[QuestionSpec]:
    """Line-oriented parse for replies that bend the marker layout."""
    logger.info("Attempting fallback parsing for question %d", number)
    question_text: Optional[str] = None
    options: list[str] = []
    correct_raw: Optional[str] = None
    explanation = ""

    for raw_line in section.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith("CORRECT"):
            correct_raw = line[line.find(":") + 1 :].strip()
        elif line.startswith("EXPLANATION"):
            explanation = line[line.find(":") + 1 :].strip()
        elif line.startswith(OPTION_LABELS):
            if len(options) < len(OPTION_LABELS):
                options.append(line[line.find(")") + 1 :].strip())
        elif question_text is None:
            question_text = line

    option_texts = [clean_text(o) for o in options]
    if correct_raw is None and option_texts:
        logger.warning(
            "correct_answer_defaulted: question %d has no CORRECT line, using option A",
            number,
        )
        correct_answer = option_texts[0]
    elif correct_raw is not None and clean_text(correct_raw) in option_texts:
        correct_answer = clean_text(correct_raw)
    else:
        correct_answer = resolve_correct_answer(correct_raw, option_texts)

    if not question_text or len(option_texts) < 4 or not all(option_texts):
        logger.error("Fallback parsing also failed for question %d", number)
        return None

    try:
        question = _build_question(
            number,
            clean_text(question_text),
            option_texts,
            correct_answer,
            clean_explanation(explanation),
        )
    except PydanticValidationError as exc:
        logger.error("Fallback parsing also failed for question %d: %s", number, exc)
        return None
    logger.info("Fallback parsing successful for question %d", number)
    return question


def parse_question(text: str, number: int) -> Optional[QuestionSpec]:
    section = extract_question_section(text, number)
    if section is None:
        logger.error("Could not extract question section for question %d", number)
        return None
    question = parse_question_primary(section, number)
    if question is None:
        question = parse_question_fallback(section, number)
    return question


def parse_quiz(raw_text: str, topic: str) -> QuizSpec:
    """Parse `raw_text` into a quiz; raises ParseError when no question is recovered."""
    text = raw_text or ""
    title = clean_text(extract_value(text, TITLE_MARKER, DESCRIPTION_MARKER))
    description = clean_text(extract_value(text, DESCRIPTION_MARKER, question_marker(1)))

    questions = [
        q
        for q in (parse_question(text, n) for n in range(1, QUESTIONS_PER_QUIZ + 1))
        if q is not None
    ]
    if not questions:
        raise ParseError(
            f"Could not parse any questions from the model response for topic '{topic}'",
            raw_text=text,
        )
    if len(questions) < QUESTIONS_PER_QUIZ:
        logger.warning(
            "Parsed %d of %d questions for topic: %s", len(questions), QUESTIONS_PER_QUIZ, topic
        )

    return QuizSpec(
        topic=topic,
        title=title or f"Quiz on {topic}",
        description=description,
        questions=questions,
    )


__all__ = [
    "ENVELOPE_KEYS",
    "clean_explanation",
    "clean_text",
    "extract_question_section",
    "extract_value",
    "parse_question",
    "parse_question_fallback",
    "parse_question_primary",
    "parse_quiz",
    "unwrap_completion",
]
