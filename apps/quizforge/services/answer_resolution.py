"""Map the model's free-text correct-answer label onto an option's text."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from quizforge.schemas.quiz import OPTION_LABELS

logger = logging.getLogger(__name__)


def _label_index(raw_label: str) -> Optional[int]:
    """Index of the first label found in `raw_label`, scanning A, B, C, D in that order.

    Known heuristic: containment is checked on the uppercase letter, so a stray
    capital (e.g. "All of the above is B") resolves to the first label present,
    here A. A bare lowercase letter ("b") is accepted as an exact match.
    """
    for index, label in enumerate(OPTION_LABELS):
        if label in raw_label or raw_label.lower() == label.lower():
            return index
    return None


def resolve_correct_answer(raw_label: Optional[str], options: Sequence[str]) -> str:
    """Return the option text named by `raw_label`, defaulting to option A's text.

    The letter-resolved text is re-checked against the option texts so a parse
    slip can never produce a correct answer that is not one of the options.
    """
    option_texts = [(o or "").strip() for o in options]
    fallback = option_texts[0] if option_texts else ""

    if raw_label is None:
        logger.warning("Correct answer label missing, using option A")
        return fallback

    cleaned = raw_label.strip()
    index = _label_index(cleaned)
    if index is None or index >= len(option_texts):
        logger.warning("No clear option label found in %r, using option A", cleaned)
        return fallback

    resolved = option_texts[index]
    if not resolved:
        logger.warning("Option %s is empty, using option A", OPTION_LABELS[index])
        return fallback
    logger.debug("Correct answer %s selected: %r", OPTION_LABELS[index], resolved)
    return resolved


__all__ = ["resolve_correct_answer"]
