from __future__ import annotations

import os
import socket
from typing import Any, Callable

import pytest

# Ensure the app runs in a unit-test-safe configuration during pytest collection.
# This keeps a developer's local .env (API keys, DATABASE_URL) out of unit tests.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")


class NetworkBlockedError(RuntimeError):
    pass


def _blocked(*_args: Any, **_kwargs: Any) -> Any:
    raise NetworkBlockedError(
        "Network access is disabled during tests. "
        "Mark the test with @pytest.mark.integration/@pytest.mark.network or set ALLOW_NETWORK=1."
    )


@pytest.fixture(autouse=True)
def _disable_network(monkeypatch: pytest.MonkeyPatch, request: pytest.FixtureRequest) -> None:
    """Prevent accidental outbound network calls in unit tests."""

    if os.getenv("ALLOW_NETWORK") == "1":
        return

    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("network"):
        return

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket, "getaddrinfo", _blocked)


QUESTION_BLOCKS: list[dict[str, str]] = [
    {
        "text": "Which method signature is the entry point of a Java application?",
        "A": "public static void main(String[] args)",
        "B": "public void run()",
        "C": "static int start()",
        "D": "void init()",
        "correct": "A",
        "explanation": "The JVM invokes public static void main(String[] args) at startup.",
    },
    {
        "text": "Is Java a purely functional language?",
        "A": "true",
        "B": "false",
        "C": "sometimes",
        "D": "only with lambdas",
        "correct": "B",
        "explanation": "Java is object-oriented with some functional features.",
    },
    {
        "text": "Which keyword declares a subclass?",
        "A": "implements",
        "B": "extends",
        "C": "inherits",
        "D": "super",
        "correct": "The correct answer is B",
        "explanation": "A class extends its superclass.",
    },
    {
        "text": "Which collection rejects duplicate elements?",
        "A": "List",
        "B": "ArrayList",
        "C": "Set",
        "D": "Queue",
        "correct": "C",
        "explanation": "A Set holds each element at most once.",
    },
    {
        "text": "What is the default value of an int field?",
        "A": "null",
        "B": "1",
        "C": "-1",
        "D": "0",
        "correct": "D",
        "explanation": "Numeric fields default to zero.",
    },
]


def render_reply(
    blocks: list[dict[str, str]] | None = None,
    *,
    title: str = "Java Programming Basics",
    description: str = "Test your knowledge of core Java.",
) -> str:
    lines = [f"TITLE: {title}", f"DESCRIPTION: {description}", ""]
    for number, block in enumerate(blocks if blocks is not None else QUESTION_BLOCKS, start=1):
        lines.append(f"QUESTION {number}:")
        lines.append(block["text"])
        for label in ("A", "B", "C", "D"):
            if label in block:
                lines.append(f"{label}) {block[label]}")
        if "correct" in block:
            lines.append(f"CORRECT: {block['correct']}")
        if "explanation" in block:
            lines.append(f"EXPLANATION: {block['explanation']}")
        lines.append("")
    return "\n".join(lines)


@pytest.fixture
def question_blocks() -> list[dict[str, str]]:
    return [dict(block) for block in QUESTION_BLOCKS]


@pytest.fixture
def make_reply() -> Callable[..., str]:
    return render_reply


@pytest.fixture
def quiz_reply() -> str:
    return render_reply()
