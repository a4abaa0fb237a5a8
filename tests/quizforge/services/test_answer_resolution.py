import logging

import pytest
from quizforge.services.answer_resolution import resolve_correct_answer

OPTIONS = ["Paris", "London", "Berlin", "Madrid"]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("A", "Paris"), ("B", "London"), ("C", "Berlin"), ("D", "Madrid"), ("b", "London")],
)
def test_single_label_resolves_to_option_text(raw, expected):
    assert resolve_correct_answer(raw, OPTIONS) == expected


@pytest.mark.parametrize("label", ["A", "B", "C", "D"])
def test_extraneous_text_resolves_like_bare_label(label):
    assert resolve_correct_answer(f"The answer is {label}.", OPTIONS) == resolve_correct_answer(
        label, OPTIONS
    )


def test_labels_are_scanned_in_priority_order():
    # Known heuristic: a stray capital earlier in the scan order wins.
    assert resolve_correct_answer("All of them, but mostly C", OPTIONS) == "Paris"
    assert resolve_correct_answer("C) Berlin", OPTIONS) == "London"


def test_unrecognized_label_falls_back_to_option_a(caplog):
    with caplog.at_level(logging.WARNING, logger="quizforge.services.answer_resolution"):
        assert resolve_correct_answer("none of these", OPTIONS) == "Paris"
    assert "using option A" in caplog.text


def test_missing_label_falls_back_to_option_a():
    assert resolve_correct_answer(None, OPTIONS) == "Paris"
    assert resolve_correct_answer("   ", OPTIONS) == "Paris"
