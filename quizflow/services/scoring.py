"""Automatic scoring of submitted responses.

Single-value answer keys (single choice, fill-in, essay reference answers)
require exact string equality. List answer keys (multiple choice) require a
list response holding the same entries in any order. There is no partial
credit: essay responses earn nothing unless they match exactly and are
expected to be regraded manually.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

ResponseValue = str | list[str]


class Scorable(Protocol):
    """Anything carrying an id, an answer key and a point weight."""

    id: Any
    answer: Any
    points: int


def _is_blank(response: Any) -> bool:
    return response is None or response == "" or response == []


def is_response_correct(response: Any, correct_answer: Any) -> bool:
    """Whether one response earns the question's points."""
    if _is_blank(response):
        return False
    if isinstance(correct_answer, list):
        if not isinstance(response, list):
            return False
        return sorted(response) == sorted(correct_answer)
    return isinstance(response, str) and response == correct_answer


def calculate_score(
    responses: Mapping[str, ResponseValue], questions: Sequence[Scorable]
) -> tuple[int, int]:
    """Score a submission.

    Args:
        responses: question id (as string) -> submitted value
        questions: questions of the paper, each with ``id``, ``answer`` and ``points``

    Returns:
        (score, total_score); total_score is always the sum of all points
    """
    score = 0
    total_score = 0
    for question in questions:
        total_score += question.points
        response = responses.get(str(question.id))
        if response is None:
            continue
        if is_response_correct(response, question.answer):
            score += question.points
    return score, total_score
