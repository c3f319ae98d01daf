"""Tests for automatic scoring."""

import pytest

from quizflow.services.scoring import calculate_score, is_response_correct
from tests.helpers.factories import AnswerKey


def test_single_choice_correct():
    questions = [AnswerKey(id="q1", answer="B", points=10)]
    assert calculate_score({"q1": "B"}, questions) == (10, 10)


def test_single_choice_wrong():
    questions = [AnswerKey(id="q1", answer="B", points=10)]
    assert calculate_score({"q1": "A"}, questions) == (0, 10)


def test_multiple_choice_is_order_independent():
    questions = [AnswerKey(id="q1", answer=["B", "C"], points=5)]
    assert calculate_score({"q1": ["C", "B"]}, questions) == (5, 5)


def test_missing_response_scores_zero():
    questions = [AnswerKey(id="q1", answer="B", points=10)]
    assert calculate_score({}, questions) == (0, 10)


def test_duplicate_entries_do_not_match_distinct_key():
    questions = [AnswerKey(id="q1", answer=["A", "B"], points=4)]
    assert calculate_score({"q1": ["B", "B"]}, questions) == (0, 4)


def test_multiple_choice_requires_list_response():
    questions = [AnswerKey(id="q1", answer=["A"], points=3)]
    assert calculate_score({"q1": "A"}, questions) == (0, 3)


def test_single_value_key_rejects_list_response():
    questions = [AnswerKey(id="q1", answer="A", points=3)]
    assert calculate_score({"q1": ["A"]}, questions) == (0, 3)


def test_partial_multiple_choice_earns_nothing():
    questions = [AnswerKey(id="q1", answer=["A", "B", "C"], points=6)]
    assert calculate_score({"q1": ["A", "B"]}, questions) == (0, 6)


def test_fill_in_requires_exact_match():
    questions = [AnswerKey(id="q1", answer="Paris", points=2)]
    assert calculate_score({"q1": "paris"}, questions) == (0, 2)
    assert calculate_score({"q1": "Paris"}, questions) == (2, 2)


def test_mixed_paper():
    questions = [
        AnswerKey(id="q1", answer="B", points=10),
        AnswerKey(id="q2", answer=["A", "C"], points=5),
        AnswerKey(id="q3", answer="photosynthesis", points=3),
        AnswerKey(id="q4", answer="A reference essay", points=20),
    ]
    responses = {"q1": "B", "q2": ["C", "A"], "q3": "respiration", "q4": "My essay"}
    assert calculate_score(responses, questions) == (15, 38)


def test_responses_for_unknown_questions_are_ignored():
    questions = [AnswerKey(id="q1", answer="B", points=10)]
    assert calculate_score({"q1": "B", "other": "X"}, questions) == (10, 10)


def test_empty_paper():
    assert calculate_score({"q1": "B"}, []) == (0, 0)


@pytest.mark.parametrize(
    "response,key,expected",
    [
        ("A", "A", True),
        ("", "", False),
        (None, "A", False),
        ([], ["A"], False),
        (["A", "B"], ["B", "A"], True),
    ],
)
def test_is_response_correct(response, key, expected):
    assert is_response_correct(response, key) is expected
