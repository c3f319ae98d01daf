"""Tests for quiz code issuance."""

from unittest.mock import patch

import pytest

from quizflow.core.app_exceptions import ConflictError
from quizflow.services.quiz_code import (
    QUIZ_CODE_ALPHABET,
    QUIZ_CODE_LENGTH,
    generate_quiz_code,
    generate_unique_quiz_code,
    is_valid_quiz_code,
)
from tests.helpers.factories import create_paper, create_question


def test_alphabet_excludes_ambiguous_characters():
    # 23 letters and 8 digits
    assert len(set(QUIZ_CODE_ALPHABET)) == len(QUIZ_CODE_ALPHABET) == 31
    for ch in "ILO01":
        assert ch not in QUIZ_CODE_ALPHABET


def test_generated_codes_use_alphabet_and_length():
    for _ in range(10_000):
        code = generate_quiz_code()
        assert len(code) == QUIZ_CODE_LENGTH == 6
        assert all(ch in QUIZ_CODE_ALPHABET for ch in code)


def test_is_valid_quiz_code():
    assert is_valid_quiz_code("ABC234")
    assert not is_valid_quiz_code("ABC23")
    assert not is_valid_quiz_code("ABC0O1")
    assert not is_valid_quiz_code("abc234")


def test_unique_code_skips_taken_codes(db, teacher):
    question = create_question(db, teacher)
    create_paper(db, teacher, [question], quiz_code="AAAAAA")

    with patch(
        "quizflow.services.quiz_code.generate_quiz_code", side_effect=["AAAAAA", "BBBBBB"]
    ):
        assert generate_unique_quiz_code(db) == "BBBBBB"


def test_unique_code_gives_up_after_max_attempts(db, teacher):
    question = create_question(db, teacher)
    create_paper(db, teacher, [question], quiz_code="AAAAAA")

    with patch("quizflow.services.quiz_code.generate_quiz_code", return_value="AAAAAA") as gen:
        with pytest.raises(ConflictError) as exc_info:
            generate_unique_quiz_code(db, max_attempts=3)

    assert gen.call_count == 3
    assert exc_info.value.status_code == 409
    assert exc_info.value.code == "CONFLICT"
