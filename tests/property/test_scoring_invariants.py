"""Property-based tests for scoring and quiz code invariants."""

from hypothesis import given, settings, strategies as st

from quizflow.services.quiz_code import QUIZ_CODE_ALPHABET, generate_quiz_code
from quizflow.services.scoring import calculate_score
from tests.helpers.factories import AnswerKey

option = st.sampled_from(["A", "B", "C", "D", "E"])
answer_value = st.one_of(option, st.lists(option, min_size=1, max_size=5))


@st.composite
def paper_and_responses(draw):
    keys = draw(
        st.lists(
            st.builds(
                AnswerKey,
                id=st.uuids().map(str),
                answer=answer_value,
                points=st.integers(min_value=1, max_value=100),
            ),
            max_size=20,
            unique_by=lambda key: key.id,
        )
    )
    responses = {}
    for key in keys:
        if draw(st.booleans()):
            responses[key.id] = draw(answer_value)
    return keys, responses


@settings(max_examples=200, deadline=None)
@given(data=paper_and_responses())
def test_total_is_sum_of_points_and_score_bounded(data):
    """
    Property: total_score == sum(points) regardless of responses; 0 <= score <= total.
    """
    keys, responses = data
    score, total = calculate_score(responses, keys)

    assert total == sum(key.points for key in keys)
    assert 0 <= score <= total


@settings(max_examples=100, deadline=None)
@given(data=paper_and_responses())
def test_answering_with_the_key_earns_full_marks(data):
    keys, _ = data
    responses = {
        key.id: list(reversed(key.answer)) if isinstance(key.answer, list) else key.answer
        for key in keys
    }
    score, total = calculate_score(responses, keys)
    assert score == total


@settings(max_examples=50, deadline=None)
@given(st.integers(min_value=0, max_value=10))
def test_quiz_codes_stay_in_alphabet(_):
    code = generate_quiz_code()
    assert len(code) == 6
    assert set(code) <= set(QUIZ_CODE_ALPHABET)
