"""Tests for the quiz attempt state machine and scoring."""

import itertools

import pytest

from app.models.question import Question
from app.services.quiz_session import (
    EmptyQuizError,
    QuizSession,
    ScoredQuestion,
    compute_score,
    scored_question,
)


def make_session(correct_options, user_id=7, topic_id=3) -> QuizSession:
    questions = [ScoredQuestion(id=i + 1, correct_option=c) for i, c in enumerate(correct_options)]
    return QuizSession(questions, user_id=user_id, topic_id=topic_id)


def test_initial_state() -> None:
    session = make_session([1, 2])
    assert session.current_index == 0
    assert session.answers == {}
    assert not session.completed


def test_empty_quiz_is_refused() -> None:
    with pytest.raises(EmptyQuizError):
        QuizSession([], user_id=1, topic_id=1)


def test_all_correct() -> None:
    session = make_session([1, 2])
    session.select_option(1, 1)
    session.advance()
    session.select_option(2, 2)
    session.advance()
    assert session.completed
    assert session.result.score == 2
    assert session.result.total_questions == 2


def test_one_wrong() -> None:
    session = make_session([1, 2])
    session.select_option(1, 1)
    session.select_option(2, 1)
    assert session.complete() == 1


def test_unanswered_question_counts_wrong() -> None:
    session = make_session([1, 2])
    session.select_option(1, 1)
    session.advance()
    session.advance()
    assert session.result.score == 1
    assert session.result.total_questions == 2


def test_last_selection_wins() -> None:
    session = make_session([3])
    session.select_option(1, 3)
    session.select_option(1, 4)
    assert session.answers == {1: 4}
    assert session.complete() == 0


def test_retreat_at_start_is_noop() -> None:
    session = make_session([1, 2, 3])
    session.retreat()
    assert session.current_index == 0
    assert not session.completed


def test_retreat_never_finalizes() -> None:
    session = make_session([1, 2])
    session.advance()
    session.retreat()
    session.retreat()
    assert session.current_index == 0
    assert not session.completed


def test_advance_completes_once() -> None:
    session = make_session([1, 2])
    session.select_option(1, 1)
    session.advance()
    session.advance()
    assert session.score == 1
    assert session.current_index == 1

    # Further moves do not recompute or move past the end
    session.advance()
    session.advance()
    assert session.score == 1
    assert session.current_index == 1
    with pytest.raises(RuntimeError):
        session.select_option(2, 2)


def test_result_unavailable_while_in_progress() -> None:
    session = make_session([1])
    with pytest.raises(RuntimeError):
        session.result


def test_select_option_validation() -> None:
    session = make_session([1])
    with pytest.raises(ValueError):
        session.select_option(1, 5)
    with pytest.raises(ValueError):
        session.select_option(1, True)
    with pytest.raises(KeyError):
        session.select_option(99, 1)


def test_result_record_carries_identity() -> None:
    session = make_session([2], user_id=11, topic_id=4)
    session.select_option(1, 2)
    session.complete()
    record = session.result
    assert (record.user_id, record.topic_id, record.score, record.total_questions) == (11, 4, 1, 1)


@pytest.mark.parametrize("correct", [(1,), (1, 2), (4, 3, 2)])
def test_score_bounds_for_every_assignment(correct) -> None:
    questions = [ScoredQuestion(id=i, correct_option=c) for i, c in enumerate(correct)]
    choices = [None, 1, 2, 3, 4]
    for picks in itertools.product(choices, repeat=len(questions)):
        answers = {q.id: p for q, p in zip(questions, picks) if p is not None}
        score = compute_score(questions, answers)
        expected = sum(1 for q, p in zip(questions, picks) if p == q.correct_option)
        assert 0 <= score <= len(questions)
        assert score == expected


def test_scored_question_reads_embedded_options() -> None:
    question = Question(id=5, title="2+2?", body='{"option1": "3", "option2": "4", "correct_option": 2}')
    assert scored_question(question) == ScoredQuestion(id=5, correct_option=2, title="2+2?")


def test_scored_question_defaults_to_first_option() -> None:
    assert scored_question(Question(id=1, title="Legacy", body=None)).correct_option == 1
    assert scored_question(Question(id=2, title="Text", body="not json")).correct_option == 1
    assert scored_question(Question(id=3, title="Bad", body='{"correct_option": 9}')).correct_option == 1
    assert scored_question(Question(id=4, title="Float", body='{"correct_option": 3.0}')).correct_option == 1
    assert scored_question(Question(id=5, title="Text", body='{"correct_option": "3"}')).correct_option == 1
