from __future__ import annotations

import pytest

from assessment_app.core.services.quiz_session import (
    Countdown,
    QuizSession,
    SessionEvent,
    TickStamp,
    normalize_time_limit,
)
from tests.conftest import make_question


def _questions(*time_limits, scores=None):
    scores = scores or [1] * len(time_limits)
    return [
        make_question(f"Question {index}", question_id=index + 1, time_limit=limit, score=score)
        for index, (limit, score) in enumerate(zip(time_limits, scores))
    ]


def test_all_correct_answers_sum_point_values():
    session = QuizSession(_questions(None, None, None, scores=[1, 2, 1]))
    for _ in range(3):
        assert session.select_answer(3)
        assert session.advance()

    result = session.compute_result()
    assert session.is_finished
    assert result.score == 4
    assert result.max_score == 4
    assert result.recommendations == []


def test_overall_limit_finishes_with_unanswered_slots():
    session = QuizSession(_questions(None, None, None), overall_limit_seconds=5)

    events = [session.tick() for _ in range(5)]

    assert events[:4] == [SessionEvent.TICKED] * 4
    assert events[4] is SessionEvent.QUIZ_EXPIRED
    assert session.is_finished
    assert session.answers == (None, None, None)
    assert session.quiz_seconds_left == 0


def test_question_limit_auto_advances_without_answer():
    session = QuizSession(_questions(3, None))

    assert session.tick() is SessionEvent.TICKED
    assert session.tick() is SessionEvent.TICKED
    assert session.tick() is SessionEvent.QUESTION_EXPIRED

    assert session.position == 1
    assert session.answers[0] is None
    assert session.question_seconds_left is None


def test_back_restarts_previous_question_limit():
    session = QuizSession(_questions(None, 10, 20))
    for _ in range(2):
        session.select_answer(0)
        session.advance()
    assert session.position == 2
    assert session.question_seconds_left == 20

    session.tick()
    assert session.go_back()

    assert session.position == 1
    assert session.question_seconds_left == 10


def test_reset_restores_captured_overall_limit():
    session = QuizSession(_questions(None, None), overall_limit_seconds=30)
    session.tick()
    session.select_answer(1)
    session.advance()
    session.select_answer(2)
    session.advance()
    assert session.is_finished

    session.reset()

    assert session.position == 0
    assert session.answers == (None, None)
    assert not session.is_finished
    assert session.quiz_seconds_left == 30


def test_advance_requires_an_answer():
    session = QuizSession(_questions(None, None))

    assert not session.advance()
    assert session.position == 0

    session.select_answer(2)
    assert session.advance()
    assert session.position == 1


def test_advance_on_last_question_finishes_without_moving():
    session = QuizSession(_questions(None))
    session.select_answer(0)

    assert session.advance()
    assert session.is_finished
    assert session.position == 0
    assert not session.advance()


def test_reselecting_replaces_answer():
    session = QuizSession(_questions(None))
    session.select_answer(0)
    session.select_answer(3)
    assert session.get_selected_option() == 3


def test_select_answer_rejects_out_of_range_index():
    session = QuizSession(_questions(None))
    with pytest.raises(ValueError):
        session.select_answer(4)
    with pytest.raises(ValueError):
        session.select_answer(-1)


def test_actions_are_rejected_once_finished():
    session = QuizSession(_questions(None), overall_limit_seconds=1)
    assert session.tick() is SessionEvent.QUIZ_EXPIRED

    assert not session.select_answer(0)
    assert not session.go_back()
    assert not session.jump_to(0)
    assert session.tick() is SessionEvent.IGNORED


def test_untimed_quiz_never_finishes_from_clock():
    session = QuizSession(_questions(None, None))
    for _ in range(100):
        assert session.tick() is SessionEvent.TICKED
    assert not session.is_finished
    assert session.quiz_seconds_left is None
    assert session.position == 0


def test_stale_tick_only_counts_down_quiz_timer():
    session = QuizSession(_questions(2, 2), overall_limit_seconds=60)
    stamp = session.stamp()
    session.select_answer(0)
    session.advance()

    assert session.tick(stamp) is SessionEvent.STALE
    assert session.position == 1
    assert session.question_seconds_left == 2
    assert session.quiz_seconds_left == 59


def test_tick_from_previous_attempt_is_ignored():
    session = QuizSession(_questions(None), overall_limit_seconds=10)
    stamp = session.stamp()
    session.reset()

    assert session.tick(stamp) is SessionEvent.IGNORED
    assert session.quiz_seconds_left == 10


def test_jump_to_visited_question_only():
    session = QuizSession(_questions(None, 5, None))
    session.select_answer(0)
    session.advance()
    session.select_answer(1)
    session.advance()

    assert not session.jump_to(3)
    assert session.jump_to(1)
    assert session.position == 1
    assert session.question_seconds_left == 5
    assert session.get_selected_option() == 1


def test_expiry_on_last_question_finishes():
    session = QuizSession(_questions(1))
    assert session.tick() is SessionEvent.QUESTION_EXPIRED
    assert session.is_finished
    assert session.position == 0


def test_result_details_follow_question_order():
    session = QuizSession(_questions(None, None, scores=[2, 3]))
    session.select_answer(3)
    session.advance()
    session.select_answer(0)
    session.advance()

    result = session.compute_result()
    assert result.score == 2
    assert result.max_score == 5
    assert [detail.is_correct for detail in result.details] == [True, False]
    assert result.recommendations[0].question_text == "Question 1"
    assert result.details[1].chosen_index == 0


def test_zero_limits_mean_untimed():
    assert normalize_time_limit(0) is None
    assert normalize_time_limit(None) is None
    assert normalize_time_limit(15) == 15
    with pytest.raises(ValueError):
        normalize_time_limit(-1)

    session = QuizSession(_questions(0), overall_limit_seconds=0)
    assert session.quiz_seconds_left is None
    assert session.question_seconds_left is None


def test_session_needs_questions():
    with pytest.raises(ValueError):
        QuizSession([])


def test_countdown_stops_at_zero():
    countdown = Countdown(limit_seconds=1)
    assert not countdown.active
    countdown.restart()
    assert countdown.tick()
    assert countdown.remaining_seconds == 0
    countdown.clear()
    assert not countdown.tick()


def test_stamp_changes_on_navigation():
    session = QuizSession(_questions(None, None))
    first = session.stamp()
    session.select_answer(0)
    session.advance()
    assert session.stamp() != first
    assert session.stamp().attempt == first.attempt
    assert isinstance(first, TickStamp)


def test_quiz_expiry_wins_over_question_expiry_on_same_tick():
    session = QuizSession(_questions(2, None), overall_limit_seconds=2)

    assert session.tick() is SessionEvent.TICKED
    assert session.tick() is SessionEvent.QUIZ_EXPIRED

    assert session.is_finished
    assert session.position == 0
    assert session.question_seconds_left is None
    assert session.answers == (None, None)
