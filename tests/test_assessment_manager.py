from __future__ import annotations

import pytest

from assessment_app.core.question_importer import ImportedQuestions, QuestionImportError
from assessment_app.core.services.quiz_session import SessionEvent
from assessment_app.core.services.result_store import ResultSaveError
from tests.conftest import make_question


def _user(manager, email="user@example.com"):
    return manager.sign_up(email, "secret1")


def test_start_session_without_questions_fails(manager):
    user = _user(manager)
    with pytest.raises(LookupError, match="No questions found"):
        manager.start_session(user.id)


def test_quiz_limit_overrides_global_limit(manager):
    user = _user(manager)
    question = manager.add_question(make_question())
    manager.set_quiz_time_limit(600)
    quiz = manager.create_quiz("Short")
    manager.toggle_quiz_question(quiz.id, question.id)

    assert manager.start_session(user.id).quiz_seconds_left == 600

    manager.update_quiz(quiz.id, "Short", "", 60)
    snapshot = manager.start_session(user.id, quiz.id)
    assert snapshot.quiz_id == quiz.id
    assert snapshot.quiz_seconds_left == 60


def test_session_uses_quiz_order(manager):
    user = _user(manager)
    first = manager.add_question(make_question("first"))
    second = manager.add_question(make_question("second"))
    quiz = manager.create_quiz("Ordered")
    manager.toggle_quiz_question(quiz.id, first.id)
    manager.toggle_quiz_question(quiz.id, second.id)
    manager.move_quiz_question(quiz.id, second.id, -1)

    snapshot = manager.start_session(user.id, quiz.id)

    assert snapshot.question.question_text == "second"
    assert snapshot.question_count == 2


def test_full_attempt_is_saved_and_discarded(manager, tmp_path):
    user = _user(manager)
    manager.add_question(make_question("one", score=2))
    manager.add_question(make_question("two"))
    manager.start_session(user.id)

    manager.select_answer(user.id, 3)
    accepted, snapshot = manager.advance_session(user.id)
    assert accepted and snapshot.position == 1
    accepted, _ = manager.advance_session(user.id)
    assert not accepted
    manager.select_answer(user.id, 0)
    accepted, snapshot = manager.advance_session(user.id)
    assert accepted and snapshot.finished

    with pytest.raises(RuntimeError):
        manager.select_answer(user.id, 1)

    record = manager.save_session_result(user.id)

    assert (record.score, record.max_score) == (2, 3)
    assert not manager.has_session(user.id)
    assert manager.list_results_for_user(user.id) == [record]
    assert manager.list_all_results() == [(record, "user@example.com")]
    assert (tmp_path / "results.jsonl").exists()


def test_save_requires_finished_attempt(manager):
    user = _user(manager)
    manager.add_question(make_question())
    manager.start_session(user.id)
    with pytest.raises(RuntimeError):
        manager.save_session_result(user.id)


def test_failed_save_keeps_session_for_retry(manager, tmp_path):
    user = _user(manager)
    manager.add_question(make_question())
    manager.start_session(user.id)
    manager.select_answer(user.id, 3)
    manager.advance_session(user.id)
    (tmp_path / "results.jsonl").mkdir()

    with pytest.raises(ResultSaveError):
        manager.save_session_result(user.id)

    assert manager.has_session(user.id)
    assert manager.compute_session_result(user.id).score == 1


def test_clock_delivers_to_running_sessions_only(manager):
    alice = _user(manager, "alice@example.com")
    bob = _user(manager, "bob@example.com")
    manager.add_question(make_question(time_limit=1))
    manager.add_question(make_question("untimed"))
    manager.start_session(alice.id)
    manager.start_session(bob.id)

    stamps = manager.collect_tick_stamps()
    manager.select_answer(bob.id, 0)
    manager.advance_session(bob.id)
    events = manager.deliver_ticks(stamps)

    assert events[alice.id] is SessionEvent.QUESTION_EXPIRED
    assert events[bob.id] is SessionEvent.STALE
    assert manager.get_session(alice.id).position == 1
    assert manager.get_session(bob.id).position == 1


def test_abandoned_session_is_skipped_by_clock(manager):
    user = _user(manager)
    manager.add_question(make_question())
    manager.start_session(user.id)
    stamps = manager.collect_tick_stamps()
    manager.abandon_session(user.id)

    assert manager.deliver_ticks(stamps) == {}
    with pytest.raises(LookupError):
        manager.get_session(user.id)


def test_delete_question_removes_it_from_quizzes(manager):
    question = manager.add_question(make_question())
    quiz = manager.create_quiz("Quiz")
    manager.toggle_quiz_question(quiz.id, question.id)

    manager.delete_question(question.id)

    assert manager.get_quiz(quiz.id).question_ids == []
    assert manager.list_quizzes()[0].question_count == 0


def test_toggle_unknown_question_fails(manager):
    quiz = manager.create_quiz("Quiz")
    with pytest.raises(LookupError):
        manager.toggle_quiz_question(quiz.id, 42)


def test_import_is_atomic(manager):
    bad = make_question("bad")
    bad.options = ["only", "three", "options"]
    with pytest.raises(QuestionImportError):
        manager.import_questions(ImportedQuestions("bank.csv", [make_question("good"), bad]))
    assert manager.get_question_count() == 0

    added = manager.import_questions(ImportedQuestions("bank.csv", [make_question("good")]))
    assert len(added) == 1


def test_reset_restarts_attempt(manager):
    user = _user(manager)
    manager.add_question(make_question())
    manager.set_quiz_time_limit(30)
    manager.start_session(user.id)
    manager.set_quiz_time_limit(90)
    manager.deliver_ticks(manager.collect_tick_stamps())

    snapshot = manager.reset_session(user.id)

    assert snapshot.quiz_seconds_left == 30
    assert snapshot.answered == (False,)


def test_global_limit_validation(manager):
    manager.set_quiz_time_limit(0)
    assert manager.get_quiz_time_limit() is None
    with pytest.raises(ValueError):
        manager.set_quiz_time_limit(-10)
