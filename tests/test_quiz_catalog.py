from __future__ import annotations

import pytest

from assessment_app.core.services.quiz_catalog import QuizCatalog


def test_create_and_update_quiz():
    catalog = QuizCatalog()
    quiz = catalog.create("  Safety basics ", "Intro")

    assert quiz.name == "Safety basics"
    updated = catalog.update(quiz.id, "Safety", "", time_limit_seconds=0)
    assert updated.time_limit_seconds is None
    assert catalog.update(quiz.id, "Safety", "", 120).time_limit_seconds == 120


def test_empty_name_is_rejected():
    catalog = QuizCatalog()
    with pytest.raises(ValueError):
        catalog.create("   ")


def test_toggle_adds_then_removes():
    catalog = QuizCatalog()
    quiz = catalog.create("Quiz")

    assert catalog.toggle_question(quiz.id, 3) is True
    assert catalog.toggle_question(quiz.id, 5) is True
    assert catalog.get(quiz.id).question_ids == [3, 5]
    assert catalog.toggle_question(quiz.id, 3) is False
    assert catalog.get(quiz.id).question_ids == [5]


def test_move_question_swaps_neighbours():
    catalog = QuizCatalog()
    quiz = catalog.create("Quiz")
    for question_id in (1, 2, 3):
        catalog.toggle_question(quiz.id, question_id)

    assert catalog.move_question(quiz.id, 3, -1)
    assert catalog.get(quiz.id).question_ids == [1, 3, 2]
    assert not catalog.move_question(quiz.id, 1, -1)
    with pytest.raises(LookupError):
        catalog.move_question(quiz.id, 9, 1)


def test_forget_question_removes_it_everywhere():
    catalog = QuizCatalog()
    first = catalog.create("A")
    second = catalog.create("B")
    catalog.toggle_question(first.id, 4)
    catalog.toggle_question(second.id, 4)

    catalog.forget_question(4)

    assert catalog.get(first.id).question_ids == []
    assert catalog.get(second.id).question_ids == []


def test_delete_and_lookup():
    catalog = QuizCatalog()
    quiz = catalog.create("Quiz")
    catalog.delete(quiz.id)
    with pytest.raises(LookupError):
        catalog.get(quiz.id)
