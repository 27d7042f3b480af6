from __future__ import annotations

from dataclasses import replace

import pytest

from assessment_app.core.services.question_bank import QuestionBank
from tests.conftest import make_question


def test_add_assigns_ids_and_normalizes_fields():
    bank = QuestionBank()
    stored = bank.add(replace(make_question("  What is PPE?  "), category=" HSSE ", time_limit_seconds=0))

    assert stored.id == 1
    assert stored.question_text == "What is PPE?"
    assert stored.category == "HSSE"
    assert stored.time_limit_seconds is None
    assert bank.get(1) is stored


def test_list_keeps_creation_order():
    bank = QuestionBank()
    for text in ("first", "second", "third"):
        bank.add(make_question(text))
    assert [question.question_text for question in bank.list()] == ["first", "second", "third"]


@pytest.mark.parametrize(
    "changes",
    [
        {"options": ["a", "b", "c"]},
        {"options": ["a", "b", "c", " "]},
        {"correct_option_index": 4},
        {"question_text": "   "},
        {"category": ""},
        {"score": 0},
        {"time_limit_seconds": -5},
    ],
)
def test_add_rejects_invalid_questions(changes):
    bank = QuestionBank()
    with pytest.raises(ValueError):
        bank.add(replace(make_question(), **changes))
    assert bank.count() == 0


def test_add_many_is_all_or_nothing():
    bank = QuestionBank()
    with pytest.raises(ValueError):
        bank.add_many([make_question("ok"), replace(make_question("bad"), score=-1)])
    assert bank.count() == 0

    added = bank.add_many([make_question("one"), make_question("two")])
    assert [question.id for question in added] == [1, 2]
    assert [question.question_text for question in bank.list()] == ["one", "two"]


def test_update_keeps_identity_and_creation_time():
    bank = QuestionBank()
    original = bank.add(make_question("before"))

    updated = bank.update(original.id, make_question("after", correct=0))

    assert updated.id == original.id
    assert updated.created_at == original.created_at
    assert bank.get(original.id).question_text == "after"


def test_missing_questions_raise_lookup_error():
    bank = QuestionBank()
    with pytest.raises(LookupError):
        bank.get(7)
    with pytest.raises(LookupError):
        bank.delete(7)
    with pytest.raises(LookupError):
        bank.update(7, make_question())
