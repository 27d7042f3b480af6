from __future__ import annotations

import pytest

from assessment_app.constants.quiz_constants import CSV_COLUMNS
from assessment_app.core.question_exporter import (
    build_csv_template,
    export_questions_csv,
    save_questions_to_file,
)
from assessment_app.core.question_importer import (
    QuestionImportError,
    load_questions_from_csv,
    load_questions_from_file,
)
from tests.conftest import make_question

HEADER = ",".join(CSV_COLUMNS)


def test_template_imports_cleanly():
    imported = load_questions_from_csv(build_csv_template())

    assert len(imported.questions) == 1
    question = imported.questions[0]
    assert question.category == "HSSE"
    assert question.correct_option_index == 3
    assert question.time_limit_seconds == 30
    assert question.recommendation == "Use PPE for safety"


def test_defaults_for_optional_columns():
    text = "category,question,option1,option2,option3,option4\nGeneral,Pick one,a,b,c,d\n"
    question = load_questions_from_csv(text).questions[0]

    assert question.correct_option_index == 0
    assert question.score == 1
    assert question.time_limit_seconds is None
    assert question.level == ""


def test_bom_and_blank_rows_are_tolerated():
    text = "\ufeff" + HEADER + "\n\n" + "HSSE,Q,a,b,c,d,1,Hard,2,Read the manual,\n,,,,,,,,,,\n"
    imported = load_questions_from_csv(text, source_name="bank.csv")

    assert imported.source_name == "bank.csv"
    assert len(imported.questions) == 1
    assert imported.questions[0].score == 2


@pytest.mark.parametrize(
    ("row", "message"),
    [
        ("HSSE,Q,a,b,c,d,9,,,,", "Row 2: correct_option"),
        ("HSSE,Q,a,b,c,d,x,,,,", "Row 2: correct_option must be an integer"),
        ("HSSE,Q,a,,c,d,0,,,,", "Row 2: all four options"),
        (",Q,a,b,c,d,0,,,,", "Row 2: category"),
        ("HSSE,Q,a,b,c,d,0,,0,,", "Row 2: score"),
    ],
)
def test_invalid_rows_report_row_number(row, message):
    with pytest.raises(QuestionImportError, match=message):
        load_questions_from_csv(HEADER + "\n" + row + "\n")


def test_missing_columns_are_reported():
    with pytest.raises(QuestionImportError, match="Missing column"):
        load_questions_from_csv("question,option1\nQ,a\n")


def test_empty_file_is_rejected():
    with pytest.raises(QuestionImportError):
        load_questions_from_csv("")
    with pytest.raises(QuestionImportError):
        load_questions_from_csv(HEADER + "\n")


def test_export_writes_one_row_per_question():
    questions = [
        make_question('Say "hi", please', time_limit=15),
        make_question("Untimed"),
    ]
    document = export_questions_csv(questions)

    lines = document.strip().split("\n")
    assert lines[0] == HEADER
    assert len(lines) == 3
    reimported = load_questions_from_csv(document).questions
    assert reimported[0].question_text == 'Say "hi", please'
    assert reimported[0].time_limit_seconds == 15
    assert reimported[1].time_limit_seconds is None


def test_save_without_questions_writes_template(tmp_path):
    target = tmp_path / "nested" / "template.csv"
    save_questions_to_file(target)

    assert target.read_text(encoding="utf-8") == build_csv_template()
    assert len(load_questions_from_file(target).questions) == 1
