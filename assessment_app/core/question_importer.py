"""Utilities for importing questions from a CSV file.

Expected header (one question per row):

    category,question,option1,option2,option3,option4,correct_option,level,score,recommendation,question_time_limit

Example:

    HSSE,What is PPE?,Gloves,Helmet,Glasses,All of these,3,Easy,1,"Use PPE for safety",30

``correct_option`` counts from 0. Empty ``correct_option`` defaults to the
first option, empty ``score`` to 1 and an empty ``question_time_limit`` leaves
the question untimed.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from pathlib import Path

from assessment_app.constants.quiz_constants import CSV_COLUMNS, DEFAULT_QUESTION_SCORE
from assessment_app.core.models import Question


class QuestionImportError(Exception):
    """Raised when a CSV file cannot be turned into questions."""


@dataclass(slots=True)
class ImportedQuestions:
    """Container for the questions parsed from one CSV source."""

    source_name: str
    questions: list[Question]


_OPTION_COLUMNS = ("option1", "option2", "option3", "option4")
_REQUIRED_COLUMNS = ("category", "question", *_OPTION_COLUMNS)


def load_questions_from_file(file_path: Path) -> ImportedQuestions:
    text = file_path.read_text(encoding="utf-8-sig")
    return load_questions_from_csv(text, source_name=file_path.name)


def load_questions_from_csv(text: str, source_name: str = "upload.csv") -> ImportedQuestions:
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    if reader.fieldnames is None:
        raise QuestionImportError("The file is empty or is not a valid CSV file.")

    header = {name.strip() for name in reader.fieldnames if name}
    missing = [column for column in _REQUIRED_COLUMNS if column not in header]
    if missing:
        raise QuestionImportError(
            f"Missing column(s): {', '.join(missing)}. Expected: {','.join(CSV_COLUMNS)}"
        )

    questions: list[Question] = []
    # Row 1 is the header.
    for row_number, raw_row in enumerate(reader, start=2):
        row = {(key or "").strip(): (value or "").strip() for key, value in raw_row.items() if key}
        if not any(row.values()):
            continue
        questions.append(_parse_row(row, row_number))

    if not questions:
        raise QuestionImportError("The file is empty or is not a valid CSV file.")
    return ImportedQuestions(source_name=source_name, questions=questions)


def _parse_row(row: dict[str, str], row_number: int) -> Question:
    category = row.get("category", "")
    if not category:
        raise QuestionImportError(f"Row {row_number}: category is missing.")

    question_text = row.get("question", "")
    if not question_text:
        raise QuestionImportError(f"Row {row_number}: question text is missing.")

    options = [row.get(column, "") for column in _OPTION_COLUMNS]
    if any(not option for option in options):
        raise QuestionImportError(f"Row {row_number}: all four options are required.")

    correct_option = _parse_int(row.get("correct_option", ""), "correct_option", row_number, default=0)
    if not 0 <= correct_option < len(options):
        raise QuestionImportError(
            f"Row {row_number}: correct_option must be between 0 and {len(options) - 1}."
        )

    score = _parse_int(row.get("score", ""), "score", row_number, default=DEFAULT_QUESTION_SCORE)
    if score <= 0:
        raise QuestionImportError(f"Row {row_number}: score must be a positive integer.")

    time_limit = _parse_int(row.get("question_time_limit", ""), "question_time_limit", row_number, default=None)
    if time_limit is not None and time_limit < 0:
        raise QuestionImportError(f"Row {row_number}: question_time_limit must not be negative.")

    return Question(
        id=0,  # assigned by the question bank
        category=category,
        question_text=question_text,
        options=options,
        correct_option_index=correct_option,
        level=row.get("level", ""),
        score=score,
        recommendation=row.get("recommendation", ""),
        time_limit_seconds=time_limit or None,
    )


def _parse_int(raw_value: str, column: str, row_number: int, default: int | None) -> int | None:
    if not raw_value:
        return default
    try:
        return int(raw_value)
    except ValueError as exc:
        raise QuestionImportError(f"Row {row_number}: {column} must be an integer, got '{raw_value}'.") from exc
