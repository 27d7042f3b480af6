"""Utilities for writing questions in the CSV format used for imports."""

from __future__ import annotations

import csv
import io
from pathlib import Path

from assessment_app.constants.quiz_constants import CSV_COLUMNS
from assessment_app.core.models import Question

_TEMPLATE_ROW = (
    "HSSE",
    "What is PPE?",
    "Gloves",
    "Helmet",
    "Glasses",
    "All of these",
    "3",
    "Easy",
    "1",
    "Use PPE for safety",
    "30",
)


def build_csv_template() -> str:
    """Return a CSV document with the header and one example question."""
    return _write_rows([_TEMPLATE_ROW])


def export_questions_csv(questions: list[Question]) -> str:
    return _write_rows(_serialize_question(question) for question in questions)


def save_questions_to_file(file_path: Path, questions: list[Question] | None = None) -> None:
    """Write the questions to disk, or the import template when none are given."""
    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    document = export_questions_csv(questions) if questions else build_csv_template()
    file_path.write_text(document, encoding="utf-8")


def _serialize_question(question: Question) -> tuple[str, ...]:
    options = list(question.options) + [""] * (4 - len(question.options))
    return (
        question.category,
        question.question_text,
        *options[:4],
        str(question.correct_option_index),
        question.level,
        str(question.score),
        question.recommendation,
        "" if question.time_limit_seconds is None else str(question.time_limit_seconds),
    )


def _write_rows(rows) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    writer.writerows(rows)
    return buffer.getvalue()
