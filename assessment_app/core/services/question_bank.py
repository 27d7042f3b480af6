"""Service for managing the collection of assessment questions."""

from __future__ import annotations

from dataclasses import replace

from assessment_app.constants.quiz_constants import OPTION_COUNT
from assessment_app.core.models import Question, utc_now
from assessment_app.core.services.quiz_session import normalize_time_limit


class QuestionBank:
    """Stores questions in creation order and validates every write."""

    def __init__(self) -> None:
        self._questions: dict[int, Question] = {}
        self._question_counter: int = 0

    def list(self) -> list[Question]:
        """Return all questions, oldest first."""
        return sorted(self._questions.values(), key=lambda q: (q.created_at, q.id))

    def count(self) -> int:
        return len(self._questions)

    def get(self, question_id: int) -> Question:
        try:
            return self._questions[question_id]
        except KeyError:
            raise LookupError(f"Question {question_id} does not exist.") from None

    def add(self, question: Question) -> Question:
        prepared = self._prepare_question(question, self._next_question_id())
        self._questions[prepared.id] = prepared
        return prepared

    def add_many(self, questions: list[Question]) -> list[Question]:
        """Add several questions; nothing is stored if any of them is invalid."""
        first_id = self._question_counter + 1
        prepared = [
            self._prepare_question(question, first_id + offset)
            for offset, question in enumerate(questions)
        ]
        # Keep the batch in file order even though it shares one timestamp.
        created_at = utc_now()
        for question in prepared:
            question.created_at = created_at
            self._questions[question.id] = question
        self._question_counter += len(prepared)
        return prepared

    def update(self, question_id: int, question: Question) -> Question:
        existing = self.get(question_id)
        prepared = self._prepare_question(question, existing.id)
        prepared.created_at = existing.created_at
        self._questions[question_id] = prepared
        return prepared

    def delete(self, question_id: int) -> None:
        self.get(question_id)
        del self._questions[question_id]

    def _next_question_id(self) -> int:
        self._question_counter += 1
        return self._question_counter

    def _prepare_question(self, question: Question, question_id: int) -> Question:
        """Validate and normalize a question before storage."""
        options = self._validate_options(question.options)
        if isinstance(question.correct_option_index, bool) or not isinstance(question.correct_option_index, int):
            raise ValueError("Correct option index must be an integer.")
        if not 0 <= question.correct_option_index < len(options):
            raise ValueError(f"Correct option index must be between 0 and {len(options) - 1}.")

        cleaned_text = question.question_text.strip()
        if not cleaned_text:
            raise ValueError("Question text must not be empty.")
        category = question.category.strip()
        if not category:
            raise ValueError("Category must not be empty.")
        if isinstance(question.score, bool) or not isinstance(question.score, int) or question.score <= 0:
            raise ValueError("Score must be a positive integer.")

        return replace(
            question,
            id=question_id,
            category=category,
            question_text=cleaned_text,
            options=options,
            level=question.level.strip(),
            recommendation=question.recommendation.strip(),
            image_url=(question.image_url or "").strip() or None,
            time_limit_seconds=normalize_time_limit(question.time_limit_seconds),
            created_at=utc_now(),
        )

    @staticmethod
    def _validate_options(options: list[str]) -> list[str]:
        if len(options) != OPTION_COUNT:
            raise ValueError(f"Each question must have exactly {OPTION_COUNT} options.")
        cleaned = [option.strip() for option in options]
        if any(not option for option in cleaned):
            raise ValueError("Option text cannot be empty.")
        return cleaned
