"""Service for managing named quizzes built from the question bank."""

from __future__ import annotations

from assessment_app.core.models import Quiz
from assessment_app.core.services.quiz_session import normalize_time_limit


class QuizCatalog:
    """Keeps quizzes and the ordered question ids each one is made of."""

    def __init__(self) -> None:
        self._quizzes: dict[int, Quiz] = {}
        self._quiz_counter: int = 0

    def create(self, name: str, description: str = "") -> Quiz:
        cleaned = name.strip()
        if not cleaned:
            raise ValueError("Quiz name must not be empty.")
        self._quiz_counter += 1
        quiz = Quiz(id=self._quiz_counter, name=cleaned, description=description.strip())
        self._quizzes[quiz.id] = quiz
        return quiz

    def get(self, quiz_id: int) -> Quiz:
        try:
            return self._quizzes[quiz_id]
        except KeyError:
            raise LookupError(f"Quiz {quiz_id} does not exist.") from None

    def list(self) -> list[Quiz]:
        """Return quizzes, newest first."""
        return sorted(self._quizzes.values(), key=lambda q: (q.created_at, q.id), reverse=True)

    def update(
        self,
        quiz_id: int,
        name: str,
        description: str = "",
        time_limit_seconds: int | None = None,
    ) -> Quiz:
        quiz = self.get(quiz_id)
        cleaned = name.strip()
        if not cleaned:
            raise ValueError("Quiz name must not be empty.")
        quiz.name = cleaned
        quiz.description = description.strip()
        quiz.time_limit_seconds = normalize_time_limit(time_limit_seconds)
        return quiz

    def delete(self, quiz_id: int) -> None:
        self.get(quiz_id)
        del self._quizzes[quiz_id]

    def toggle_question(self, quiz_id: int, question_id: int) -> bool:
        """Add the question at the end, or remove it. Returns True when added."""
        quiz = self.get(quiz_id)
        if question_id in quiz.question_ids:
            quiz.question_ids.remove(question_id)
            return False
        quiz.question_ids.append(question_id)
        return True

    def move_question(self, quiz_id: int, question_id: int, offset: int) -> bool:
        """Swap a question with its neighbour ``offset`` places away."""
        quiz = self.get(quiz_id)
        if question_id not in quiz.question_ids:
            raise LookupError(f"Question {question_id} is not part of quiz {quiz_id}.")
        index = quiz.question_ids.index(question_id)
        target = index + offset
        if not 0 <= target < len(quiz.question_ids):
            return False
        ids = quiz.question_ids
        ids[index], ids[target] = ids[target], ids[index]
        return True

    def forget_question(self, question_id: int) -> None:
        for quiz in self._quizzes.values():
            if question_id in quiz.question_ids:
                quiz.question_ids.remove(question_id)
