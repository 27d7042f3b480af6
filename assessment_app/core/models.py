"""Domain models for the assessment portal."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class Question:
    """Multiple-choice question with exactly four options."""

    id: int
    category: str
    question_text: str
    options: list[str]
    correct_option_index: int
    level: str = ""
    score: int = 1
    recommendation: str = ""
    image_url: str | None = None
    time_limit_seconds: int | None = None  # None means untimed
    created_at: datetime = field(default_factory=utc_now)


@dataclass(slots=True)
class Quiz:
    """Named, ordered selection of questions from the question bank."""

    id: int
    name: str
    description: str = ""
    time_limit_seconds: int | None = None  # overrides the global limit when set
    question_ids: list[int] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)


@dataclass(slots=True)
class QuizSettings:
    """Global configuration record read when a quiz session starts."""

    quiz_time_limit_seconds: int | None = None


@dataclass(slots=True, frozen=True)
class ResultDetail:
    """Outcome of a single question inside a finished attempt."""

    question_id: int
    question_text: str
    options: tuple[str, ...]
    chosen_index: int | None
    correct_index: int
    is_correct: bool
    recommendation: str

    def to_dict(self) -> dict[str, object]:
        return {
            "question_id": self.question_id,
            "question": self.question_text,
            "options": list(self.options),
            "user_answer": self.chosen_index,
            "correct": self.correct_index,
            "is_correct": self.is_correct,
            "recommendation": self.recommendation,
        }


@dataclass(slots=True, frozen=True)
class ResultRecord:
    """Saved outcome of one attempt, owned by the result store."""

    id: str
    user_id: str
    score: int
    max_score: int
    answers: tuple[ResultDetail, ...]
    quiz_id: int | None = None
    created_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "quiz_id": self.quiz_id,
            "score": self.score,
            "total": self.max_score,
            "answers": [detail.to_dict() for detail in self.answers],
            "created_at": self.created_at.isoformat(),
        }


@dataclass(slots=True)
class UserAccount:
    """Registered user; ``role`` is either ``"admin"`` or ``"user"``."""

    id: str
    email: str
    role: str
    password_hash: str = field(repr=False, default="")
    created_at: datetime = field(default_factory=utc_now)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
