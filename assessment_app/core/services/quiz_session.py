"""Service holding the in-memory state of one quiz attempt.

The session is driven by discrete user actions (select, advance, back) and by
a one-second clock signal delivered through :meth:`QuizSession.tick`. Two
countdowns run side by side: one for the whole attempt and one for the current
question. The clock never owns per-question timers; instead every scheduled
tick carries a :class:`TickStamp` and the session drops the parts of a tick
that were scheduled for a question (or an attempt) that is no longer current.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Sequence

from assessment_app.core.models import Question, ResultDetail


class SessionEvent(Enum):
    """Outcome of a single clock tick."""

    TICKED = auto()
    STALE = auto()
    IGNORED = auto()
    QUESTION_EXPIRED = auto()
    QUIZ_EXPIRED = auto()


@dataclass(slots=True, frozen=True)
class TickStamp:
    """Identifies the attempt and question a tick was scheduled for."""

    attempt: int
    generation: int


@dataclass(slots=True)
class Countdown:
    """Remaining-seconds counter with an optional limit."""

    limit_seconds: int | None = None
    remaining_seconds: int | None = None

    @property
    def active(self) -> bool:
        """True while a limit is being counted down."""
        return self.remaining_seconds is not None

    def restart(self) -> None:
        """Start over from the limit; an unset limit leaves the countdown inactive."""
        self.remaining_seconds = self.limit_seconds

    def clear(self) -> None:
        self.remaining_seconds = None

    def tick(self) -> bool:
        """Count down one second and report whether the countdown ran out."""
        if self.remaining_seconds is None:
            return False
        self.remaining_seconds = max(0, self.remaining_seconds - 1)
        return self.remaining_seconds == 0


@dataclass(slots=True, frozen=True)
class AttemptResult:
    """Score and per-question details of an attempt, in question order."""

    score: int
    max_score: int
    details: tuple[ResultDetail, ...]
    finished: bool

    @property
    def recommendations(self) -> list[ResultDetail]:
        return [detail for detail in self.details if not detail.is_correct]


def normalize_time_limit(seconds: int | None) -> int | None:
    """Map a configured limit to a positive number of seconds or ``None``.

    Zero is treated as "no limit", matching how unset limits are stored.
    """
    if seconds is None:
        return None
    if isinstance(seconds, bool) or not isinstance(seconds, int):
        raise ValueError("Time limit must be provided as an integer number of seconds.")
    if seconds < 0:
        raise ValueError("Time limit must not be negative.")
    return seconds or None


class QuizSession:
    """Drives one user's progression through an ordered list of questions."""

    def __init__(
        self,
        questions: Sequence[Question],
        overall_limit_seconds: int | None = None,
        *,
        quiz_id: int | None = None,
    ) -> None:
        if not questions:
            raise ValueError("A quiz session needs at least one question.")
        self._questions: tuple[Question, ...] = tuple(questions)
        self._overall_limit = normalize_time_limit(overall_limit_seconds)
        self._quiz_id = quiz_id
        self._quiz_timer = Countdown(self._overall_limit)
        self._question_timer = Countdown()
        self._attempt: int = 0
        self._generation: int = 0
        self._position: int = 0
        self._answers: list[int | None] = []
        self._finished: bool = False
        self._start_attempt()

    # --- State accessors ---

    @property
    def quiz_id(self) -> int | None:
        return self._quiz_id

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def position(self) -> int:
        return self._position

    @property
    def answers(self) -> tuple[int | None, ...]:
        return tuple(self._answers)

    @property
    def is_finished(self) -> bool:
        return self._finished

    @property
    def overall_limit_seconds(self) -> int | None:
        return self._overall_limit

    @property
    def quiz_seconds_left(self) -> int | None:
        """Seconds left for the whole attempt, or None when untimed."""
        return self._quiz_timer.remaining_seconds

    @property
    def question_seconds_left(self) -> int | None:
        """Seconds left on the current question, or None when untimed or finished."""
        return self._question_timer.remaining_seconds

    @property
    def is_last_question(self) -> bool:
        """True when advancing from here finishes the attempt."""
        return self._position == len(self._questions) - 1

    def get_current_question(self) -> Question:
        return self._questions[self._position]

    def get_selected_option(self) -> int | None:
        """Return the recorded choice for the current question, or None."""
        return self._answers[self._position]

    def stamp(self) -> TickStamp:
        """Tag for a tick scheduled now; stale once the question or attempt changes."""
        return TickStamp(attempt=self._attempt, generation=self._generation)

    # --- User actions ---

    def select_answer(self, option_index: int) -> bool:
        """Record a choice for the current question. Re-selecting replaces it."""
        if self._finished:
            return False
        option_count = len(self.get_current_question().options)
        if not 0 <= option_index < option_count:
            raise ValueError(f"Option index must be between 0 and {option_count - 1}.")
        self._answers[self._position] = option_index
        return True

    def advance(self) -> bool:
        """Manual Next/Finish. Rejected while the current question is unanswered."""
        if self._finished or self._answers[self._position] is None:
            return False
        self._step_forward()
        return True

    def go_back(self) -> bool:
        if self._finished or self._position == 0:
            return False
        self._move_to(self._position - 1)
        return True

    def jump_to(self, index: int) -> bool:
        """Return to an already visited question."""
        if self._finished or not 0 <= index <= self._position:
            return False
        if index != self._position:
            self._move_to(index)
        return True

    def reset(self) -> None:
        """Start the attempt over with the limits captured at construction."""
        self._attempt += 1
        self._start_attempt()

    # --- Clock ---

    def tick(self, stamp: TickStamp | None = None) -> SessionEvent:
        """Apply one elapsed second.

        ``stamp`` is the value of :meth:`stamp` at the time the tick was
        scheduled; ``None`` means "the current question".
        """
        if self._finished:
            return SessionEvent.IGNORED
        if stamp is not None and stamp.attempt != self._attempt:
            return SessionEvent.IGNORED

        if self._quiz_timer.tick():
            self._finish()
            return SessionEvent.QUIZ_EXPIRED

        if stamp is not None and stamp.generation != self._generation:
            return SessionEvent.STALE

        if self._question_timer.tick():
            # Expiry bypasses the "must be answered" rule of advance().
            self._step_forward()
            return SessionEvent.QUESTION_EXPIRED
        return SessionEvent.TICKED

    # --- Scoring ---

    def compute_result(self) -> AttemptResult:
        details = []
        score = 0
        for question, chosen in zip(self._questions, self._answers):
            is_correct = chosen is not None and chosen == question.correct_option_index
            if is_correct:
                score += question.score
            details.append(
                ResultDetail(
                    question_id=question.id,
                    question_text=question.question_text,
                    options=tuple(question.options),
                    chosen_index=chosen,
                    correct_index=question.correct_option_index,
                    is_correct=is_correct,
                    recommendation=question.recommendation,
                )
            )
        return AttemptResult(
            score=score,
            max_score=sum(question.score for question in self._questions),
            details=tuple(details),
            finished=self._finished,
        )

    # --- Internals ---

    def _start_attempt(self) -> None:
        self._position = 0
        self._answers = [None] * len(self._questions)
        self._finished = False
        self._quiz_timer.restart()
        self._enter_question()

    def _step_forward(self) -> None:
        if self.is_last_question:
            self._finish()
        else:
            self._move_to(self._position + 1)

    def _move_to(self, index: int) -> None:
        self._position = index
        self._enter_question()

    def _enter_question(self) -> None:
        self._generation += 1
        self._question_timer = Countdown(normalize_time_limit(self.get_current_question().time_limit_seconds))
        self._question_timer.restart()

    def _finish(self) -> None:
        self._finished = True
        self._generation += 1
        self._question_timer.clear()
