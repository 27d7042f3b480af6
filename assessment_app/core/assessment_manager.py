"""Business logic for the assessment portal shared between UI and API."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from threading import Lock

from assessment_app.core.image_store import ImageStore
from assessment_app.core.models import Question, Quiz, QuizSettings, ResultRecord, UserAccount
from assessment_app.core.question_exporter import build_csv_template, export_questions_csv
from assessment_app.core.question_importer import ImportedQuestions, QuestionImportError
from assessment_app.core.services.account_registry import AccountRegistry
from assessment_app.core.services.question_bank import QuestionBank
from assessment_app.core.services.quiz_catalog import QuizCatalog
from assessment_app.core.services.quiz_session import (
    AttemptResult,
    QuizSession,
    SessionEvent,
    TickStamp,
    normalize_time_limit,
)
from assessment_app.core.services.result_store import ResultStore

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class SessionSnapshot:
    """Read-only view of a session taken under the manager lock."""

    quiz_id: int | None
    position: int
    question_count: int
    question: Question
    selected_option_index: int | None
    answered: tuple[bool, ...]
    quiz_seconds_left: int | None
    question_seconds_left: int | None
    finished: bool
    generation: int


@dataclass(slots=True, frozen=True)
class QuizSummary:
    """Quiz metadata together with the number of questions it contains."""

    quiz: Quiz
    question_count: int


class AssessmentManager:
    """Facade for the question bank, quiz catalog, accounts, results and live sessions."""

    def __init__(
        self,
        result_archive_path: Path | None = None,
        image_store: ImageStore | None = None,
        accounts: AccountRegistry | None = None,
    ) -> None:
        self._lock = Lock()

        # Services
        self._questions = QuestionBank()
        self._catalog = QuizCatalog()
        self._results = ResultStore(result_archive_path)
        self._accounts = accounts or AccountRegistry()
        self._settings = QuizSettings()
        self._sessions: dict[str, QuizSession] = {}
        self.image_store = image_store

    # --- Question Bank Delegation ---

    def get_questions(self) -> list[Question]:
        with self._lock:
            return self._questions.list()

    def get_question(self, question_id: int) -> Question:
        with self._lock:
            return self._questions.get(question_id)

    def get_question_count(self) -> int:
        with self._lock:
            return self._questions.count()

    def add_question(self, question: Question) -> Question:
        with self._lock:
            return self._questions.add(question)

    def update_question(self, question_id: int, question: Question) -> Question:
        with self._lock:
            return self._questions.update(question_id, question)

    def delete_question(self, question_id: int) -> None:
        with self._lock:
            self._questions.delete(question_id)
            self._catalog.forget_question(question_id)

    def import_questions(self, imported: ImportedQuestions) -> list[Question]:
        """Store every imported question, or none of them."""
        with self._lock:
            try:
                added = self._questions.add_many(imported.questions)
            except ValueError as exc:
                raise QuestionImportError(str(exc)) from exc
        logger.info("Imported %d question(s) from %s", len(added), imported.source_name)
        return added

    def export_questions_csv(self) -> str:
        with self._lock:
            return export_questions_csv(self._questions.list())

    @staticmethod
    def get_csv_template() -> str:
        return build_csv_template()

    # --- Settings ---

    def get_quiz_time_limit(self) -> int | None:
        with self._lock:
            return self._settings.quiz_time_limit_seconds

    def set_quiz_time_limit(self, seconds: int | None) -> None:
        with self._lock:
            self._settings.quiz_time_limit_seconds = normalize_time_limit(seconds)

    # --- Quiz Catalog Delegation ---

    def create_quiz(self, name: str, description: str = "") -> Quiz:
        with self._lock:
            return self._catalog.create(name, description)

    def get_quiz(self, quiz_id: int) -> Quiz:
        with self._lock:
            return self._catalog.get(quiz_id)

    def list_quizzes(self) -> list[QuizSummary]:
        with self._lock:
            return [
                QuizSummary(quiz=quiz, question_count=len(quiz.question_ids))
                for quiz in self._catalog.list()
            ]

    def update_quiz(
        self,
        quiz_id: int,
        name: str,
        description: str = "",
        time_limit_seconds: int | None = None,
    ) -> Quiz:
        with self._lock:
            return self._catalog.update(quiz_id, name, description, time_limit_seconds)

    def delete_quiz(self, quiz_id: int) -> None:
        with self._lock:
            self._catalog.delete(quiz_id)

    def toggle_quiz_question(self, quiz_id: int, question_id: int) -> bool:
        with self._lock:
            self._questions.get(question_id)
            return self._catalog.toggle_question(quiz_id, question_id)

    def move_quiz_question(self, quiz_id: int, question_id: int, offset: int) -> bool:
        with self._lock:
            return self._catalog.move_question(quiz_id, question_id, offset)

    def get_quiz_questions(self, quiz_id: int) -> list[Question]:
        with self._lock:
            return self._resolve_quiz_questions(self._catalog.get(quiz_id))

    # --- Accounts Delegation ---

    def sign_up(self, email: str, password: str) -> UserAccount:
        with self._lock:
            account = self._accounts.sign_up(email, password)
        logger.info("Registered %s with role %s", account.email, account.role)
        return account

    def sign_in(self, email: str, password: str) -> tuple[UserAccount, str]:
        with self._lock:
            return self._accounts.sign_in(email, password)

    def sign_out(self, token: str) -> None:
        with self._lock:
            self._accounts.sign_out(token)

    def resolve_user(self, token: str | None) -> UserAccount | None:
        with self._lock:
            return self._accounts.resolve(token)

    def get_user(self, user_id: str) -> UserAccount:
        with self._lock:
            return self._accounts.get(user_id)

    def set_user_role(self, user_id: str, role: str) -> UserAccount:
        with self._lock:
            return self._accounts.set_role(user_id, role)

    # --- Results ---

    def list_results_for_user(self, user_id: str) -> list[ResultRecord]:
        with self._lock:
            return self._results.list_for_user(user_id)

    def list_all_results(self) -> list[tuple[ResultRecord, str]]:
        """Return every result paired with the e-mail of its owner."""
        with self._lock:
            rows = []
            for record in self._results.list_all():
                try:
                    email = self._accounts.get(record.user_id).email
                except LookupError:
                    email = record.user_id
                rows.append((record, email))
            return rows

    # --- Quiz Session Delegation ---

    def start_session(self, user_id: str, quiz_id: int | None = None) -> SessionSnapshot:
        """Snapshot the questions and time limit and start a fresh attempt."""
        with self._lock:
            overall_limit = self._settings.quiz_time_limit_seconds
            if quiz_id is None:
                questions = self._questions.list()
            else:
                quiz = self._catalog.get(quiz_id)
                questions = self._resolve_quiz_questions(quiz)
                if quiz.time_limit_seconds is not None:
                    overall_limit = quiz.time_limit_seconds
            if not questions:
                raise LookupError("No questions found.")
            session = QuizSession(questions, overall_limit, quiz_id=quiz_id)
            self._sessions[user_id] = session
            logger.info(
                "User %s started quiz %s with %d question(s), limit %s",
                user_id,
                quiz_id if quiz_id is not None else "<all>",
                len(questions),
                overall_limit,
            )
            return self._snapshot(session)

    def has_session(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._sessions

    def get_session(self, user_id: str) -> SessionSnapshot:
        with self._lock:
            return self._snapshot(self._require_session(user_id))

    def select_answer(self, user_id: str, option_index: int) -> SessionSnapshot:
        with self._lock:
            session = self._require_session(user_id)
            if not session.select_answer(option_index):
                raise RuntimeError("The quiz is already finished.")
            return self._snapshot(session)

    def advance_session(self, user_id: str) -> tuple[bool, SessionSnapshot]:
        """Manual Next/Finish. The flag is False when no answer was selected."""
        with self._lock:
            session = self._require_session(user_id)
            accepted = session.advance()
            if accepted and session.is_finished:
                logger.info("User %s finished the quiz", user_id)
            return accepted, self._snapshot(session)

    def go_back(self, user_id: str) -> tuple[bool, SessionSnapshot]:
        with self._lock:
            session = self._require_session(user_id)
            return session.go_back(), self._snapshot(session)

    def jump_to(self, user_id: str, index: int) -> tuple[bool, SessionSnapshot]:
        with self._lock:
            session = self._require_session(user_id)
            return session.jump_to(index), self._snapshot(session)

    def reset_session(self, user_id: str) -> SessionSnapshot:
        with self._lock:
            session = self._require_session(user_id)
            session.reset()
            return self._snapshot(session)

    def abandon_session(self, user_id: str) -> None:
        with self._lock:
            self._sessions.pop(user_id, None)

    def compute_session_result(self, user_id: str) -> AttemptResult:
        with self._lock:
            return self._require_session(user_id).compute_result()

    def save_session_result(self, user_id: str) -> ResultRecord:
        """Persist the finished attempt once and discard it.

        A failed write raises ``ResultSaveError`` and keeps the attempt so the
        user can try again.
        """
        with self._lock:
            session = self._require_session(user_id)
            if not session.is_finished:
                raise RuntimeError("Finish the quiz before saving the result.")
            result = session.compute_result()
            record = self._results.save(
                user_id=user_id,
                score=result.score,
                max_score=result.max_score,
                answers=result.details,
                quiz_id=session.quiz_id,
            )
            del self._sessions[user_id]
        logger.info("Saved result %s for user %s (%d/%d)", record.id, user_id, record.score, record.max_score)
        return record

    # --- Clock ---

    def collect_tick_stamps(self) -> dict[str, TickStamp]:
        """Stamp a tick for every session that is still running."""
        with self._lock:
            return {
                user_id: session.stamp()
                for user_id, session in self._sessions.items()
                if not session.is_finished
            }

    def deliver_ticks(self, stamps: dict[str, TickStamp]) -> dict[str, SessionEvent]:
        events: dict[str, SessionEvent] = {}
        with self._lock:
            for user_id, stamp in stamps.items():
                session = self._sessions.get(user_id)
                if session is None:
                    continue
                event = session.tick(stamp)
                events[user_id] = event
                if event is SessionEvent.QUIZ_EXPIRED:
                    logger.info("Quiz time expired for user %s", user_id)
                elif event is SessionEvent.QUESTION_EXPIRED:
                    logger.debug("Question time expired for user %s", user_id)
        return events

    # --- Internals ---

    def _require_session(self, user_id: str) -> QuizSession:
        session = self._sessions.get(user_id)
        if session is None:
            raise LookupError("No quiz in progress. Start a quiz first.")
        return session

    def _resolve_quiz_questions(self, quiz: Quiz) -> list[Question]:
        questions = []
        for question_id in quiz.question_ids:
            try:
                questions.append(self._questions.get(question_id))
            except LookupError:
                continue
        return questions

    @staticmethod
    def _snapshot(session: QuizSession) -> SessionSnapshot:
        return SessionSnapshot(
            quiz_id=session.quiz_id,
            position=session.position,
            question_count=len(session.questions),
            question=session.get_current_question(),
            selected_option_index=session.get_selected_option(),
            answered=tuple(answer is not None for answer in session.answers),
            quiz_seconds_left=session.quiz_seconds_left,
            question_seconds_left=session.question_seconds_left,
            finished=session.is_finished,
            generation=session.stamp().generation,
        )
