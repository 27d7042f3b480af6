"""Administrator endpoints for managing questions, quizzes, settings and results."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from assessment_app.core.assessment_manager import AssessmentManager
from assessment_app.core.models import Question, Quiz, UserAccount
from assessment_app.core.question_importer import QuestionImportError, load_questions_from_csv

logger = logging.getLogger(__name__)


class QuestionPayload(BaseModel):
    """Payload schema for creating or replacing a question."""

    category: str
    question: str
    options: list[str]
    correct_option: int = 0
    level: str = ""
    score: int = 1
    recommendation: str = ""
    image_url: str | None = None
    time_limit_seconds: int | None = None

    def to_question(self) -> Question:
        return Question(
            id=0,
            category=self.category,
            question_text=self.question,
            options=list(self.options),
            correct_option_index=self.correct_option,
            level=self.level,
            score=self.score,
            recommendation=self.recommendation,
            image_url=self.image_url or None,
            time_limit_seconds=self.time_limit_seconds,
        )


class QuizPayload(BaseModel):
    """Payload schema for creating or editing a quiz."""

    name: str
    description: str = ""
    time_limit_seconds: int | None = None


class MovePayload(BaseModel):
    """Payload schema for moving a question inside a quiz (-1 up, +1 down)."""

    offset: int


class SettingsPayload(BaseModel):
    quiz_time_limit: int | None = None


def _serialize_question(question: Question) -> dict[str, object]:
    return {
        "id": question.id,
        "category": question.category,
        "question": question.question_text,
        "options": list(question.options),
        "correct_option": question.correct_option_index,
        "level": question.level,
        "score": question.score,
        "recommendation": question.recommendation,
        "image_url": question.image_url,
        "time_limit_seconds": question.time_limit_seconds,
        "created_at": question.created_at.isoformat(),
    }


def _serialize_quiz(quiz: Quiz) -> dict[str, object]:
    return {
        "id": quiz.id,
        "name": quiz.name,
        "description": quiz.description,
        "quiz_time_limit": quiz.time_limit_seconds,
        "question_ids": list(quiz.question_ids),
        "created_at": quiz.created_at.isoformat(),
    }


def create_admin_router(manager_dep, admin_dep) -> APIRouter:
    """Build the ``/admin`` router; every route requires an administrator."""
    router = APIRouter(prefix="/admin", dependencies=[Depends(admin_dep)])

    # --- Questions ---

    @router.get("/questions")
    def list_questions(manager: AssessmentManager = Depends(manager_dep)) -> list[dict[str, object]]:
        return [_serialize_question(question) for question in manager.get_questions()]

    @router.post("/questions", status_code=201)
    def create_question(
        payload: QuestionPayload,
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            question = manager.add_question(payload.to_question())
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _serialize_question(question)

    @router.put("/questions/{question_id}")
    def replace_question(
        question_id: int,
        payload: QuestionPayload,
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            question = manager.update_question(question_id, payload.to_question())
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _serialize_question(question)

    @router.delete("/questions/{question_id}")
    def remove_question(question_id: int, manager: AssessmentManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            manager.delete_question(question_id)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {"ok": True}

    @router.post("/questions/import", status_code=201)
    async def import_questions(
        file: UploadFile = File(...),
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        raw = await file.read()
        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise HTTPException(status_code=422, detail="The file must be UTF-8 encoded.") from exc
        try:
            imported = load_questions_from_csv(text, source_name=file.filename or "upload.csv")
            added = manager.import_questions(imported)
        except QuestionImportError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return {"imported": len(added)}

    @router.get("/questions/template", response_class=PlainTextResponse)
    def download_template(manager: AssessmentManager = Depends(manager_dep)) -> PlainTextResponse:
        return PlainTextResponse(
            manager.get_csv_template(),
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="questions_template.csv"'},
        )

    @router.get("/questions/export", response_class=PlainTextResponse)
    def export_questions(manager: AssessmentManager = Depends(manager_dep)) -> PlainTextResponse:
        return PlainTextResponse(
            manager.export_questions_csv(),
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="questions.csv"'},
        )

    @router.post("/images", status_code=201)
    async def upload_image(
        file: UploadFile = File(...),
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        if manager.image_store is None:
            raise HTTPException(status_code=409, detail="Image uploads are not configured.")
        data = await file.read()
        try:
            url = manager.image_store.save(file.filename or "", data)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        logger.info("Stored question image %s", url)
        return {"image_url": url}

    # --- Settings ---

    @router.get("/settings")
    def get_settings(manager: AssessmentManager = Depends(manager_dep)) -> dict[str, object]:
        return {"quiz_time_limit": manager.get_quiz_time_limit()}

    @router.put("/settings")
    def put_settings(
        payload: SettingsPayload,
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            manager.set_quiz_time_limit(payload.quiz_time_limit)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return {"quiz_time_limit": manager.get_quiz_time_limit()}

    # --- Quizzes ---

    @router.get("/quizzes")
    def list_quizzes(manager: AssessmentManager = Depends(manager_dep)) -> list[dict[str, object]]:
        return [_serialize_quiz(summary.quiz) for summary in manager.list_quizzes()]

    @router.post("/quizzes", status_code=201)
    def create_quiz(payload: QuizPayload, manager: AssessmentManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            quiz = manager.create_quiz(payload.name, payload.description)
            if payload.time_limit_seconds is not None:
                quiz = manager.update_quiz(quiz.id, quiz.name, quiz.description, payload.time_limit_seconds)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _serialize_quiz(quiz)

    @router.get("/quizzes/{quiz_id}")
    def get_quiz(quiz_id: int, manager: AssessmentManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            quiz = manager.get_quiz(quiz_id)
            questions = manager.get_quiz_questions(quiz_id)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        payload = _serialize_quiz(quiz)
        payload["questions"] = [_serialize_question(question) for question in questions]
        return payload

    @router.put("/quizzes/{quiz_id}")
    def update_quiz(
        quiz_id: int,
        payload: QuizPayload,
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            quiz = manager.update_quiz(quiz_id, payload.name, payload.description, payload.time_limit_seconds)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _serialize_quiz(quiz)

    @router.delete("/quizzes/{quiz_id}")
    def delete_quiz(quiz_id: int, manager: AssessmentManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            manager.delete_quiz(quiz_id)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {"ok": True}

    @router.post("/quizzes/{quiz_id}/questions/{question_id}/toggle")
    def toggle_question(
        quiz_id: int,
        question_id: int,
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            added = manager.toggle_quiz_question(quiz_id, question_id)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {"added": added, "question_ids": list(manager.get_quiz(quiz_id).question_ids)}

    @router.post("/quizzes/{quiz_id}/questions/{question_id}/move")
    def move_question(
        quiz_id: int,
        question_id: int,
        payload: MovePayload,
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            moved = manager.move_quiz_question(quiz_id, question_id, payload.offset)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {"moved": moved, "question_ids": list(manager.get_quiz(quiz_id).question_ids)}

    # --- Results ---

    @router.get("/results")
    def list_results(manager: AssessmentManager = Depends(manager_dep)) -> list[dict[str, object]]:
        rows = []
        for record, email in manager.list_all_results():
            row = record.to_dict()
            row["email"] = email
            rows.append(row)
        return rows

    @router.put("/users/{user_id}/role")
    def set_role(
        user_id: str,
        role: str,
        manager: AssessmentManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            account = manager.set_user_role(user_id, role)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _serialize_account(account)

    return router


def _serialize_account(account: UserAccount) -> dict[str, object]:
    return {"id": account.id, "email": account.email, "role": account.role}
