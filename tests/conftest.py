from __future__ import annotations

import pytest

from assessment_app.core.assessment_manager import AssessmentManager
from assessment_app.core.image_store import ImageStore
from assessment_app.core.models import Question
from assessment_app.core.services.account_registry import AccountRegistry


def make_question(
    text: str = "What is PPE?",
    *,
    correct: int = 3,
    score: int = 1,
    time_limit: int | None = None,
    category: str = "HSSE",
    recommendation: str = "Use PPE for safety",
    question_id: int = 0,
) -> Question:
    return Question(
        id=question_id,
        category=category,
        question_text=text,
        options=["Gloves", "Helmet", "Glasses", "All of these"],
        correct_option_index=correct,
        level="Easy",
        score=score,
        recommendation=recommendation,
        time_limit_seconds=time_limit,
    )


@pytest.fixture
def manager(tmp_path) -> AssessmentManager:
    return AssessmentManager(
        result_archive_path=tmp_path / "results.jsonl",
        image_store=ImageStore(tmp_path / "images"),
        accounts=AccountRegistry(admin_emails=("admin@example.com",)),
    )
