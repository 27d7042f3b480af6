"""Quiz-related constants shared across UI, server and core layers."""

import os
from pathlib import Path

OPTION_COUNT: int = 4
DEFAULT_QUESTION_SCORE: int = 1
DEFAULT_TIME_LIMIT_SECONDS: int = 30
TICK_INTERVAL_SECONDS: float = 1.0
MIN_PASSWORD_LENGTH: int = 6

# Accounts created with one of these e-mails receive the admin role.
ADMIN_EMAILS: tuple[str, ...] = tuple(
    email.strip().lower()
    for email in os.environ.get("ASSESSMENT_ADMIN_EMAILS", "admin@example.com").split(",")
    if email.strip()
)

DATA_DIR: Path = Path(os.environ.get("ASSESSMENT_DATA_DIR", "assessment_data"))
IMAGE_DIR: Path = DATA_DIR / "question-images"
RESULT_ARCHIVE_PATH: Path = DATA_DIR / "results.jsonl"
IMAGE_URL_PREFIX: str = "/images"
IMAGE_EXTENSIONS: frozenset[str] = frozenset({".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg"})

CSV_COLUMNS: tuple[str, ...] = (
    "category",
    "question",
    "option1",
    "option2",
    "option3",
    "option4",
    "correct_option",
    "level",
    "score",
    "recommendation",
    "question_time_limit",
)
