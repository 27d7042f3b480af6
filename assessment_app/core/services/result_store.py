"""Service for storing finished attempts and listing them per user."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from uuid import uuid4

from assessment_app.core.models import ResultDetail, ResultRecord, utc_now

logger = logging.getLogger(__name__)


class ResultSaveError(Exception):
    """Raised when a result could not be written to the archive."""


class ResultStore:
    """Keeps result records in memory and appends them to an optional archive."""

    def __init__(self, archive_path: Path | None = None) -> None:
        self._records: list[ResultRecord] = []
        self._archive_path = archive_path

    def save(
        self,
        user_id: str,
        score: int,
        max_score: int,
        answers: tuple[ResultDetail, ...],
        quiz_id: int | None = None,
    ) -> ResultRecord:
        """Store one result. The write is attempted once; failures raise ResultSaveError."""
        record = ResultRecord(
            id=uuid4().hex,
            user_id=user_id,
            score=score,
            max_score=max_score,
            answers=tuple(answers),
            quiz_id=quiz_id,
            created_at=utc_now(),
        )
        if self._archive_path is not None:
            self._append_to_archive(record)
        self._records.append(record)
        return record

    def list_for_user(self, user_id: str) -> list[ResultRecord]:
        return [record for record in self.list_all() if record.user_id == user_id]

    def list_all(self) -> list[ResultRecord]:
        """Return every stored result, newest first."""
        return list(reversed(self._records))

    def count(self) -> int:
        return len(self._records)

    def _append_to_archive(self, record: ResultRecord) -> None:
        path = self._archive_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(record.to_dict(), ensure_ascii=False) + "\n")
        except OSError as exc:
            logger.warning("Could not archive result %s to %s: %s", record.id, path, exc)
            raise ResultSaveError(f"Could not save the result: {exc.strerror or exc}") from exc
