"""Local storage for images attached to questions."""

from __future__ import annotations

import re
import time
from pathlib import Path

from assessment_app.constants.quiz_constants import IMAGE_EXTENSIONS, IMAGE_URL_PREFIX

_WHITESPACE = re.compile(r"\s+")


class ImageStore:
    """Saves uploaded image bytes and hands back the public URL."""

    def __init__(self, directory: Path, url_prefix: str = IMAGE_URL_PREFIX) -> None:
        self.directory = directory
        self.url_prefix = url_prefix.rstrip("/")

    def save(self, original_name: str, data: bytes) -> str:
        """Store ``data`` under a timestamped name and return its URL."""
        filename = self.build_filename(original_name)
        if not data:
            raise ValueError("The uploaded image is empty.")
        self.directory.mkdir(parents=True, exist_ok=True)
        (self.directory / filename).write_bytes(data)
        return f"{self.url_prefix}/{filename}"

    def save_file(self, source_path: Path) -> str:
        return self.save(source_path.name, source_path.read_bytes())

    def path_for_url(self, url: str) -> Path | None:
        prefix = f"{self.url_prefix}/"
        if not url.startswith(prefix):
            return None
        return self.directory / url[len(prefix):]

    @staticmethod
    def build_filename(original_name: str) -> str:
        name = Path(original_name.replace("\\", "/")).name.strip()
        if not name:
            raise ValueError("Image file name is missing.")
        if Path(name).suffix.lower() not in IMAGE_EXTENSIONS:
            raise ValueError("Only image files can be attached to questions.")
        return f"{int(time.time() * 1000)}_{_WHITESPACE.sub('_', name)}"
