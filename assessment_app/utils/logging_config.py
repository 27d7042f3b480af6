"""Logging configuration helpers for the assessment portal."""

from __future__ import annotations

import logging
import os
from logging import Logger


def configure_logging(level: int | str | None = None) -> Logger:
    """Configure basic logging for the application and return the app logger.

    The level defaults to ``ASSESSMENT_LOG_LEVEL`` from the environment, or INFO.
    """
    if level is None:
        level = os.environ.get("ASSESSMENT_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return logging.getLogger("assessment_app")
