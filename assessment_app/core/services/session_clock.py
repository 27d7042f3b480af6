"""Background clock that delivers one-second ticks to live quiz sessions."""

from __future__ import annotations

import logging
from threading import Event, Thread
from typing import TYPE_CHECKING

from assessment_app.constants.quiz_constants import TICK_INTERVAL_SECONDS

if TYPE_CHECKING:
    from assessment_app.core.assessment_manager import AssessmentManager

logger = logging.getLogger(__name__)


class SessionClock:
    """Schedules a stamped tick per session, waits one interval, then delivers it.

    Stamps are taken before the wait, so a session whose question changed in
    the meantime receives a stale stamp and drops the question-level part.
    """

    def __init__(self, manager: AssessmentManager, interval_seconds: float = TICK_INTERVAL_SECONDS) -> None:
        self._manager = manager
        self._interval = interval_seconds
        self._stop_event = Event()
        self._thread: Thread | None = None

    def start(self) -> Thread:
        """Start ticking in a background daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            return self._thread
        self._stop_event.clear()
        self._thread = Thread(target=self._run, name="QuizSessionClock", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=max(self._interval * 2, 1.0))
            self._thread = None

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_cycle(self) -> bool:
        """Run one schedule/wait/deliver cycle. Returns False once stopped."""
        stamps = self._manager.collect_tick_stamps()
        if self._stop_event.wait(self._interval):
            return False
        self._manager.deliver_ticks(stamps)
        return True

    def _run(self) -> None:
        logger.info("Session clock started (interval %.2fs)", self._interval)
        while self.run_cycle():
            pass
        logger.info("Session clock stopped")
