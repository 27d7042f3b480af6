"""Application entry point for the Assessment Portal."""

from __future__ import annotations

import socket
import sys

from PySide6.QtWidgets import QApplication

from assessment_app.constants.about import APP_NAME
from assessment_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from assessment_app.constants.quiz_constants import IMAGE_DIR, RESULT_ARCHIVE_PATH
from assessment_app.core.assessment_manager import AssessmentManager
from assessment_app.core.image_store import ImageStore
from assessment_app.core.services.session_clock import SessionClock
from assessment_app.server.api_server import start_api_server
from assessment_app.ui.admin_main_window import AdminMainWindow
from assessment_app.utils.logging_config import configure_logging


def _determine_user_url(port: int) -> str:
    """Best-effort determination of the local IP for the user-facing URL."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/"


def main() -> None:
    """Initialize logging, start the API server and session clock, and launch the Qt UI."""
    logger = configure_logging()
    logger.info("Starting %s", APP_NAME)

    manager = AssessmentManager(
        result_archive_path=RESULT_ARCHIVE_PATH,
        image_store=ImageStore(IMAGE_DIR),
    )
    start_api_server(manager=manager, host=DEFAULT_HOST, port=DEFAULT_PORT)
    clock = SessionClock(manager)
    clock.start()
    user_url = _determine_user_url(DEFAULT_PORT)
    logger.info("User page available at %s", user_url)

    app = QApplication(sys.argv)
    app.aboutToQuit.connect(clock.stop)
    window = AdminMainWindow(manager=manager, user_url=user_url)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
