"""Qt main window for the admin console: questions, quizzes and results modes."""

from __future__ import annotations

from enum import Enum, auto
import logging
from pathlib import Path

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from assessment_app.constants.about import (
    APP_ABOUT_TEXT,
    APP_LICENSE,
    APP_NAME,
    APP_VERSION,
    HELP_TEXT,
)
from assessment_app.constants.ui_constants import (
    IMPORT_DIALOG_TITLE,
    IMPORT_FILE_FILTER,
    MODE_BUTTON_IMPORT,
    MODE_BUTTON_QUESTIONS,
    MODE_BUTTON_QUIZZES,
    MODE_BUTTON_RESULTS,
    MODE_BUTTON_TEMPLATE,
    RESULTS_REFRESH_INTERVAL_MS,
    TEMPLATE_DIALOG_TITLE,
    USER_URL_PLACEHOLDER,
    WINDOW_TITLE,
)
from assessment_app.core.assessment_manager import AssessmentManager
from assessment_app.core.question_exporter import save_questions_to_file
from assessment_app.core.question_importer import QuestionImportError, load_questions_from_file
from assessment_app.styling.styles import Styles
from assessment_app.ui.components.question_panel import QuestionPanel
from assessment_app.ui.components.quizzes_panel import QuizzesPanel
from assessment_app.ui.components.results_panel import ResultsPanel
from assessment_app.ui.dialog_helpers import show_error, show_info
from assessment_app.ui.settings_dialog import SettingsDialog

logger = logging.getLogger(__name__)


class AdminMode(Enum):
    """High-level UI mode for the admin console."""

    QUESTIONS = auto()
    QUIZZES = auto()
    RESULTS = auto()


class AdminMainWindow(QMainWindow):
    """Main Qt window switching between the three console modes."""

    def __init__(self, manager: AssessmentManager, user_url: str | None = None) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)

        self.manager = manager
        self.user_url = user_url or USER_URL_PLACEHOLDER

        self._mode = AdminMode.QUESTIONS
        self._ui_font_size: int = 10
        self._preview_font_size: int = 14
        self._last_template_path: Path | None = None

        self._build_ui()
        self._configure_refresh_timer()
        self._apply_styles()

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        self._build_mode_buttons(root_layout)

        self.mode_stack = QStackedWidget(self)
        self.question_panel = QuestionPanel(self.manager, self)
        self.quizzes_panel = QuizzesPanel(self.manager, self)
        self.results_panel = ResultsPanel(self.manager, self.user_url, self)

        self.mode_stack.addWidget(self.question_panel)
        self.mode_stack.addWidget(self.quizzes_panel)
        self.mode_stack.addWidget(self.results_panel)
        root_layout.addWidget(self.mode_stack)

        self._set_mode(AdminMode.QUESTIONS)

    def _build_mode_buttons(self, layout: QVBoxLayout) -> None:
        button_row = QHBoxLayout()

        self.questions_mode_button = QPushButton(MODE_BUTTON_QUESTIONS, self)
        self.questions_mode_button.setCheckable(True)
        self.questions_mode_button.clicked.connect(lambda: self._handle_mode_button(AdminMode.QUESTIONS))
        button_row.addWidget(self.questions_mode_button)

        self.quizzes_mode_button = QPushButton(MODE_BUTTON_QUIZZES, self)
        self.quizzes_mode_button.setCheckable(True)
        self.quizzes_mode_button.clicked.connect(lambda: self._handle_mode_button(AdminMode.QUIZZES))
        button_row.addWidget(self.quizzes_mode_button)

        self.results_mode_button = QPushButton(MODE_BUTTON_RESULTS, self)
        self.results_mode_button.setCheckable(True)
        self.results_mode_button.clicked.connect(lambda: self._handle_mode_button(AdminMode.RESULTS))
        button_row.addWidget(self.results_mode_button)

        self.import_button = QPushButton(MODE_BUTTON_IMPORT, self)
        self.import_button.clicked.connect(self._handle_import_csv)
        button_row.addWidget(self.import_button)

        self.template_button = QPushButton(MODE_BUTTON_TEMPLATE, self)
        self.template_button.clicked.connect(self._handle_save_template)
        button_row.addWidget(self.template_button)

        self.about_button = QPushButton(f"About {APP_NAME}", self)
        self.about_button.clicked.connect(self._handle_about)
        button_row.addWidget(self.about_button)

        self.help_button = QPushButton("Help", self)
        self.help_button.clicked.connect(self._handle_help)
        button_row.addWidget(self.help_button)

        self.settings_button = QPushButton("Settings", self)
        self.settings_button.clicked.connect(self._handle_settings)
        button_row.addWidget(self.settings_button)

        layout.addLayout(button_row)

    def _configure_refresh_timer(self) -> None:
        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(RESULTS_REFRESH_INTERVAL_MS)
        self.refresh_timer.timeout.connect(self._refresh_state)
        self.refresh_timer.start()

    def _refresh_state(self) -> None:
        if self._mode == AdminMode.RESULTS:
            self.results_panel.refresh()

    def _handle_mode_button(self, mode: AdminMode) -> None:
        if mode != AdminMode.QUESTIONS and not self.question_panel.check_unsaved_changes():
            self._set_mode(self._mode)
            return
        self._set_mode(mode)

    def _set_mode(self, mode: AdminMode) -> None:
        self._mode = mode
        self.questions_mode_button.setChecked(mode == AdminMode.QUESTIONS)
        self.quizzes_mode_button.setChecked(mode == AdminMode.QUIZZES)
        self.results_mode_button.setChecked(mode == AdminMode.RESULTS)

        index_map = {
            AdminMode.QUESTIONS: 0,
            AdminMode.QUIZZES: 1,
            AdminMode.RESULTS: 2,
        }
        self.mode_stack.setCurrentIndex(index_map[mode])
        if mode == AdminMode.QUIZZES:
            self.quizzes_panel.refresh()
        elif mode == AdminMode.RESULTS:
            self.results_panel.refresh()

    def _handle_import_csv(self) -> None:
        if not self.question_panel.check_unsaved_changes():
            return

        file_path, _ = QFileDialog.getOpenFileName(
            self,
            IMPORT_DIALOG_TITLE,
            str(Path.home()),
            IMPORT_FILE_FILTER,
        )
        if not file_path:
            return

        try:
            imported = load_questions_from_file(Path(file_path))
            added = self.manager.import_questions(imported)
        except (OSError, QuestionImportError) as exc:
            show_error(self, "Import failed", str(exc))
            return

        self.question_panel.show_first_question()
        self.quizzes_panel.refresh()
        self._set_mode(AdminMode.QUESTIONS)
        self.question_panel.set_status_message(
            f"Imported {len(added)} questions. The bank now holds {self.manager.get_question_count()}."
        )
        show_info(self, "Questions imported", f"Successfully imported {len(added)} questions.")

    def _handle_save_template(self) -> None:
        default_path = self._last_template_path or (Path.cwd() / "questions_template.csv")
        file_path, _ = QFileDialog.getSaveFileName(
            self,
            TEMPLATE_DIALOG_TITLE,
            str(default_path),
            IMPORT_FILE_FILTER,
        )
        if not file_path:
            return

        try:
            save_questions_to_file(Path(file_path))
        except OSError as exc:
            show_error(self, "Save failed", str(exc))
            return

        self._last_template_path = Path(file_path)
        logger.info("Saved CSV template to %s", file_path)
        show_info(self, "Template saved", f"CSV template written to {file_path}.")

    def _handle_about(self) -> None:
        details = (
            f"{APP_NAME} v{APP_VERSION}\n"
            f"License: {APP_LICENSE}\n\n"
            f"{APP_ABOUT_TEXT}\n\n"
            f"Users connect to: {self.user_url}"
        )
        show_info(self, f"About {APP_NAME}", details)

    def _handle_help(self) -> None:
        show_info(self, f"{APP_NAME} Help", HELP_TEXT)

    def _handle_settings(self) -> None:
        dialog = SettingsDialog(
            self,
            self.manager.get_quiz_time_limit(),
            self._ui_font_size,
            self._preview_font_size,
        )
        if dialog.exec():
            try:
                self.manager.set_quiz_time_limit(dialog.get_quiz_time_limit())
            except ValueError as exc:
                show_error(self, "Invalid setting", str(exc))
                return
            self._ui_font_size = dialog.get_ui_font_size()
            self._preview_font_size = dialog.get_preview_font_size()
            self._apply_styles()

    def _apply_styles(self) -> None:
        self.setStyleSheet(Styles.get_main_window_style())

        ui_style = f"font-size: {self._ui_font_size}pt;"
        buttons = [
            self.questions_mode_button,
            self.quizzes_mode_button,
            self.results_mode_button,
            self.import_button,
            self.template_button,
            self.about_button,
            self.help_button,
            self.settings_button,
        ]
        for button in buttons:
            button.setStyleSheet(ui_style)

        self.question_panel.apply_font_size(self._ui_font_size, self._preview_font_size)
        self.quizzes_panel.apply_font_size(self._ui_font_size)
        self.results_panel.apply_font_size(self._ui_font_size)
