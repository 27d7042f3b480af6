"""Component for creating and editing questions in the question bank."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from assessment_app.constants.quiz_constants import DEFAULT_QUESTION_SCORE, DEFAULT_TIME_LIMIT_SECONDS
from assessment_app.constants.ui_constants import (
    IMAGE_DIALOG_TITLE,
    IMAGE_FILE_FILTER,
    NO_QUESTIONS_MESSAGE,
    PLACEHOLDER_QUESTION,
    PLACEHOLDER_RECOMMENDATION,
    QUESTION_CLEAR_IMAGE_BUTTON,
    QUESTION_DELETE_BUTTON,
    QUESTION_IMAGE_BUTTON,
    QUESTION_INSERT_BUTTON,
    QUESTION_NEXT_BUTTON,
    QUESTION_PREV_BUTTON,
    QUESTION_SAVE_BUTTON,
)
from assessment_app.core.assessment_manager import AssessmentManager
from assessment_app.core.models import Question
from assessment_app.ui.dialog_helpers import (
    check_unsaved_changes,
    confirm_delete_question,
    show_error,
    show_info,
    show_warning,
)
from assessment_app.ui.question_renderer import render_question_with_options

_OPTION_LABELS = ("A", "B", "C", "D")


class QuestionPanel(QWidget):
    """UI component for creating, editing, and navigating bank questions."""

    def __init__(self, manager: AssessmentManager, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.manager = manager
        self._current_question_id: int | None = None
        self._image_url: str | None = None
        self._has_unsaved_changes: bool = False
        self._preview_font_size: int = 14

        self._build_ui()
        self.show_first_question()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        # Action buttons
        action_row = QHBoxLayout()
        self.insert_button = QPushButton(QUESTION_INSERT_BUTTON, self)
        self.insert_button.clicked.connect(self._handle_insert_new)
        action_row.addWidget(self.insert_button)

        self.save_button = QPushButton(QUESTION_SAVE_BUTTON, self)
        self.save_button.clicked.connect(self._handle_save)
        action_row.addWidget(self.save_button)

        self.delete_button = QPushButton(QUESTION_DELETE_BUTTON, self)
        self.delete_button.clicked.connect(self._handle_delete)
        action_row.addWidget(self.delete_button)

        self.prev_button = QPushButton(QUESTION_PREV_BUTTON, self)
        self.prev_button.clicked.connect(lambda: self._navigate(-1))
        action_row.addWidget(self.prev_button)

        self.next_button = QPushButton(QUESTION_NEXT_BUTTON, self)
        self.next_button.clicked.connect(lambda: self._navigate(1))
        action_row.addWidget(self.next_button)

        layout.addLayout(action_row)

        # Metadata
        form = QFormLayout()
        self.category_input = QLineEdit(self)
        self.category_input.setPlaceholderText("e.g. HSSE")
        self.category_input.textChanged.connect(self._on_input_changed)
        form.addRow("Category:", self.category_input)

        self.level_input = QComboBox(self)
        self.level_input.setEditable(True)
        self.level_input.addItems(["", "Easy", "Medium", "Hard"])
        self.level_input.currentTextChanged.connect(self._on_input_changed)
        form.addRow("Level:", self.level_input)

        self.score_spinbox = QSpinBox(self)
        self.score_spinbox.setRange(1, 100)
        self.score_spinbox.setValue(DEFAULT_QUESTION_SCORE)
        self.score_spinbox.valueChanged.connect(lambda _: self._on_input_changed())
        form.addRow("Score:", self.score_spinbox)
        layout.addLayout(form)

        # Question input
        self.question_input = QPlainTextEdit(self)
        self.question_input.setPlaceholderText(PLACEHOLDER_QUESTION)
        self.question_input.textChanged.connect(self._on_input_changed)
        layout.addWidget(self.question_input)

        # Options input
        options_row = QHBoxLayout()
        self.option_inputs: list[QLineEdit] = []
        for label in _OPTION_LABELS:
            option_input = QLineEdit(self)
            option_input.setPlaceholderText(f"Option {label}")
            option_input.textChanged.connect(self._on_input_changed)
            options_row.addWidget(option_input)
            self.option_inputs.append(option_input)
        layout.addLayout(options_row)

        # Correct option selector
        selector_row = QHBoxLayout()
        selector_row.addWidget(QLabel("Correct option:", self))
        self.correct_option_combo = QComboBox(self)
        self.correct_option_combo.addItem("Select...", userData=None)
        for index, label in enumerate(_OPTION_LABELS):
            self.correct_option_combo.addItem(label, userData=index)
        self.correct_option_combo.currentIndexChanged.connect(self._on_input_changed)
        selector_row.addWidget(self.correct_option_combo)
        selector_row.addStretch()
        layout.addLayout(selector_row)

        self.recommendation_input = QPlainTextEdit(self)
        self.recommendation_input.setPlaceholderText(PLACEHOLDER_RECOMMENDATION)
        self.recommendation_input.setMaximumHeight(80)
        self.recommendation_input.textChanged.connect(self._on_input_changed)
        layout.addWidget(self.recommendation_input)

        # Time limit
        time_limit_row = QHBoxLayout()
        self.time_limit_checkbox = QCheckBox("Enable time limit for this question", self)
        self.time_limit_checkbox.toggled.connect(self._handle_time_limit_toggle)
        time_limit_row.addWidget(self.time_limit_checkbox)

        self.time_limit_spinbox = QSpinBox(self)
        self.time_limit_spinbox.setRange(5, 3600)
        self.time_limit_spinbox.setSingleStep(5)
        self.time_limit_spinbox.setSuffix(" s")
        self.time_limit_spinbox.setEnabled(False)
        self.time_limit_spinbox.setValue(DEFAULT_TIME_LIMIT_SECONDS)
        self.time_limit_spinbox.valueChanged.connect(lambda _: self._on_input_changed())
        time_limit_row.addWidget(self.time_limit_spinbox)
        time_limit_row.addStretch()

        # Image
        self.image_button = QPushButton(QUESTION_IMAGE_BUTTON, self)
        self.image_button.clicked.connect(self._handle_attach_image)
        time_limit_row.addWidget(self.image_button)
        self.clear_image_button = QPushButton(QUESTION_CLEAR_IMAGE_BUTTON, self)
        self.clear_image_button.clicked.connect(self._handle_clear_image)
        time_limit_row.addWidget(self.clear_image_button)
        layout.addLayout(time_limit_row)

        # Preview
        self.preview_view = QWebEngineView(self)
        layout.addWidget(self.preview_view, stretch=1)

        self.status_label = QLabel(NO_QUESTIONS_MESSAGE, self)
        layout.addWidget(self.status_label)

    def _on_input_changed(self) -> None:
        self._has_unsaved_changes = True
        self._refresh_preview()

    def _handle_time_limit_toggle(self, checked: bool) -> None:
        self.time_limit_spinbox.setEnabled(checked)
        self._on_input_changed()

    def _handle_insert_new(self) -> None:
        if not self.check_unsaved_changes():
            return
        self._current_question_id = None
        self.clear_fields()
        self.status_label.setText("Ready to insert a new question.")

    def _handle_save(self) -> None:
        try:
            draft = self._build_question_from_inputs()
        except ValueError as exc:
            show_warning(self, "Invalid question", str(exc))
            return

        try:
            if self._current_question_id is None:
                saved = self.manager.add_question(draft)
            else:
                saved = self.manager.update_question(self._current_question_id, draft)
        except (ValueError, LookupError) as exc:
            show_error(self, "Save failed", f"Could not save question: {exc}")
            return

        self._current_question_id = saved.id
        self._has_unsaved_changes = False
        self._update_status("Saved question")

    def _handle_delete(self) -> None:
        if self._current_question_id is None:
            if self._has_unsaved_changes:
                self.clear_fields()
                self.status_label.setText("Discarded unsaved question.")
            else:
                show_info(self, "No selection", "Select a saved question before deleting.")
            return

        position = self._current_position()
        if not confirm_delete_question(self, position + 1):
            return

        try:
            self.manager.delete_question(self._current_question_id)
        except LookupError as exc:
            show_error(self, "Delete failed", f"Could not delete question: {exc}")
            return

        questions = self.manager.get_questions()
        if not questions:
            self._current_question_id = None
            self.clear_fields()
            self.status_label.setText("All questions removed.")
            return
        self.populate_fields(questions[min(position, len(questions) - 1)])
        self._update_status("Deleted question. Now viewing")

    def _handle_attach_image(self) -> None:
        if self.manager.image_store is None:
            show_warning(self, "Images disabled", "No image directory is configured.")
            return
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            IMAGE_DIALOG_TITLE,
            str(Path.home()),
            IMAGE_FILE_FILTER,
        )
        if not file_path:
            return
        try:
            self._image_url = self.manager.image_store.save_file(Path(file_path))
        except (OSError, ValueError) as exc:
            show_error(self, "Image rejected", str(exc))
            return
        self._on_input_changed()

    def _handle_clear_image(self) -> None:
        if self._image_url is None:
            return
        self._image_url = None
        self._on_input_changed()

    def _navigate(self, step: int) -> None:
        if not self.check_unsaved_changes():
            return
        questions = self.manager.get_questions()
        if not questions:
            return
        position = self._current_position()
        target = position + step if self._current_question_id is not None else 0
        target = max(0, min(len(questions) - 1, target))
        self.populate_fields(questions[target])
        self._update_status("Viewing question")

    def _current_position(self) -> int:
        for position, question in enumerate(self.manager.get_questions()):
            if question.id == self._current_question_id:
                return position
        return 0

    def _update_status(self, prefix: str) -> None:
        self.status_label.setText(
            f"{prefix} {self._current_position() + 1} of {self.manager.get_question_count()}."
        )

    def check_unsaved_changes(self) -> bool:
        """Check if there are unsaved changes and prompt user. Returns True if ok to proceed."""
        if not self._has_unsaved_changes:
            return True

        result = check_unsaved_changes(self)

        if result is True:  # Save
            self._handle_save()
            return not self._has_unsaved_changes
        elif result is False:  # Discard
            self._has_unsaved_changes = False
            return True
        else:  # Cancel (None)
            return False

    def show_first_question(self) -> None:
        questions = self.manager.get_questions()
        if not questions:
            self._current_question_id = None
            self.clear_fields()
            self.status_label.setText(NO_QUESTIONS_MESSAGE)
            return
        self.populate_fields(questions[0])
        self._update_status("Viewing question")

    def clear_fields(self) -> None:
        self.category_input.clear()
        self.level_input.setCurrentText("")
        self.score_spinbox.setValue(DEFAULT_QUESTION_SCORE)
        self.question_input.clear()
        for input_field in self.option_inputs:
            input_field.clear()
        self.correct_option_combo.setCurrentIndex(0)
        self.recommendation_input.clear()
        self.time_limit_checkbox.setChecked(False)
        self.time_limit_spinbox.setValue(DEFAULT_TIME_LIMIT_SECONDS)
        self._image_url = None
        self._has_unsaved_changes = False
        self._refresh_preview()

    def populate_fields(self, question: Question) -> None:
        self._current_question_id = question.id
        self.category_input.setText(question.category)
        self.level_input.setCurrentText(question.level)
        self.score_spinbox.setValue(question.score)
        self.question_input.setPlainText(question.question_text)
        for field, text in zip(self.option_inputs, question.options):
            field.setText(text)
        self.correct_option_combo.setCurrentIndex(question.correct_option_index + 1)
        self.recommendation_input.setPlainText(question.recommendation)

        if question.time_limit_seconds is not None:
            self.time_limit_spinbox.setValue(question.time_limit_seconds)
            self.time_limit_checkbox.setChecked(True)
        else:
            self.time_limit_spinbox.setValue(DEFAULT_TIME_LIMIT_SECONDS)
            self.time_limit_checkbox.setChecked(False)

        self._image_url = question.image_url
        self._has_unsaved_changes = False
        self._refresh_preview()

    def _build_question_from_inputs(self) -> Question:
        correct_data = self.correct_option_combo.currentData()
        if correct_data is None:
            raise ValueError("Select the correct option before saving.")
        time_limit = None
        if self.time_limit_checkbox.isChecked():
            time_limit = int(self.time_limit_spinbox.value())
        return Question(
            id=0,
            category=self.category_input.text().strip(),
            question_text=self.question_input.toPlainText().strip(),
            options=[field.text().strip() for field in self.option_inputs],
            correct_option_index=int(correct_data),
            level=self.level_input.currentText().strip(),
            score=int(self.score_spinbox.value()),
            recommendation=self.recommendation_input.toPlainText().strip(),
            image_url=self._image_url,
            time_limit_seconds=time_limit,
        )

    def _refresh_preview(self) -> None:
        image_path = None
        if self._image_url and self.manager.image_store is not None:
            local_path = self.manager.image_store.path_for_url(self._image_url)
            if local_path is not None:
                image_path = local_path.resolve().as_uri()
        html = render_question_with_options(
            self.question_input.toPlainText(),
            [field.text() for field in self.option_inputs],
            category=self.category_input.text(),
            level=self.level_input.currentText(),
            correct_index=self.correct_option_combo.currentData(),
            image_path=image_path,
            font_size=self._preview_font_size,
        )
        self.preview_view.setHtml(html)

    def set_status_message(self, message: str) -> None:
        self.status_label.setText(message)

    def apply_font_size(self, ui_font_size: int, preview_font_size: int) -> None:
        style = f"font-size: {ui_font_size}pt;"
        buttons = [
            self.insert_button,
            self.save_button,
            self.delete_button,
            self.prev_button,
            self.next_button,
            self.image_button,
            self.clear_image_button,
        ]
        for button in buttons:
            button.setStyleSheet(style)
        self._preview_font_size = preview_font_size
        self._refresh_preview()
