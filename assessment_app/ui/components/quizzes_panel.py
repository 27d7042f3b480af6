"""Component for composing quizzes out of bank questions."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QCheckBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from assessment_app.constants.quiz_constants import DEFAULT_TIME_LIMIT_SECONDS
from assessment_app.constants.ui_constants import (
    QUIZ_CREATE_BUTTON,
    QUIZ_DELETE_BUTTON,
    QUIZ_MOVE_DOWN_BUTTON,
    QUIZ_MOVE_UP_BUTTON,
    QUIZ_SAVE_BUTTON,
)
from assessment_app.core.assessment_manager import AssessmentManager
from assessment_app.ui.dialog_helpers import confirm_delete_quiz, show_error, show_warning


def _question_label(question) -> str:
    text = question.question_text.replace("\n", " ")
    if len(text) > 70:
        text = text[:67] + "..."
    return f"[{question.category}] {text}"


class QuizzesPanel(QWidget):
    """UI component for creating quizzes and choosing their questions."""

    def __init__(self, manager: AssessmentManager, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.manager = manager
        self._selected_quiz_id: int | None = None
        self._populating = False

        self._build_ui()
        self.refresh()

    def _build_ui(self) -> None:
        layout = QHBoxLayout()
        self.setLayout(layout)

        # Quiz list
        list_column = QVBoxLayout()
        self.quiz_list = QListWidget(self)
        self.quiz_list.currentItemChanged.connect(self._handle_quiz_selected)
        list_column.addWidget(self.quiz_list, stretch=1)
        self.create_button = QPushButton(QUIZ_CREATE_BUTTON, self)
        self.create_button.clicked.connect(self._handle_create)
        list_column.addWidget(self.create_button)
        layout.addLayout(list_column, stretch=1)

        # Details
        details_column = QVBoxLayout()
        form = QFormLayout()
        self.name_input = QLineEdit(self)
        form.addRow("Name:", self.name_input)
        self.description_input = QLineEdit(self)
        form.addRow("Description:", self.description_input)

        limit_row = QHBoxLayout()
        self.limit_checkbox = QCheckBox("Own time limit", self)
        self.limit_checkbox.toggled.connect(lambda checked: self.limit_spinbox.setEnabled(checked))
        limit_row.addWidget(self.limit_checkbox)
        self.limit_spinbox = QSpinBox(self)
        self.limit_spinbox.setRange(10, 24 * 3600)
        self.limit_spinbox.setSingleStep(30)
        self.limit_spinbox.setSuffix(" s")
        self.limit_spinbox.setValue(DEFAULT_TIME_LIMIT_SECONDS * 10)
        self.limit_spinbox.setEnabled(False)
        limit_row.addWidget(self.limit_spinbox)
        form.addRow("Quiz timer:", limit_row)
        details_column.addLayout(form)

        detail_buttons = QHBoxLayout()
        self.save_button = QPushButton(QUIZ_SAVE_BUTTON, self)
        self.save_button.clicked.connect(self._handle_save)
        detail_buttons.addWidget(self.save_button)
        self.delete_button = QPushButton(QUIZ_DELETE_BUTTON, self)
        self.delete_button.clicked.connect(self._handle_delete)
        detail_buttons.addWidget(self.delete_button)
        details_column.addLayout(detail_buttons)

        details_column.addWidget(QLabel("Questions in quiz (in order):", self))
        self.member_list = QListWidget(self)
        details_column.addWidget(self.member_list, stretch=1)

        move_buttons = QHBoxLayout()
        self.move_up_button = QPushButton(QUIZ_MOVE_UP_BUTTON, self)
        self.move_up_button.clicked.connect(lambda: self._handle_move(-1))
        move_buttons.addWidget(self.move_up_button)
        self.move_down_button = QPushButton(QUIZ_MOVE_DOWN_BUTTON, self)
        self.move_down_button.clicked.connect(lambda: self._handle_move(1))
        move_buttons.addWidget(self.move_down_button)
        details_column.addLayout(move_buttons)
        layout.addLayout(details_column, stretch=2)

        # Question bank
        bank_column = QVBoxLayout()
        bank_column.addWidget(QLabel("Question bank (tick to include):", self))
        self.bank_list = QListWidget(self)
        self.bank_list.itemChanged.connect(self._handle_bank_item_changed)
        bank_column.addWidget(self.bank_list, stretch=1)
        layout.addLayout(bank_column, stretch=2)

        self._set_details_enabled(False)

    def _set_details_enabled(self, enabled: bool) -> None:
        for widget in (
            self.name_input,
            self.description_input,
            self.limit_checkbox,
            self.save_button,
            self.delete_button,
            self.member_list,
            self.move_up_button,
            self.move_down_button,
            self.bank_list,
        ):
            widget.setEnabled(enabled)
        self.limit_spinbox.setEnabled(enabled and self.limit_checkbox.isChecked())

    def refresh(self) -> None:
        """Reload quizzes and keep the current selection when it still exists."""
        selected = self._selected_quiz_id
        self._populating = True
        self.quiz_list.clear()
        for summary in self.manager.list_quizzes():
            item = QListWidgetItem(f"{summary.quiz.name} ({summary.question_count})", self.quiz_list)
            item.setData(Qt.UserRole, summary.quiz.id)
            if summary.quiz.id == selected:
                self.quiz_list.setCurrentItem(item)
        self._populating = False
        if self.quiz_list.currentItem() is None:
            self._selected_quiz_id = None
        self._show_selected_quiz()

    def _handle_quiz_selected(self, current: QListWidgetItem | None, _previous) -> None:
        if self._populating:
            return
        self._selected_quiz_id = None if current is None else current.data(Qt.UserRole)
        self._show_selected_quiz()

    def _show_selected_quiz(self) -> None:
        self._populating = True
        self.member_list.clear()
        self.bank_list.clear()
        if self._selected_quiz_id is None:
            self.name_input.clear()
            self.description_input.clear()
            self.limit_checkbox.setChecked(False)
            self._set_details_enabled(False)
            self._populating = False
            return

        quiz = self.manager.get_quiz(self._selected_quiz_id)
        self.name_input.setText(quiz.name)
        self.description_input.setText(quiz.description)
        self.limit_checkbox.setChecked(quiz.time_limit_seconds is not None)
        if quiz.time_limit_seconds is not None:
            self.limit_spinbox.setValue(quiz.time_limit_seconds)

        for position, question in enumerate(self.manager.get_quiz_questions(quiz.id), start=1):
            item = QListWidgetItem(f"{position}. {_question_label(question)}", self.member_list)
            item.setData(Qt.UserRole, question.id)

        members = set(quiz.question_ids)
        for question in self.manager.get_questions():
            item = QListWidgetItem(_question_label(question), self.bank_list)
            item.setData(Qt.UserRole, question.id)
            item.setFlags(item.flags() | Qt.ItemIsUserCheckable)
            item.setCheckState(Qt.Checked if question.id in members else Qt.Unchecked)
        self._set_details_enabled(True)
        self._populating = False

    def _handle_create(self) -> None:
        existing = len(self.manager.list_quizzes())
        quiz = self.manager.create_quiz(f"Quiz {existing + 1}")
        self._selected_quiz_id = quiz.id
        self.refresh()

    def _handle_save(self) -> None:
        if self._selected_quiz_id is None:
            return
        time_limit = int(self.limit_spinbox.value()) if self.limit_checkbox.isChecked() else None
        try:
            self.manager.update_quiz(
                self._selected_quiz_id,
                self.name_input.text(),
                self.description_input.text(),
                time_limit,
            )
        except ValueError as exc:
            show_warning(self, "Invalid quiz", str(exc))
            return
        self.refresh()

    def _handle_delete(self) -> None:
        if self._selected_quiz_id is None:
            return
        if not confirm_delete_quiz(self, self.name_input.text()):
            return
        self.manager.delete_quiz(self._selected_quiz_id)
        self._selected_quiz_id = None
        self.refresh()

    def _handle_bank_item_changed(self, item: QListWidgetItem) -> None:
        if self._populating or self._selected_quiz_id is None:
            return
        try:
            self.manager.toggle_quiz_question(self._selected_quiz_id, item.data(Qt.UserRole))
        except LookupError as exc:
            show_error(self, "Update failed", str(exc))
        self.refresh()

    def _handle_move(self, offset: int) -> None:
        item = self.member_list.currentItem()
        if self._selected_quiz_id is None or item is None:
            return
        question_id = item.data(Qt.UserRole)
        if not self.manager.move_quiz_question(self._selected_quiz_id, question_id, offset):
            return
        self.refresh()
        for row in range(self.member_list.count()):
            if self.member_list.item(row).data(Qt.UserRole) == question_id:
                self.member_list.setCurrentRow(row)
                break

    def apply_font_size(self, font_size: int) -> None:
        style = f"font-size: {font_size}pt;"
        for button in (
            self.create_button,
            self.save_button,
            self.delete_button,
            self.move_up_button,
            self.move_down_button,
        ):
            button.setStyleSheet(style)
