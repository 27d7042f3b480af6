"""Component listing saved results and the answers behind each one."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QAbstractItemView,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from assessment_app.constants.ui_constants import NO_RESULTS_MESSAGE
from assessment_app.core.assessment_manager import AssessmentManager
from assessment_app.core.models import ResultRecord
from assessment_app.styling.styles import Styles

_COLUMNS = ("Saved at", "User", "Quiz", "Score")


class ResultsPanel(QWidget):
    """UI component showing every saved attempt, newest first."""

    def __init__(self, manager: AssessmentManager, user_url: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.manager = manager
        self.user_url = user_url
        self._records: list[ResultRecord] = []

        self._build_ui()
        self.refresh()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.network_label = QLabel(f"Users connect to: {self.user_url}", self)
        self.network_label.setWordWrap(True)
        self.network_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.network_label)

        content_row = QHBoxLayout()
        self.results_table = QTableWidget(0, len(_COLUMNS), self)
        self.results_table.setHorizontalHeaderLabels(_COLUMNS)
        self.results_table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.results_table.setSelectionMode(QAbstractItemView.SingleSelection)
        self.results_table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.results_table.horizontalHeader().setStretchLastSection(True)
        self.results_table.itemSelectionChanged.connect(self._show_selected_details)
        content_row.addWidget(self.results_table, stretch=3)

        self.details_list = QListWidget(self)
        self.details_list.setWordWrap(True)
        content_row.addWidget(self.details_list, stretch=2)
        layout.addLayout(content_row, stretch=1)

        self.empty_label = QLabel(NO_RESULTS_MESSAGE, self)
        self.empty_label.setAlignment(Qt.AlignCenter)
        self.empty_label.setStyleSheet(Styles.get_muted_label_style())
        layout.addWidget(self.empty_label)

    def refresh(self) -> None:
        rows = self.manager.list_all_results()
        records = [record for record, _ in rows]
        if [r.id for r in records] == [r.id for r in self._records]:
            return
        selected_id = self._selected_record_id()
        self._records = records

        self.results_table.setRowCount(len(rows))
        quiz_names = {summary.quiz.id: summary.quiz.name for summary in self.manager.list_quizzes()}
        for row, (record, email) in enumerate(rows):
            quiz_name = "All questions" if record.quiz_id is None else quiz_names.get(record.quiz_id, "(deleted)")
            values = (
                record.created_at.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
                email,
                quiz_name,
                f"{record.score} / {record.max_score}",
            )
            for column, value in enumerate(values):
                self.results_table.setItem(row, column, QTableWidgetItem(value))
            if record.id == selected_id:
                self.results_table.selectRow(row)
        self.empty_label.setVisible(not rows)
        if selected_id is None:
            self.details_list.clear()

    def _selected_record_id(self) -> str | None:
        selected = self.results_table.selectionModel().selectedRows()
        if not selected:
            return None
        row = selected[0].row()
        return self._records[row].id if row < len(self._records) else None

    def _show_selected_details(self) -> None:
        self.details_list.clear()
        selected = self.results_table.selectionModel().selectedRows()
        if not selected:
            return
        record = self._records[selected[0].row()]
        for number, detail in enumerate(record.answers, start=1):
            chosen = "No answer" if detail.chosen_index is None else detail.options[detail.chosen_index]
            lines = [
                f"{number}. {detail.question_text}",
                f"Answer: {chosen}",
                f"Correct: {detail.options[detail.correct_index]}",
            ]
            if not detail.is_correct and detail.recommendation:
                lines.append(f"Recommendation: {detail.recommendation}")
            item = QListWidgetItem("\n".join(lines), self.details_list)
            item.setForeground(QColor(Styles.get_outcome_color(detail.is_correct)))

    def update_user_url(self, url: str) -> None:
        self.user_url = url
        self.network_label.setText(f"Users connect to: {url}")

    def apply_font_size(self, font_size: int) -> None:
        self.results_table.setStyleSheet(f"font-size: {font_size}pt;")
        self.details_list.setStyleSheet(f"font-size: {font_size}pt;")
