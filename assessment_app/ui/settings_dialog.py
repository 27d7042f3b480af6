"""Settings dialog for the admin console."""

from __future__ import annotations

from PySide6.QtWidgets import (
    QCheckBox,
    QDialog,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
)


class SettingsDialog(QDialog):
    """Dialog for the overall quiz time limit and the console font sizes."""

    def __init__(
        self,
        parent=None,
        quiz_time_limit: int | None = None,
        ui_font_size: int = 10,
        preview_font_size: int = 14,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setModal(True)
        self.setMinimumWidth(400)

        self._quiz_time_limit = quiz_time_limit
        self._ui_font_size = ui_font_size
        self._preview_font_size = preview_font_size

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        # Quiz timer group
        timer_group = QGroupBox("Quiz Timer")
        timer_layout = QHBoxLayout()
        timer_group.setLayout(timer_layout)

        self.time_limit_checkbox = QCheckBox("Limit the whole quiz to")
        self.time_limit_checkbox.setToolTip(
            "Applies to quizzes started from now on. A quiz with its own limit ignores this value."
        )
        self.time_limit_checkbox.setChecked(self._quiz_time_limit is not None)
        timer_layout.addWidget(self.time_limit_checkbox)

        self.time_limit_spinbox = QSpinBox()
        self.time_limit_spinbox.setRange(10, 24 * 3600)
        self.time_limit_spinbox.setSingleStep(30)
        self.time_limit_spinbox.setSuffix(" s")
        self.time_limit_spinbox.setValue(self._quiz_time_limit or 300)
        self.time_limit_spinbox.setEnabled(self._quiz_time_limit is not None)
        self.time_limit_checkbox.toggled.connect(self.time_limit_spinbox.setEnabled)
        timer_layout.addWidget(self.time_limit_spinbox)
        timer_layout.addStretch()

        layout.addWidget(timer_group)

        # Font settings group
        font_group = QGroupBox("Font Sizes")
        font_layout = QVBoxLayout()
        font_group.setLayout(font_layout)

        ui_font_row = QHBoxLayout()
        ui_font_label = QLabel("UI Font Size (buttons, tables):")
        self.ui_font_spinbox = QSpinBox()
        self.ui_font_spinbox.setRange(8, 24)
        self.ui_font_spinbox.setValue(self._ui_font_size)
        self.ui_font_spinbox.setSuffix(" pt")
        ui_font_row.addWidget(ui_font_label)
        ui_font_row.addStretch()
        ui_font_row.addWidget(self.ui_font_spinbox)
        font_layout.addLayout(ui_font_row)

        preview_font_row = QHBoxLayout()
        preview_font_label = QLabel("Preview Font Size (question preview):")
        self.preview_font_spinbox = QSpinBox()
        self.preview_font_spinbox.setRange(10, 32)
        self.preview_font_spinbox.setValue(self._preview_font_size)
        self.preview_font_spinbox.setSuffix(" pt")
        preview_font_row.addWidget(preview_font_label)
        preview_font_row.addStretch()
        preview_font_row.addWidget(self.preview_font_spinbox)
        font_layout.addLayout(preview_font_row)

        layout.addWidget(font_group)

        # Buttons
        button_row = QHBoxLayout()
        button_row.addStretch()

        self.cancel_button = QPushButton("Cancel")
        self.cancel_button.clicked.connect(self.reject)  # type: ignore[arg-type]
        button_row.addWidget(self.cancel_button)

        self.apply_button = QPushButton("Apply")
        self.apply_button.clicked.connect(self.accept)  # type: ignore[arg-type]
        self.apply_button.setDefault(True)
        button_row.addWidget(self.apply_button)

        layout.addLayout(button_row)

    def get_quiz_time_limit(self) -> int | None:
        """Get the overall limit in seconds, or None when the quiz is untimed."""
        if not self.time_limit_checkbox.isChecked():
            return None
        return self.time_limit_spinbox.value()

    def get_ui_font_size(self) -> int:
        return self.ui_font_spinbox.value()

    def get_preview_font_size(self) -> int:
        return self.preview_font_spinbox.value()
