"""Qt UI components for the admin console."""

from .admin_main_window import AdminMainWindow
from .dialog_helpers import (
    check_unsaved_changes,
    confirm_delete_question,
    confirm_delete_quiz,
    show_error,
    show_info,
    show_warning,
)
from .question_renderer import render_question_with_options

__all__ = [
    "AdminMainWindow",
    "check_unsaved_changes",
    "confirm_delete_question",
    "confirm_delete_quiz",
    "show_error",
    "show_info",
    "show_warning",
    "render_question_with_options",
]
