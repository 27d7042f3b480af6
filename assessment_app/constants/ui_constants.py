"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "Assessment Portal Admin Console"
PLACEHOLDER_QUESTION: str = "Enter the question text (supports Markdown)."
PLACEHOLDER_RECOMMENDATION: str = "Recommendation shown when the answer is wrong."
USER_URL_PLACEHOLDER: str = "http://<server-ip>:8000/"
RESULTS_REFRESH_INTERVAL_MS: int = 3000

MODE_BUTTON_QUESTIONS: str = "Questions"
MODE_BUTTON_QUIZZES: str = "Quizzes"
MODE_BUTTON_RESULTS: str = "Results"
MODE_BUTTON_IMPORT: str = "Import CSV"
MODE_BUTTON_TEMPLATE: str = "Save CSV Template"

QUESTION_INSERT_BUTTON: str = "Add New Question"
QUESTION_SAVE_BUTTON: str = "Save Question"
QUESTION_DELETE_BUTTON: str = "Delete Question"
QUESTION_PREV_BUTTON: str = "Show Previous Question"
QUESTION_NEXT_BUTTON: str = "Show Next Question"
QUESTION_IMAGE_BUTTON: str = "Attach Image"
QUESTION_CLEAR_IMAGE_BUTTON: str = "Remove Image"

QUIZ_CREATE_BUTTON: str = "New Quiz"
QUIZ_SAVE_BUTTON: str = "Save Quiz Details"
QUIZ_DELETE_BUTTON: str = "Delete Quiz"
QUIZ_MOVE_UP_BUTTON: str = "Move Up"
QUIZ_MOVE_DOWN_BUTTON: str = "Move Down"

IMPORT_DIALOG_TITLE: str = "Select questions CSV"
IMPORT_FILE_FILTER: str = "CSV files (*.csv);;All files (*.*)"
TEMPLATE_DIALOG_TITLE: str = "Save CSV template"
IMAGE_DIALOG_TITLE: str = "Select question image"
IMAGE_FILE_FILTER: str = "Images (*.png *.jpg *.jpeg *.gif *.webp *.svg)"

NO_QUESTIONS_MESSAGE: str = "No questions yet. Add one or import a CSV file."
NO_RESULTS_MESSAGE: str = "No results have been saved yet."
