"""Static metadata describing the assessment portal."""

APP_NAME = "Assessment Portal"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "Assessment Portal is an online testing tool built with Qt and FastAPI. "
    "Administrators author multiple-choice questions and compose quizzes here, "
    "users take timed quizzes in the browser and receive recommendations for every missed question."
)

HELP_TEXT = (
    "Create questions one by one in the Questions view, or import many at once from a CSV file. "
    "Use 'Save CSV Template' to get a file with the expected columns:\n\n"
    "category,question,option1,option2,option3,option4,correct_option,level,score,recommendation,question_time_limit\n\n"
    "correct_option counts from 0 (the first option). Leave question_time_limit empty for an untimed question. "
    "The overall quiz time limit is set in Settings; a quiz can override it in the Quizzes view."
)
