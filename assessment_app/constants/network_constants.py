"""Network configuration constants for the assessment portal."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
SESSION_COOKIE: str = "assessment_session"
SESSION_COOKIE_MAX_AGE: int = 60 * 60 * 24 * 7
