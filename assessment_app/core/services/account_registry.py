"""Service for user accounts, sign-in tokens and roles."""

from __future__ import annotations

import re
import secrets
from uuid import uuid4

from werkzeug.security import check_password_hash, generate_password_hash

from assessment_app.constants.quiz_constants import ADMIN_EMAILS, MIN_PASSWORD_LENGTH
from assessment_app.core.models import UserAccount

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AccountRegistry:
    """Registers users and maps sign-in tokens back to their accounts."""

    def __init__(self, admin_emails: tuple[str, ...] = ADMIN_EMAILS) -> None:
        self._admin_emails = {email.lower() for email in admin_emails}
        self._accounts: dict[str, UserAccount] = {}
        self._ids_by_email: dict[str, str] = {}
        self._tokens: dict[str, str] = {}

    def sign_up(self, email: str, password: str) -> UserAccount:
        normalized = self._normalize_email(email)
        if normalized in self._ids_by_email:
            raise ValueError("An account with this e-mail already exists.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must contain at least {MIN_PASSWORD_LENGTH} characters.")

        account = UserAccount(
            id=uuid4().hex,
            email=normalized,
            role="admin" if normalized in self._admin_emails else "user",
            password_hash=generate_password_hash(password),
        )
        self._accounts[account.id] = account
        self._ids_by_email[normalized] = account.id
        return account

    def sign_in(self, email: str, password: str) -> tuple[UserAccount, str]:
        """Check credentials and return the account with a fresh token."""
        account_id = self._ids_by_email.get(email.strip().lower())
        account = self._accounts.get(account_id) if account_id else None
        if account is None or not check_password_hash(account.password_hash, password):
            raise PermissionError("Invalid e-mail or password.")
        token = secrets.token_urlsafe(32)
        self._tokens[token] = account.id
        return account, token

    def sign_out(self, token: str) -> None:
        self._tokens.pop(token, None)

    def resolve(self, token: str | None) -> UserAccount | None:
        if not token:
            return None
        account_id = self._tokens.get(token)
        return self._accounts.get(account_id) if account_id else None

    def get(self, user_id: str) -> UserAccount:
        try:
            return self._accounts[user_id]
        except KeyError:
            raise LookupError(f"User {user_id} does not exist.") from None

    def list(self) -> list[UserAccount]:
        return sorted(self._accounts.values(), key=lambda a: a.created_at)

    def set_role(self, user_id: str, role: str) -> UserAccount:
        if role not in ("admin", "user"):
            raise ValueError("Role must be 'admin' or 'user'.")
        account = self.get(user_id)
        account.role = role
        return account

    @staticmethod
    def _normalize_email(email: str) -> str:
        normalized = email.strip().lower()
        if not _EMAIL_PATTERN.match(normalized):
            raise ValueError("Please enter a valid e-mail address.")
        return normalized
