from __future__ import annotations

import pytest

from assessment_app.core.services.account_registry import AccountRegistry


def test_sign_up_assigns_roles_from_admin_list():
    registry = AccountRegistry(admin_emails=("Boss@Example.com",))

    admin = registry.sign_up("boss@example.com", "secret1")
    user = registry.sign_up("  Someone@Example.com ", "secret2")

    assert admin.is_admin
    assert user.role == "user"
    assert user.email == "someone@example.com"
    assert user.password_hash != "secret2"


@pytest.mark.parametrize(
    ("email", "password"),
    [("not-an-email", "secret1"), ("a@b.co", "short")],
)
def test_sign_up_validation(email, password):
    registry = AccountRegistry(admin_emails=())
    with pytest.raises(ValueError):
        registry.sign_up(email, password)


def test_duplicate_email_is_rejected():
    registry = AccountRegistry(admin_emails=())
    registry.sign_up("a@b.co", "secret1")
    with pytest.raises(ValueError):
        registry.sign_up("A@B.CO", "secret2")


def test_sign_in_issues_tokens_that_resolve():
    registry = AccountRegistry(admin_emails=())
    account = registry.sign_up("a@b.co", "secret1")

    signed_in, token = registry.sign_in("A@b.co", "secret1")

    assert signed_in is account
    assert registry.resolve(token) is account
    registry.sign_out(token)
    assert registry.resolve(token) is None
    assert registry.resolve(None) is None


def test_wrong_password_is_rejected():
    registry = AccountRegistry(admin_emails=())
    registry.sign_up("a@b.co", "secret1")
    with pytest.raises(PermissionError):
        registry.sign_in("a@b.co", "wrong-password")
    with pytest.raises(PermissionError):
        registry.sign_in("missing@b.co", "secret1")


def test_set_role():
    registry = AccountRegistry(admin_emails=())
    account = registry.sign_up("a@b.co", "secret1")

    assert registry.set_role(account.id, "admin").is_admin
    with pytest.raises(ValueError):
        registry.set_role(account.id, "owner")
    with pytest.raises(LookupError):
        registry.set_role("missing", "user")
