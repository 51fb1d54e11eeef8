from datetime import timedelta

import pytest
from jose import ExpiredSignatureError

from storefront.core import security
from storefront.core.errors import AuthenticationError, BadRequestError, ConflictError, NotFoundError
from storefront.schemas import AuthUser
from storefront.services import users


def test_signup_then_authenticate(ctx):
    created = users.signup(ctx, "new@example.com", "secret123", "New")
    row = ctx.db.execute("SELECT password_hash FROM users WHERE id = ?", [created.id])[0]

    assert row["password_hash"] != "secret123"
    assert users.authenticate(ctx, "new@example.com", "secret123") == created
    with pytest.raises(AuthenticationError):
        users.authenticate(ctx, "new@example.com", "wrong-password")
    with pytest.raises(AuthenticationError):
        users.authenticate(ctx, "nobody@example.com", "secret123")


@pytest.mark.parametrize(
    "email, password, name",
    [
        (None, "secret123", "A"),
        ("a@example.com", "", "A"),
        ("not-an-email", "secret123", "A"),
        ("a@example.com", "short", "A"),
    ],
)
def test_signup_validation(ctx, email, password, name):
    with pytest.raises(BadRequestError):
        users.signup(ctx, email, password, name)


def test_signup_twice(ctx):
    users.signup(ctx, "dup@example.com", "secret123", "Dup")
    with pytest.raises(ConflictError):
        users.signup(ctx, "dup@example.com", "secret123", "Dup")


def test_get_user(ctx):
    created = users.signup(ctx, "me@example.com", "secret123", "Me")
    assert users.get_user(ctx, created.id).email == "me@example.com"
    with pytest.raises(NotFoundError):
        users.get_user(ctx, 999)


def test_token_carries_identity(ctx):
    user = AuthUser(id=7, email="t@example.com", name="Token")
    token = users.issue_token(ctx, user)
    assert security.decode_access_token(token, "test-secret", "HS256") == user


def test_expired_token(ctx):
    user = AuthUser(id=7, email="t@example.com", name="Token")
    token = security.create_access_token(user, "test-secret", "HS256", timedelta(seconds=-5))
    with pytest.raises(ExpiredSignatureError):
        security.decode_access_token(token, "test-secret", "HS256")
