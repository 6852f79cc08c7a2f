"""Tests for bearer token issuance and verification."""
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from app.auth.models import User
from app.auth.tokens import TokenService
from app.config import AuthSettings
from app.errors import AuthenticationError

SECRET = "unit-test-secret"


@pytest.fixture
def tokens():
    return TokenService(secret_key=SECRET)


@pytest.fixture
def user():
    return User(id="5f0c6a52-3f5e-4a8e-9d43-2f1f3f0f7a11", name="Alice", email="alice@example.com", token_version=2)


def test_issue_and_verify(tokens, user):
    token, expire = tokens.issue(user)

    claims = tokens.verify(token)

    assert claims.user_id == user.id
    assert claims.version == 2
    assert abs((claims.exp - expire).total_seconds()) < 1


def test_default_lifetime_is_seven_days(tokens, user):
    _, expire = tokens.issue(user)

    remaining = expire - datetime.now(timezone.utc)
    assert timedelta(days=6, hours=23) < remaining <= timedelta(days=7)


def test_expired_token(tokens, user):
    token, _ = tokens.issue(user, expires_delta=timedelta(seconds=-10))

    with pytest.raises(AuthenticationError, match="Token has expired"):
        tokens.verify(token)


def test_token_signed_with_other_secret(tokens, user):
    token, _ = TokenService(secret_key="some-other-secret").issue(user)

    with pytest.raises(AuthenticationError, match="Invalid token"):
        tokens.verify(token)


def test_malformed_token(tokens):
    with pytest.raises(AuthenticationError, match="Invalid token"):
        tokens.verify("not-a-jwt")


def test_wrong_token_type(tokens, user):
    exp = datetime.now(timezone.utc) + timedelta(hours=1)
    token = jwt.encode({"sub": user.id, "exp": exp, "type": "refresh"}, SECRET, algorithm="HS256")

    with pytest.raises(AuthenticationError, match="Invalid token"):
        tokens.verify(token)


def test_missing_subject(tokens):
    exp = datetime.now(timezone.utc) + timedelta(hours=1)
    token = jwt.encode({"exp": exp, "type": "access"}, SECRET, algorithm="HS256")

    with pytest.raises(AuthenticationError, match="Invalid token"):
        tokens.verify(token)


@pytest.mark.parametrize("secret", [None, "", "   "])
def test_missing_secret_is_rejected(secret):
    with pytest.raises(RuntimeError, match="AUTHNOTES_SECRET_KEY"):
        AuthSettings(secret_key=secret).require_secret_key()
