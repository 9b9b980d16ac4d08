"""Tests for the identity token service."""

import jwt
import pytest

from newsletter_api.entities import EMAIL_CONFIRM_PURPOSE, SESSION_PURPOSE, AuthError, IdentityClaims
from newsletter_api.services import TokenService, bearer_token


def test_issue_and_verify_session_token(tokens, clock):
    token = tokens.issue(42)

    claims = tokens.verify(token)

    assert isinstance(claims, IdentityClaims)
    assert claims.subject_id == 42
    assert claims.purpose == SESSION_PURPOSE
    assert claims.issued_at == int(clock())
    assert claims.expires_at == int(clock()) + 604800


def test_email_confirm_token_defaults_to_one_hour(tokens, clock):
    claims = tokens.verify(tokens.issue(7, purpose=EMAIL_CONFIRM_PURPOSE))

    assert claims.purpose == EMAIL_CONFIRM_PURPOSE
    assert claims.expires_at - claims.issued_at == 3600


@pytest.mark.parametrize("ttl", [1, 60, 3600])
def test_token_valid_until_expiry_boundary(tokens, clock, ttl):
    token = tokens.issue(1, ttl=ttl)

    clock.advance(ttl - 1)
    assert isinstance(tokens.verify(token), IdentityClaims)

    clock.advance(1)
    assert tokens.verify(token) is AuthError.EXPIRED


@pytest.mark.parametrize("token", [None, ""])
def test_missing_token(tokens, token):
    assert tokens.verify(token) is AuthError.MISSING


def test_garbage_token_is_malformed(tokens):
    assert tokens.verify("not-a-token") is AuthError.MALFORMED


def test_tampered_payload_is_malformed(tokens):
    token = tokens.issue(1)
    header, payload, signature = token.split(".")
    forged = jwt.encode({"sub": "2", "purpose": "session", "iat": 0, "exp": 2**40}, "guess", algorithm="HS256")
    forged_payload = forged.split(".")[1]

    assert tokens.verify(f"{header}.{forged_payload}.{signature}") is AuthError.MALFORMED


def test_token_signed_with_other_secret_is_malformed(tokens, clock):
    other = TokenService("another-secret", clock=clock)

    assert tokens.verify(other.issue(1)) is AuthError.MALFORMED


def test_token_without_expiry_is_malformed(tokens):
    token = jwt.encode({"sub": "1", "iat": 0}, "test-secret", algorithm="HS256")

    assert tokens.verify(token) is AuthError.MALFORMED


def test_non_numeric_subject_is_malformed(tokens, clock):
    now = int(clock())
    token = jwt.encode({"sub": "abc", "iat": now, "exp": now + 60}, "test-secret", algorithm="HS256")

    assert tokens.verify(token) is AuthError.MALFORMED


def test_purpose_mismatch(tokens):
    session = tokens.issue(1)
    confirm = tokens.issue(1, purpose=EMAIL_CONFIRM_PURPOSE)

    assert tokens.verify(session, purpose=EMAIL_CONFIRM_PURPOSE) is AuthError.WRONG_PURPOSE
    assert tokens.verify(confirm, purpose=SESSION_PURPOSE) is AuthError.WRONG_PURPOSE


def test_secret_is_not_in_token(tokens):
    token = tokens.issue(1)

    assert "test-secret" not in token
    assert "test-secret" not in str(jwt.decode(token, options={"verify_signature": False}))


def test_issue_rejects_unknown_purpose_without_ttl(tokens):
    with pytest.raises(ValueError):
        tokens.issue(1, purpose="password-reset")

    assert isinstance(tokens.verify(tokens.issue(1, purpose="password-reset", ttl=60)), IdentityClaims)


@pytest.mark.parametrize(
    "header,expected",
    [
        (None, None),
        ("", None),
        ("Bearer abc", "abc"),
        ("bearer abc", "abc"),
        ("Bearer ", None),
        ("Token abc", "Token abc"),
    ],
)
def test_bearer_token(header, expected):
    assert bearer_token(header) == expected
