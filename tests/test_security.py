"""Tests for password hashing, verification codes and session tokens."""

from datetime import timedelta

import pytest
from jose import jwt

from app.core.auth import (
    codes_match,
    create_access_token,
    decode_access_token,
    generate_verification_code,
    get_password_hash,
    verify_password,
)
from app.core.config import Settings
from app.core.exceptions import InvalidTokenError


def test_password_hash_roundtrip():
    hashed = get_password_hash("secret123")

    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_password_hash_is_salted():
    assert get_password_hash("same-password") != get_password_hash("same-password")


def test_verify_password_without_hash():
    assert verify_password("anything", "") is False


def test_verification_code_format():
    codes = {generate_verification_code() for _ in range(200)}

    for code in codes:
        assert len(code) == 6
        assert code.isdigit()
        assert 100000 <= int(code) <= 999999
    assert len(codes) > 1


@pytest.mark.parametrize(
    "stored,candidate,expected",
    [
        ("123456", "123456", True),
        ("123456", "654321", False),
        (None, "123456", False),
        ("123456", "", False),
    ],
)
def test_codes_match(stored, candidate, expected):
    assert codes_match(stored, candidate) is expected


def test_token_roundtrip(settings):
    token = create_access_token(42, settings)
    assert decode_access_token(token, settings) == 42

    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    assert payload["sub"] == "42"


def test_expired_token_rejected(settings):
    token = create_access_token(1, settings, expires_delta=timedelta(seconds=-10))

    with pytest.raises(InvalidTokenError):
        decode_access_token(token, settings)


def test_token_signed_with_other_key_rejected(settings):
    other = Settings(secret_key="another-secret")
    token = create_access_token(1, other)

    with pytest.raises(InvalidTokenError):
        decode_access_token(token, settings)


@pytest.mark.parametrize("claims", [{}, {"sub": "not-a-number"}])
def test_token_with_bad_subject_rejected(settings, claims):
    token = jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)

    with pytest.raises(InvalidTokenError):
        decode_access_token(token, settings)
