from datetime import datetime, timedelta, timezone

from jose import jwt

from src.certifier.utils import security
from src.certifier.utils.security import (
    create_session_token,
    is_valid_session_token,
    verify_admin_credentials,
)

ISSUED = datetime(2025, 7, 16, 9, 30, 0, tzinfo=timezone.utc)


def test_credentials_must_match_exactly(monkeypatch):
    monkeypatch.setattr(security, "ADMIN_USERNAME", "root")
    monkeypatch.setattr(security, "ADMIN_PASSWORD", "s3cret")

    assert verify_admin_credentials("root", "s3cret") is True
    assert verify_admin_credentials("root", "S3cret") is False
    assert verify_admin_credentials("Root", "s3cret") is False
    assert verify_admin_credentials("root ", "s3cret") is False
    assert verify_admin_credentials("", "") is False


def test_token_valid_just_before_expiry():
    token = create_session_token(now=ISSUED)
    assert is_valid_session_token(token, now=ISSUED + timedelta(hours=23, minutes=59)) is True


def test_token_invalid_just_after_expiry():
    token = create_session_token(now=ISSUED)
    assert is_valid_session_token(token, now=ISSUED + timedelta(hours=24, minutes=1)) is False


def test_token_issued_in_the_future_is_rejected():
    token = create_session_token(now=ISSUED + timedelta(hours=1))
    assert is_valid_session_token(token, now=ISSUED) is False


def test_tokens_are_unique():
    assert create_session_token(now=ISSUED) != create_session_token(now=ISSUED)


def test_malformed_or_missing_tokens_are_invalid():
    assert is_valid_session_token(None) is False
    assert is_valid_session_token("") is False
    assert is_valid_session_token("1721122200000_abc123") is False


def test_token_signed_with_another_key_is_invalid():
    forged = jwt.encode({"sub": "admin", "iat": int(ISSUED.timestamp())}, "not-the-key", algorithm="HS256")
    assert is_valid_session_token(forged, now=ISSUED) is False
