"""
Tests for password hashing and session token primitives
"""
from datetime import datetime, timedelta, timezone

from jose import jwt

from storefront.login_service.config import settings
from storefront.login_service.security import (
    create_session_token,
    decode_session_token,
    hash_password,
    hash_token,
    verify_password,
)


def test_password_hash_verifies():
    password_hash = hash_password("secret123")

    assert password_hash != "secret123"
    assert verify_password("secret123", password_hash)
    assert not verify_password("wrong", password_hash)


def test_verify_password_rejects_malformed_hash():
    assert verify_password("secret123", "not-a-bcrypt-hash") is False


def test_session_token_carries_user_claims():
    token, expires_at = create_session_token(7, "alice", "alice@example.com")
    payload = decode_session_token(token)

    assert payload["user_id"] == 7
    assert payload["username"] == "alice"
    assert payload["email"] == "alice@example.com"
    assert payload["exp"] == int(expires_at.timestamp())
    assert expires_at - datetime.now(timezone.utc) > timedelta(hours=settings.SESSION_TTL_HOURS - 1)


def test_tokens_issued_together_differ():
    first, _ = create_session_token(7, "alice", "alice@example.com")
    second, _ = create_session_token(7, "alice", "alice@example.com")

    assert first != second


def test_tampered_token_is_rejected():
    token, _ = create_session_token(7, "alice", "alice@example.com")
    forged = jwt.encode(
        {"user_id": 1, "username": "admin", "email": "admin@example.com"},
        "another-secret",
        algorithm=settings.JWT_ALGORITHM
    )

    header, _, signature = token.split(".")
    _, other_payload, _ = forged.split(".")

    assert decode_session_token(f"{header}.{other_payload}.{signature}") is None
    assert decode_session_token(forged) is None
    assert decode_session_token("garbage") is None


def test_expired_token_is_rejected():
    past = datetime.now(timezone.utc) - timedelta(hours=1)
    token = jwt.encode(
        {
            "user_id": 7,
            "username": "alice",
            "email": "alice@example.com",
            "iat": int((past - timedelta(hours=1)).timestamp()),
            "exp": int(past.timestamp()),
        },
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM
    )

    assert decode_session_token(token) is None


def test_hash_token_is_stable_sha256():
    digest = hash_token("abc")

    assert digest == hash_token("abc")
    assert digest != hash_token("abd")
    assert len(digest) == 64
