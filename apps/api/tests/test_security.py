from datetime import datetime, timezone

import jwt
import pytest

from hrdesk.core.security import (
    as_utc,
    create_access_token,
    decode_token,
    hash_password,
    random_token_string,
    verify_password,
)


def test_password_hash_roundtrip():
    hashed = hash_password("s3cret!")
    assert hashed != "s3cret!"
    assert verify_password("s3cret!", hashed)
    assert not verify_password("wrong", hashed)


def test_verify_password_tolerates_bad_hashes():
    assert verify_password("anything", None) is False
    assert verify_password("anything", "not-a-bcrypt-hash") is False


def test_access_token_claims():
    token = create_access_token(7, "a@example.com", "Admin", employee_id=3)
    payload = decode_token(token)
    assert payload["sub"] == "7"
    assert payload["id"] == 7
    assert payload["role"] == "Admin"
    assert payload["employeeId"] == 3
    assert payload["exp"] > payload["iat"]


def test_expired_access_token_raises():
    token = create_access_token(1, "a@example.com", "User", expires_min=-1)
    with pytest.raises(jwt.ExpiredSignatureError):
        decode_token(token)


def test_token_signed_with_another_secret_raises():
    token = jwt.encode({"sub": "1", "exp": 9999999999}, "some-other-secret-with-at-least-32-bytes", algorithm="HS256")
    with pytest.raises(jwt.InvalidTokenError):
        decode_token(token)


def test_random_token_string_is_80_hex_chars():
    token = random_token_string()
    assert len(token) == 80
    int(token, 16)
    assert token != random_token_string()


def test_as_utc_attaches_timezone_to_naive_values():
    naive = datetime(2024, 1, 1, 12, 0)
    assert as_utc(naive).tzinfo is timezone.utc
    aware = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert as_utc(aware) is aware
    assert as_utc(None) is None
