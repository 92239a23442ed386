"""
SmartNotesX Backend — Password Hashing & Token Tests
======================================================

What we test:
    ✅ Hashes verify against the original password only
    ✅ Tokens round-trip the user id and role
    ✅ Expired, tampered and foreign-key tokens raise AuthError
"""

import uuid
from datetime import timedelta

import pytest
from jose import jwt

from smartnotes.config import Settings
from smartnotes.exceptions import AuthError
from smartnotes.security import create_access_token, decode_token, hash_password, verify_password


@pytest.fixture
def jwt_settings():
    return Settings(jwt_secret_key="unit-test-secret")


class TestPasswordHashing:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("secret123")
        assert hashed != "secret123"
        assert hashed.startswith("$argon2")

    def test_verify_accepts_correct_password(self):
        assert verify_password("secret123", hash_password("secret123"))

    def test_verify_rejects_wrong_password(self):
        assert not verify_password("secret124", hash_password("secret123"))


class TestAccessTokens:
    def test_round_trip(self, jwt_settings):
        user_id = uuid.uuid4()
        token = create_access_token(jwt_settings, user_id, "student")

        claims = decode_token(jwt_settings, token)

        assert claims["sub"] == user_id
        assert claims["role"] == "student"
        assert "exp" in claims

    def test_expired_token_rejected(self, jwt_settings):
        token = create_access_token(
            jwt_settings,
            uuid.uuid4(),
            "student",
            expires_delta=timedelta(seconds=-5),
        )
        with pytest.raises(AuthError):
            decode_token(jwt_settings, token)

    def test_token_signed_with_other_secret_rejected(self, jwt_settings):
        other = Settings(jwt_secret_key="someone-else")
        token = create_access_token(other, uuid.uuid4(), "admin")
        with pytest.raises(AuthError):
            decode_token(jwt_settings, token)

    def test_garbage_token_rejected(self, jwt_settings):
        with pytest.raises(AuthError):
            decode_token(jwt_settings, "not.a.jwt")

    def test_non_uuid_subject_rejected(self, jwt_settings):
        token = jwt.encode(
            {"sub": "user-42", "role": "student"},
            jwt_settings.jwt_secret_key,
            algorithm=jwt_settings.jwt_algorithm,
        )
        with pytest.raises(AuthError):
            decode_token(jwt_settings, token)
