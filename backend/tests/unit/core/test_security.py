"""
Unit Tests for Security Module
Tests for: password hashing, JWT tokens
"""
import pytest
from datetime import datetime, timedelta, timezone
from jose import jwt

from certtrack.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    decode_token,
)
from certtrack.core.config import settings
from certtrack.core.exceptions import InvalidTokenError


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_password_returns_different_value(self):
        password = "user123"
        hashed = get_password_hash(password)

        assert hashed != password
        assert hashed.startswith("$2")

    def test_hash_password_different_each_time(self):
        """Bcrypt salts every hash"""
        assert get_password_hash("user123") != get_password_hash("user123")

    def test_verify_password_correct(self):
        hashed = get_password_hash("admin123")

        assert verify_password("admin123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = get_password_hash("admin123")

        assert verify_password("admin124", hashed) is False

    def test_hash_long_password_truncated(self):
        """Passwords beyond bcrypt's 72 byte limit still verify"""
        long_password = "a" * 100
        hashed = get_password_hash(long_password)

        assert verify_password(long_password, hashed) is True

    def test_verify_against_empty_hash(self):
        assert verify_password("anything", "") is False

    def test_verify_against_non_bcrypt_value(self):
        """A plain-text value in the hash column never matches"""
        assert verify_password("user123", "user123") is False


class TestAccessToken:
    """Test access token functions"""

    def test_access_token_has_type(self):
        token = create_access_token({"sub": "user-1"})

        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert payload["type"] == "access"

    def test_access_token_includes_data(self):
        token = create_access_token({"sub": "user-1", "username": "john", "role": "user"})

        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert payload["sub"] == "user-1"
        assert payload["username"] == "john"
        assert payload["role"] == "user"

    def test_create_access_token_with_expiry(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(hours=1))

        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        exp = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        remaining = (exp - datetime.now(timezone.utc)).total_seconds()

        assert 3500 < remaining < 3700


class TestDecodeToken:
    """Test token decoding"""

    def test_decode_valid_token(self):
        token = create_access_token({"sub": "user-1"})

        assert decode_token(token)["sub"] == "user-1"

    def test_decode_invalid_token(self):
        with pytest.raises(InvalidTokenError) as exc_info:
            decode_token("invalid_token_string")

        assert exc_info.value.status_code == 401
        assert exc_info.value.code == "INVALID_TOKEN"

    def test_decode_expired_token(self):
        expired_token = jwt.encode(
            {"sub": "user-1", "exp": datetime.now(timezone.utc) - timedelta(hours=1), "type": "access"},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM
        )

        with pytest.raises(InvalidTokenError):
            decode_token(expired_token)

    def test_decode_token_wrong_secret(self):
        token = jwt.encode({"sub": "user-1"}, "some-other-secret", algorithm=settings.JWT_ALGORITHM)

        with pytest.raises(InvalidTokenError):
            decode_token(token)
