import pytest

from gentest.config.settings import settings
from gentest.core.exceptions import AuthError, ConfigurationError
from gentest.core.security import create_access_token, decode_access_token, hash_password, verify_password


def test_password_hash_roundtrip():
    hashed = hash_password("secret123")

    assert hashed != "secret123"
    assert verify_password("secret123", hashed) is True
    assert verify_password("wrong", hashed) is False


def test_malformed_hash_does_not_verify():
    assert verify_password("secret123", "not-a-bcrypt-hash") is False


def test_token_carries_user_id():
    token = create_access_token("user-1")

    assert decode_access_token(token) == "user-1"


def test_expired_token_is_rejected():
    token = create_access_token("user-1", expires_minutes=-1)

    assert decode_access_token(token) is None


def test_garbage_token_is_rejected():
    assert decode_access_token("abc.def.ghi") is None


def test_missing_secret_key(monkeypatch):
    monkeypatch.setattr(settings, "secret_key", None)

    with pytest.raises(ConfigurationError):
        create_access_token("user-1")


def test_password_over_bcrypt_limit_is_an_auth_error():
    with pytest.raises(AuthError):
        hash_password("a" * 73)


def test_over_long_password_does_not_verify():
    assert verify_password("a" * 100, hash_password("secret123")) is False
