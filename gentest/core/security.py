"""
Password hashing and JWT access tokens.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
import structlog

from gentest.config.settings import settings
from gentest.core.exceptions import AuthError, ConfigurationError

logger = structlog.get_logger()


def hash_password(password: str) -> str:
    if len(password.encode("utf-8")) > 72:
        raise AuthError("A senha deve ter no máximo 72 bytes.")
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def _secret() -> str:
    if not settings.secret_key:
        raise ConfigurationError("SECRET_KEY não configurada.")
    return settings.secret_key


def create_access_token(user_id: str, expires_minutes: Optional[int] = None) -> str:
    """
    Create a signed access token for a user.

    Args:
        user_id: id of the signed-in user (token subject)
        expires_minutes: lifetime override, defaults to settings.access_token_expire_minutes

    Returns:
        str: Encoded JWT
    """
    if expires_minutes is None:
        expires_minutes = settings.access_token_expire_minutes

    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, _secret(), algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[str]:
    """Return the user id carried by a valid token, or None."""
    try:
        payload = jwt.decode(token, _secret(), algorithms=[settings.algorithm], options={"verify_exp": True})
    except jwt.ExpiredSignatureError:
        logger.info("Access token expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.info("Invalid access token", error=str(e))
        return None
    return payload.get("sub")
