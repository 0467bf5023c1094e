"""
Password hashing and signed token helpers
"""
import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

import bcrypt
from jose import jwt

from ..config.settings import get_settings

settings = get_settings()

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72

LOGIN_TOKEN = "login"
RESET_TOKEN = "reset"


def hash_password(password: str) -> str:
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise ValueError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes long")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=settings.bcrypt_rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_token(payload: Dict[str, Any], expires_delta: timedelta, token_type: str = LOGIN_TOKEN) -> str:
    """Sign a JWT carrying the payload, its type, a unique ID and an expiry claim."""
    to_encode = dict(payload)
    to_encode["type"] = token_type
    to_encode["jti"] = secrets.token_urlsafe(16)
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def create_login_token(user_info: Dict[str, Any]) -> str:
    return create_token(user_info, timedelta(days=settings.login_token_expiration_days), LOGIN_TOKEN)


def create_password_reset_token(user_info: Dict[str, Any]) -> str:
    return create_token(user_info, timedelta(minutes=settings.password_reset_expiration_minutes), RESET_TOKEN)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry of a JWT

    Raises:
        jose.ExpiredSignatureError: If the token has expired
        jose.JWTError: If the token is malformed or the signature does not match
    """
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])


def hash_reset_token(token: str) -> str:
    """
    Digest of a password reset token, the only form of it that is stored.

    Reset tokens are signed JWTs, well past bcrypt's input limit, so a
    SHA-256 digest is used instead.
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def reset_token_matches(token: str, token_hash: str) -> bool:
    return hmac.compare_digest(hash_reset_token(token), token_hash)
