"""
Password hashing and JWT access/refresh tokens
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Tuple

import bcrypt
import jwt

from cinema.core.config import settings

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


class InvalidTokenError(Exception):
    """Raised when a token cannot be decoded, has expired or has the wrong type"""
    pass


def hash_password(plain_password: str) -> str:
    password_bytes = plain_password.encode('utf-8')
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def create_token(username: str, role: str, token_type: str, expires_minutes: int) -> Tuple[str, datetime]:
    """
    Create a signed token for a user

    Returns:
        (token, expires_at)
    """
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(minutes=expires_minutes)
    payload = {
        'sub': username,
        'role': role,
        'type': token_type,
        'jti': str(uuid.uuid4()),
        'iat': now,
        'exp': expires_at,
    }
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return token, expires_at


def create_access_token(username: str, role: str) -> Tuple[str, datetime]:
    return create_token(username, role, ACCESS_TOKEN, settings.ACCESS_TOKEN_EXPIRE_MINUTES)


def create_refresh_token(username: str, role: str) -> Tuple[str, datetime]:
    return create_token(username, role, REFRESH_TOKEN, settings.REFRESH_TOKEN_EXPIRE_MINUTES)


def decode_token(token: str, expected_type: str) -> Dict[str, Any]:
    """Decode and verify a token, checking signature, expiry and token type"""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise InvalidTokenError("token has expired")
    except jwt.PyJWTError:
        raise InvalidTokenError("token is invalid")

    if payload.get('type') != expected_type or not payload.get('sub'):
        raise InvalidTokenError("token is invalid")

    return payload
