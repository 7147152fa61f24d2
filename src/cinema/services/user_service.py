"""
User Service - registration, login and access token renewal
"""
import logging
import re
from typing import Any, Dict

from sqlalchemy.orm import Session

from cinema.core.security import (
    REFRESH_TOKEN,
    InvalidTokenError,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from cinema.models import User
from cinema.schemas import UserCreate
from cinema.schemas.common import USERNAME_PATTERN
from cinema.services.entity_store import EntityStore
from cinema.services.errors import (
    AlreadyExistsError,
    AuthenticationError,
    InvalidInputError,
    UserNotFoundError,
    translate_db_errors,
)

logger = logging.getLogger(__name__)

_USERNAME_RE = re.compile(USERNAME_PATTERN)


class UserService:

    @staticmethod
    def register(db: Session, data: UserCreate) -> User:
        password_hash = hash_password(data.password)

        with translate_db_errors("register user", integrity_error=AlreadyExistsError):
            with db.begin():
                store = EntityStore(db)
                if store.get_user_by_username(data.username):
                    raise AlreadyExistsError(f"user {data.username} already exists")
                user = store.add(User(
                    username=data.username,
                    password_hash=password_hash,
                    roles=["user"],
                ))

        logger.info(f"User {user.username} registered", extra={"username": user.username})
        return user

    @staticmethod
    def authenticate(db: Session, username: str, password: str) -> User:
        if not _USERNAME_RE.match(username):
            raise InvalidInputError("invalid username")

        with translate_db_errors("authenticate user"):
            user = EntityStore(db).get_user_by_username(username)
        if not user:
            raise UserNotFoundError("user not found")

        if not verify_password(password, user.password_hash):
            logger.warning("Login failed: wrong password", extra={"username": username})
            raise AuthenticationError("incorrect username or password")

        return user

    @staticmethod
    def login(db: Session, username: str, password: str) -> Dict[str, Any]:
        """Authenticate and issue an access/refresh token pair"""
        user = UserService.authenticate(db, username, password)

        access_token, access_expires = create_access_token(user.username, user.primary_role)
        refresh_token, refresh_expires = create_refresh_token(user.username, user.primary_role)

        logger.info("User logged in", extra={"username": user.username})
        return {
            "access_token": access_token,
            "access_token_expires_at": access_expires,
            "refresh_token": refresh_token,
            "refresh_token_expires_at": refresh_expires,
            "user": user,
        }

    @staticmethod
    def renew_access(refresh_token: str) -> Dict[str, Any]:
        """Exchange a valid refresh token for a new access token"""
        try:
            payload = decode_token(refresh_token, REFRESH_TOKEN)
        except InvalidTokenError as e:
            raise AuthenticationError(str(e)) from e

        access_token, access_expires = create_access_token(payload["sub"], payload.get("role", "user"))
        return {
            "access_token": access_token,
            "access_token_expires_at": access_expires,
        }
