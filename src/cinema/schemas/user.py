"""
Pydantic schemas for users and tokens
"""
from datetime import datetime
from typing import List

from pydantic import Field

from cinema.schemas.common import USERNAME_PATTERN, CinemaSchema


class UserCreate(CinemaSchema):
    username: str = Field(..., min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    password: str = Field(..., min_length=6, max_length=72)


class UserResponse(CinemaSchema):
    username: str
    roles: List[str]
    created_at: datetime


class LoginRequest(CinemaSchema):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=72)


class LoginResponse(CinemaSchema):
    access_token: str
    access_token_expires_at: datetime
    refresh_token: str
    refresh_token_expires_at: datetime
    user: UserResponse


class RenewAccessRequest(CinemaSchema):
    refresh_token: str


class RenewAccessResponse(CinemaSchema):
    access_token: str
    access_token_expires_at: datetime
