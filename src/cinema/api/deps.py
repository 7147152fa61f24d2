"""
Shared API dependencies: bearer authentication and service error mapping
"""
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cinema.core.database import get_db  # noqa: F401
from cinema.core.security import ACCESS_TOKEN, InvalidTokenError, decode_token
from cinema.services.errors import (
    AlreadyExistsError,
    AuthenticationError,
    CinemaServiceError,
    ConflictError,
    InsufficientCapacityError,
    InvalidInputError,
    NotFoundError,
    ScreeningHasReservationsError,
    SeatAlreadyTakenError,
    UnavailableError,
)

bearer_scheme = HTTPBearer(auto_error=False)

_STATUS_CODES = (
    (InvalidInputError, 400),
    (AuthenticationError, 401),
    (NotFoundError, 404),
    (InsufficientCapacityError, 409),
    (SeatAlreadyTakenError, 409),
    (ConflictError, 409),
    (AlreadyExistsError, 409),
    (ScreeningHasReservationsError, 409),
    (UnavailableError, 503),
)


def get_current_username(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Validate the bearer access token and return its subject"""
    if credentials is None:
        raise HTTPException(
            status_code=401,
            detail="authorization header is not provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_token(credentials.credentials, ACCESS_TOKEN)
    except InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=str(e), headers={"WWW-Authenticate": "Bearer"})
    return payload["sub"]


def http_error(error: CinemaServiceError) -> HTTPException:
    """Translate a service error to the HTTP status it is reported with"""
    for error_type, status_code in _STATUS_CODES:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=500, detail=f"Internal server error: {error}")
