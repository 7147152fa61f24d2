"""Users and tokens API endpoints (no bearer token required)"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cinema.api.deps import get_db, http_error
from cinema.schemas import (
    LoginRequest,
    LoginResponse,
    RenewAccessRequest,
    RenewAccessResponse,
    UserCreate,
    UserResponse,
)
from cinema.services import CinemaServiceError, UserService

router = APIRouter()


@router.post("/users", response_model=UserResponse, status_code=201)
def register_user(user_data: UserCreate, db: Session = Depends(get_db)):
    try:
        return UserService.register(db, user_data)
    except CinemaServiceError as e:
        raise http_error(e)


@router.post("/users/login", response_model=LoginResponse)
def login_user(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Exchange username and password for an access and a refresh token"""
    try:
        return UserService.login(db, credentials.username, credentials.password)
    except CinemaServiceError as e:
        raise http_error(e)


@router.post("/tokens/renew_access", response_model=RenewAccessResponse)
def renew_access_token(request_data: RenewAccessRequest):
    try:
        return UserService.renew_access(request_data.refresh_token)
    except CinemaServiceError as e:
        raise http_error(e)
