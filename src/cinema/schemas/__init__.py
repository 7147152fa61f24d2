"""
Pydantic schemas for API request/response validation
"""
from cinema.schemas.common import DATE_FORMAT_ERROR, CinemaSchema, MessageResponse, parse_date
from cinema.schemas.hall import HallCreate, HallResponse, HallUpdate
from cinema.schemas.movie import MovieCreate, MovieResponse, MovieUpdate
from cinema.schemas.repertoire import RepertoireCreate, RepertoireResponse, RepertoireUpdate
from cinema.schemas.reservation import (
    ReservationCreate,
    ReservationCreatedResponse,
    ReservationResponse,
)
from cinema.schemas.user import (
    LoginRequest,
    LoginResponse,
    RenewAccessRequest,
    RenewAccessResponse,
    UserCreate,
    UserResponse,
)

__all__ = [
    # Common
    "DATE_FORMAT_ERROR",
    "CinemaSchema",
    "MessageResponse",
    "parse_date",
    # Halls
    "HallCreate",
    "HallUpdate",
    "HallResponse",
    # Movies
    "MovieCreate",
    "MovieUpdate",
    "MovieResponse",
    # Repertoires
    "RepertoireCreate",
    "RepertoireUpdate",
    "RepertoireResponse",
    # Reservations
    "ReservationCreate",
    "ReservationResponse",
    "ReservationCreatedResponse",
    # Users
    "UserCreate",
    "UserResponse",
    "LoginRequest",
    "LoginResponse",
    "RenewAccessRequest",
    "RenewAccessResponse",
]
