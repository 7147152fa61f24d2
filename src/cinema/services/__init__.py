"""
Business logic services
"""
from cinema.services.errors import (
    AlreadyExistsError,
    AuthenticationError,
    CinemaServiceError,
    ConflictError,
    HallNotFoundError,
    InsufficientCapacityError,
    InternalError,
    InvalidInputError,
    MovieNotFoundError,
    NotFoundError,
    ReservationNotFoundError,
    ScreeningHasReservationsError,
    ScreeningNotFoundError,
    SeatAlreadyTakenError,
    UnavailableError,
    UserNotFoundError,
)
from cinema.services.cache_service import CacheService
from cinema.services.entity_store import EntityStore
from cinema.services.hall_service import HallService
from cinema.services.movie_service import MovieService
from cinema.services.repertoire_service import RepertoireService
from cinema.services.reservation_service import ReservationService
from cinema.services.user_service import UserService

__all__ = [
    # Services
    "CacheService",
    "EntityStore",
    "HallService",
    "MovieService",
    "RepertoireService",
    "ReservationService",
    "UserService",
    # Errors
    "CinemaServiceError",
    "InvalidInputError",
    "AuthenticationError",
    "NotFoundError",
    "MovieNotFoundError",
    "UserNotFoundError",
    "ScreeningNotFoundError",
    "ReservationNotFoundError",
    "HallNotFoundError",
    "InsufficientCapacityError",
    "SeatAlreadyTakenError",
    "ConflictError",
    "AlreadyExistsError",
    "ScreeningHasReservationsError",
    "UnavailableError",
    "InternalError",
]
