"""
Service-level exceptions shared by the reservation core and its collaborators
"""
from contextlib import contextmanager
from typing import Iterable

from sqlalchemy.exc import DisconnectionError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError


class CinemaServiceError(Exception):
    """Base exception for cinema service errors"""
    pass


class InvalidInputError(CinemaServiceError):
    """Raised when a request is malformed; detected before any write"""
    pass


class AuthenticationError(CinemaServiceError):
    """Raised when credentials or tokens are rejected"""
    pass


class NotFoundError(CinemaServiceError):
    """Raised when a referenced entity doesn't exist"""
    pass


class MovieNotFoundError(NotFoundError):
    pass


class UserNotFoundError(NotFoundError):
    pass


class ScreeningNotFoundError(NotFoundError):
    pass


class ReservationNotFoundError(NotFoundError):
    pass


class HallNotFoundError(NotFoundError):
    pass


class InsufficientCapacityError(CinemaServiceError):
    """Raised when a screening has fewer free seats than requested"""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"insufficient capacity: requested {requested} seats, {available} available"
        )


class SeatAlreadyTakenError(CinemaServiceError):
    """Raised when a requested seat is already reserved on the screening"""

    def __init__(self, seats: Iterable[str]):
        self.seats = sorted(seats)
        super().__init__(f"seats already taken: {', '.join(self.seats)}")


class ConflictError(CinemaServiceError):
    """Raised when a screening was modified concurrently; safe to retry"""
    pass


class AlreadyExistsError(CinemaServiceError):
    """Raised when a unique entity (user, hall, screening slot) already exists"""
    pass


class ScreeningHasReservationsError(CinemaServiceError):
    """Raised when deleting a screening that reservations still reference"""
    pass


class UnavailableError(CinemaServiceError):
    """Raised on database disconnects and timeouts; safe to retry"""
    pass


class InternalError(CinemaServiceError):
    """Raised on unexpected storage failures"""
    pass


@contextmanager
def translate_db_errors(operation: str, integrity_error: type = None):
    """
    Map SQLAlchemy failures raised inside the block to service errors.

    Constraint violations become `integrity_error` when given, InternalError otherwise.
    """
    try:
        yield
    except IntegrityError as e:
        raise (integrity_error or InternalError)(f"{operation}: conflicting record exists") from e
    except (OperationalError, DisconnectionError, PoolTimeoutError) as e:
        raise UnavailableError(f"{operation}: database unavailable") from e
    except SQLAlchemyError as e:
        raise InternalError(f"{operation}: {type(e).__name__}") from e
