"""
Reservation Service - the seat reservation transaction

Creation and cancellation each change exactly one screening and one
reservation, inside one database transaction. The screening row is written
with an optimistic version check; a transaction that loses the race is rolled
back and re-run from its first read.
"""
import logging
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cinema.core.config import settings
from cinema.core.metrics import (
    record_reservation_failure,
    reservation_conflicts_total,
    reservations_cancelled_total,
    reservations_created_total,
    track_time,
)
from cinema.core.retry import RetryConfig, retry_sync
from cinema.models import Repertoire, Reservation
from cinema.services import seat_ledger
from cinema.services.cache_service import CacheService
from cinema.services.entity_store import EntityStore
from cinema.services.errors import (
    CinemaServiceError,
    ConflictError,
    InternalError,
    MovieNotFoundError,
    ReservationNotFoundError,
    ScreeningNotFoundError,
    UserNotFoundError,
    translate_db_errors,
)
from cinema.services.seat_ledger import SeatState

logger = logging.getLogger(__name__)


def _seat_state(screening: Repertoire) -> SeatState:
    return SeatState(
        capacity=screening.num_of_tickets,
        reserved_count=screening.num_of_res_tickets,
        reserved_seats=tuple(screening.reserv_seats or ()),
    )


def _retry_config() -> RetryConfig:
    return RetryConfig(
        max_retries=settings.RESERVATION_MAX_RETRIES,
        initial_delay=settings.RESERVATION_RETRY_DELAY,
    )


def _conflict_observer(operation: str):
    def on_retry(error: Exception):
        reservation_conflicts_total.labels(operation=operation).inc()
    return on_retry


class ReservationService:
    """Service for creating and cancelling reservations"""

    @staticmethod
    @track_time("create")
    def create_reservation(
        db: Session,
        username: str,
        movie_id: int,
        date,
        time: str,
        hall: str,
        seats: Sequence[str],
        idempotency_key: Optional[str] = None,
    ) -> Reservation:
        """
        Reserve seats on a screening and record the reservation.

        A request repeating an idempotency key returns the reservation stored
        under that key instead of reserving again.

        Raises:
            MovieNotFoundError, UserNotFoundError, ScreeningNotFoundError
            InvalidInputError: empty or duplicate seat list
            InsufficientCapacityError, SeatAlreadyTakenError
            ConflictError: still losing the race after all retries
            UnavailableError, InternalError
        """
        # An empty key means no key
        idempotency_key = idempotency_key or None

        try:
            reservation, created = retry_sync(
                ReservationService._create_once,
                db, username, movie_id, date, time, hall, list(seats), idempotency_key,
                config=_retry_config(),
                retry_on_exceptions=(ConflictError,),
                on_retry=_conflict_observer("create"),
            )
        except CinemaServiceError as e:
            record_reservation_failure("create", e)
            logger.warning(
                f"Reservation rejected: {e}",
                extra={"username": username, "error_type": type(e).__name__},
            )
            raise

        if not created:
            logger.info(
                f"Replayed reservation {reservation.id} for idempotency key",
                extra={"username": username, "reservation_id": reservation.id},
            )
            return reservation

        reservations_created_total.inc()
        CacheService.invalidate_repertoire(reservation.movie_id, reservation.repertoire_id)
        logger.info(
            f"Reservation {reservation.id} created: seats {reservation.reserv_seats}",
            extra={
                "username": username,
                "reservation_id": reservation.id,
                "repertoire_id": reservation.repertoire_id,
            },
        )
        return reservation

    @staticmethod
    def _create_once(
        db: Session,
        username: str,
        movie_id: int,
        date,
        time: str,
        hall: str,
        seats: List[str],
        idempotency_key: Optional[str],
    ) -> Tuple[Reservation, bool]:
        try:
            with translate_db_errors("create reservation"):
                with db.begin():
                    store = EntityStore(db)

                    # 0. Replay a request that already committed
                    if idempotency_key:
                        existing = store.get_reservation_by_idempotency_key(idempotency_key)
                        if existing:
                            return existing, False

                    # 1-3. Read everything the reservation depends on
                    movie = store.get_movie_by_id(movie_id)
                    if not movie:
                        raise MovieNotFoundError(f"movie {movie_id} not found")

                    user = store.get_user_by_username(username)
                    if not user:
                        raise UserNotFoundError(f"user {username} not found")

                    screening = store.get_screening(movie_id, date, time, hall)
                    if not screening:
                        raise ScreeningNotFoundError(
                            f"no screening of movie {movie_id} on {date} at {time} in hall {hall}"
                        )

                    # 4. Seat decision on the snapshot read above
                    decision = seat_ledger.reserve(_seat_state(screening), seats)

                    # 5. Version-checked write of the new seat state
                    store.update_screening_seats(
                        screening,
                        decision.state.reserved_count,
                        decision.state.reserved_seats,
                    )

                    # 6-7. Reservation with fields copied at creation time
                    reservation = Reservation(
                        username=user.username,
                        user_id=user.id,
                        movie_id=movie.id,
                        movie_title=movie.title,
                        repertoire_id=screening.id,
                        date=screening.date,
                        time=screening.time,
                        hall=screening.hall,
                        creation_date=datetime.utcnow(),
                        reserv_seats=list(decision.accepted_seats),
                        idempotency_key=idempotency_key,
                    )
                    store.insert_reservation(reservation)

                return reservation, True

        except InternalError as e:
            # A concurrent request with the same key committed first
            if idempotency_key and isinstance(e.__cause__, IntegrityError):
                existing = ReservationService._find_by_idempotency_key(db, idempotency_key)
                if existing:
                    return existing, False
            raise

    @staticmethod
    def _find_by_idempotency_key(db: Session, key: str) -> Optional[Reservation]:
        with translate_db_errors("replay reservation"):
            with db.begin():
                return EntityStore(db).get_reservation_by_idempotency_key(key)

    @staticmethod
    @track_time("cancel")
    def cancel_reservation(db: Session, reservation_id: int) -> Reservation:
        """
        Delete a reservation and release its seats on the screening.

        Returns the deleted reservation.
        """
        try:
            reservation = retry_sync(
                ReservationService._cancel_once,
                db, reservation_id,
                config=_retry_config(),
                retry_on_exceptions=(ConflictError,),
                on_retry=_conflict_observer("cancel"),
            )
        except CinemaServiceError as e:
            record_reservation_failure("cancel", e)
            logger.warning(
                f"Cancellation of reservation {reservation_id} failed: {e}",
                extra={"reservation_id": reservation_id, "error_type": type(e).__name__},
            )
            raise

        reservations_cancelled_total.inc()
        CacheService.invalidate_repertoire(reservation.movie_id, reservation.repertoire_id)
        logger.info(
            f"Reservation {reservation_id} cancelled: released {reservation.reserv_seats}",
            extra={
                "username": reservation.username,
                "reservation_id": reservation_id,
                "repertoire_id": reservation.repertoire_id,
            },
        )
        return reservation

    @staticmethod
    def _cancel_once(db: Session, reservation_id: int) -> Reservation:
        with translate_db_errors("cancel reservation"):
            with db.begin():
                store = EntityStore(db)

                reservation = store.get_reservation_by_id(reservation_id)
                if not reservation:
                    raise ReservationNotFoundError(f"reservation {reservation_id} not found")

                screening = store.get_screening_by_id(reservation.repertoire_id)
                if not screening:
                    raise ScreeningNotFoundError(
                        f"screening {reservation.repertoire_id} of reservation {reservation_id} not found"
                    )

                state = seat_ledger.release(_seat_state(screening), reservation.reserv_seats)
                store.update_screening_seats(screening, state.reserved_count, state.reserved_seats)
                store.delete_reservation(reservation)

            return reservation

    @staticmethod
    def list_reservations_for_user(db: Session, username: str) -> List[Reservation]:
        """All reservations of a user, newest first"""
        with translate_db_errors("list reservations"):
            return EntityStore(db).list_reservations_for_user(username)
