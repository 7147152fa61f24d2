"""
Repertoire Service - screening schedule administration with Redis caching

Seat state (num_of_res_tickets, reserv_seats) is owned by ReservationService
and is never written here.
"""
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from cinema.models import Repertoire
from cinema.schemas import RepertoireCreate, RepertoireResponse, RepertoireUpdate
from cinema.services.cache_service import CacheService
from cinema.services.entity_store import EntityStore
from cinema.services.errors import (
    AlreadyExistsError,
    HallNotFoundError,
    InvalidInputError,
    MovieNotFoundError,
    ScreeningHasReservationsError,
    ScreeningNotFoundError,
    translate_db_errors,
)

logger = logging.getLogger(__name__)


def _to_response(screening: Repertoire) -> RepertoireResponse:
    return RepertoireResponse.model_validate(screening)


def _to_cache(response: RepertoireResponse) -> dict:
    return response.model_dump(mode="json")


class RepertoireService:
    """Service for screening operations with caching"""

    @staticmethod
    def list_repertoires(db: Session) -> List[RepertoireResponse]:
        with translate_db_errors("list repertoires"):
            return [_to_response(s) for s in EntityStore(db).list_screenings()]

    @staticmethod
    def get_repertoire(db: Session, repertoire_id: int) -> RepertoireResponse:
        """
        Get one screening

        Cache key: repertoire:{repertoire_id}
        """
        cached = CacheService.get_repertoire(repertoire_id)
        if cached:
            return RepertoireResponse(**cached)

        with translate_db_errors("get repertoire"):
            screening = EntityStore(db).get_screening_by_id(repertoire_id)
        if not screening:
            raise ScreeningNotFoundError(f"repertoire {repertoire_id} not found")

        response = _to_response(screening)
        CacheService.set_repertoire(repertoire_id, _to_cache(response))
        return response

    @staticmethod
    def list_repertoires_for_movie(
        db: Session,
        movie_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[RepertoireResponse]:
        """
        Screenings of one movie, optionally bounded by date (inclusive)

        Cache key: movie:{movie_id}:repertoires:{start_date}:{end_date}
        """
        if start_date and end_date and start_date > end_date:
            raise InvalidInputError("start date must not be after end date")

        cached = CacheService.get_movie_repertoires(movie_id, start_date, end_date)
        if cached is not None:
            return [RepertoireResponse(**item) for item in cached]

        with translate_db_errors("list repertoires for movie"):
            screenings = EntityStore(db).list_screenings_for_movie(movie_id, start_date, end_date)

        responses = [_to_response(s) for s in screenings]
        CacheService.set_movie_repertoires(
            movie_id, start_date, end_date, [_to_cache(r) for r in responses]
        )
        return responses

    @staticmethod
    def create_repertoire(db: Session, data: RepertoireCreate) -> RepertoireResponse:
        with translate_db_errors("create repertoire", integrity_error=AlreadyExistsError):
            with db.begin():
                store = EntityStore(db)
                if not store.get_movie_by_id(data.movie_id):
                    raise MovieNotFoundError(f"movie {data.movie_id} not found")
                if not store.get_hall_by_name(data.hall):
                    raise HallNotFoundError(f"hall {data.hall} not found")
                if store.get_screening(data.movie_id, data.date, data.time, data.hall):
                    raise AlreadyExistsError(
                        f"movie {data.movie_id} is already screened on {data.date} "
                        f"at {data.time} in hall {data.hall}"
                    )

                screening = store.add(Repertoire(
                    movie_id=data.movie_id,
                    date=data.date,
                    time=data.time,
                    hall=data.hall,
                    num_of_tickets=data.num_of_tickets,
                    num_of_res_tickets=0,
                    reserv_seats=[],
                ))

        CacheService.invalidate_repertoire(screening.movie_id, screening.id)
        logger.info(
            f"Repertoire {screening.id} created",
            extra={"repertoire_id": screening.id},
        )
        return _to_response(screening)

    @staticmethod
    def update_repertoire(db: Session, repertoire_id: int, data: RepertoireUpdate) -> RepertoireResponse:
        """
        Reschedule a screening or change its capacity.

        Capacity cannot drop below the seats already reserved. Reservations keep
        the date, time and hall they were made for.
        """
        with translate_db_errors("update repertoire", integrity_error=AlreadyExistsError):
            with db.begin():
                store = EntityStore(db)
                screening = store.get_screening_by_id(repertoire_id)
                if not screening:
                    raise ScreeningNotFoundError(f"repertoire {repertoire_id} not found")

                if data.num_of_tickets is not None:
                    if data.num_of_tickets < screening.num_of_res_tickets:
                        raise InvalidInputError(
                            f"capacity {data.num_of_tickets} is below "
                            f"{screening.num_of_res_tickets} reserved seats"
                        )
                    screening.num_of_tickets = data.num_of_tickets
                if data.hall is not None and data.hall != screening.hall:
                    if not store.get_hall_by_name(data.hall):
                        raise HallNotFoundError(f"hall {data.hall} not found")
                    screening.hall = data.hall
                if data.date is not None:
                    screening.date = data.date
                if data.time is not None:
                    screening.time = data.time
                store.flush()

        CacheService.invalidate_repertoire(screening.movie_id, screening.id)
        return _to_response(screening)

    @staticmethod
    def delete_repertoire(db: Session, repertoire_id: int) -> None:
        with translate_db_errors("delete repertoire"):
            with db.begin():
                store = EntityStore(db)
                screening = store.get_screening_by_id(repertoire_id)
                if not screening:
                    raise ScreeningNotFoundError(f"repertoire {repertoire_id} not found")
                if store.count_reservations_for_screenings([screening.id]):
                    raise ScreeningHasReservationsError(
                        f"repertoire {repertoire_id} has reservations"
                    )
                store.delete(screening)

        CacheService.invalidate_repertoire(screening.movie_id, screening.id)
        logger.info(f"Repertoire {repertoire_id} deleted", extra={"repertoire_id": repertoire_id})

    @staticmethod
    def delete_repertoires_for_movie(db: Session, movie_id: int) -> int:
        """Delete every screening of a movie; all or none"""
        with translate_db_errors("delete repertoires for movie"):
            with db.begin():
                store = EntityStore(db)
                screenings = store.list_screenings_for_movie(movie_id)
                if store.count_reservations_for_screenings([s.id for s in screenings]):
                    raise ScreeningHasReservationsError(
                        f"movie {movie_id} has screenings with reservations"
                    )
                for screening in screenings:
                    store.delete(screening)

        CacheService.invalidate_repertoire(movie_id)
        for screening in screenings:
            CacheService.invalidate_repertoire(movie_id, screening.id)
        logger.info(f"Deleted {len(screenings)} repertoires of movie {movie_id}")
        return len(screenings)
