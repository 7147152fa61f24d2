"""
Hall Service
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from cinema.models import Hall
from cinema.schemas import HallCreate, HallUpdate
from cinema.services.cache_service import CacheService
from cinema.services.entity_store import EntityStore
from cinema.services.errors import (
    AlreadyExistsError,
    HallNotFoundError,
    ScreeningHasReservationsError,
    translate_db_errors,
)

logger = logging.getLogger(__name__)


class HallService:
    """Service for hall CRUD"""

    @staticmethod
    def list_halls(db: Session) -> List[Hall]:
        with translate_db_errors("list halls"):
            return EntityStore(db).list_halls()

    @staticmethod
    def search_halls(db: Session, name: str) -> List[Hall]:
        with translate_db_errors("search halls"):
            return EntityStore(db).search_halls(name)

    @staticmethod
    def create_hall(db: Session, data: HallCreate) -> Hall:
        with translate_db_errors("create hall", integrity_error=AlreadyExistsError):
            with db.begin():
                store = EntityStore(db)
                if store.get_hall_by_name(data.name):
                    raise AlreadyExistsError(f"hall {data.name} already exists")
                hall = store.add(Hall(name=data.name, rows=list(data.rows), cols=list(data.cols)))

        logger.info(f"Hall {hall.name} created with {hall.seat_count} seats")
        return hall

    @staticmethod
    def update_hall(db: Session, hall_id: int, data: HallUpdate) -> Hall:
        """
        Update a hall. A rename is carried over to the hall's screenings;
        existing reservations keep the name they were made under.
        """
        with translate_db_errors("update hall", integrity_error=AlreadyExistsError):
            with db.begin():
                store = EntityStore(db)
                hall = store.get_hall_by_id(hall_id)
                if not hall:
                    raise HallNotFoundError(f"hall {hall_id} not found")

                if data.name is not None and data.name != hall.name:
                    if store.get_hall_by_name(data.name):
                        raise AlreadyExistsError(f"hall {data.name} already exists")
                    moved = store.rename_hall_in_screenings(hall.name, data.name)
                    logger.info(f"Hall {hall.name} renamed to {data.name} ({moved} screenings)")
                    hall.name = data.name
                if data.rows is not None:
                    hall.rows = list(data.rows)
                if data.cols is not None:
                    hall.cols = list(data.cols)
                store.flush()

        return hall

    @staticmethod
    def delete_hall(db: Session, hall_id: int) -> None:
        """Delete a hall and its screenings, unless any screening has reservations"""
        with translate_db_errors("delete hall"):
            with db.begin():
                store = EntityStore(db)
                hall = store.get_hall_by_id(hall_id)
                if not hall:
                    raise HallNotFoundError(f"hall {hall_id} not found")

                screenings = store.list_screenings_in_hall(hall.name)
                if store.count_reservations_for_screenings([s.id for s in screenings]):
                    raise ScreeningHasReservationsError(
                        f"hall {hall.name} has screenings with reservations"
                    )
                for screening in screenings:
                    store.delete(screening)
                store.delete(hall)

        for screening in screenings:
            CacheService.invalidate_repertoire(screening.movie_id, screening.id)
        logger.info(f"Hall {hall_id} deleted with {len(screenings)} screenings")
