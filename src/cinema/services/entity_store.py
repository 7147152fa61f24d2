"""
Entity store: persistence for halls, movies, screenings, reservations and users.

Every method runs inside the caller's session and transaction. Lookups return
the entity or None; infrastructure failures surface as SQLAlchemy exceptions
for the caller to classify.
"""
import logging
from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from cinema.models import Hall, Movie, Repertoire, Reservation, User
from cinema.services.errors import ConflictError

logger = logging.getLogger(__name__)


class EntityStore:

    def __init__(self, session: Session):
        self.session = session

    # ==================== Generic ====================

    def add(self, entity):
        self.session.add(entity)
        self.flush()
        return entity

    def delete(self, entity):
        self.session.delete(entity)
        self.flush()

    def flush(self):
        """Flush pending writes; a stale screening version becomes ConflictError"""
        try:
            self.session.flush()
        except StaleDataError as e:
            raise ConflictError("screening was modified concurrently") from e

    # ==================== Movies ====================

    def get_movie_by_id(self, movie_id: int) -> Optional[Movie]:
        return self.session.get(Movie, movie_id)

    def list_movies(self) -> List[Movie]:
        return list(self.session.scalars(select(Movie).order_by(Movie.id)))

    # ==================== Users ====================

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.session.scalars(
            select(User).where(User.username == username)
        ).one_or_none()

    # ==================== Halls ====================

    def get_hall_by_id(self, hall_id: int) -> Optional[Hall]:
        return self.session.get(Hall, hall_id)

    def get_hall_by_name(self, name: str) -> Optional[Hall]:
        return self.session.scalars(select(Hall).where(Hall.name == name)).one_or_none()

    def list_halls(self) -> List[Hall]:
        return list(self.session.scalars(select(Hall).order_by(Hall.name)))

    def search_halls(self, name: str) -> List[Hall]:
        """Case-insensitive substring match on hall name"""
        query = select(Hall).where(Hall.name.ilike(f"%{name}%")).order_by(Hall.name)
        return list(self.session.scalars(query))

    def rename_hall_in_screenings(self, old_name: str, new_name: str) -> int:
        """
        Move screenings to a renamed hall.

        Rows are updated one by one through the ORM so each screening version
        is bumped; a reservation that read the old hall name then conflicts.
        """
        screenings = list(self.session.scalars(select(Repertoire).where(Repertoire.hall == old_name)))
        for screening in screenings:
            screening.hall = new_name
        self.flush()
        return len(screenings)

    # ==================== Screenings ====================

    def get_screening(self, movie_id: int, screening_date: date, time: str, hall: str) -> Optional[Repertoire]:
        query = select(Repertoire).where(
            Repertoire.movie_id == movie_id,
            Repertoire.date == screening_date,
            Repertoire.time == time,
            Repertoire.hall == hall,
        )
        return self.session.scalars(query).one_or_none()

    def get_screening_by_id(self, repertoire_id: int) -> Optional[Repertoire]:
        return self.session.get(Repertoire, repertoire_id)

    def list_screenings(self) -> List[Repertoire]:
        query = select(Repertoire).order_by(Repertoire.date, Repertoire.time, Repertoire.hall)
        return list(self.session.scalars(query))

    def list_screenings_for_movie(
        self,
        movie_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Repertoire]:
        query = select(Repertoire).where(Repertoire.movie_id == movie_id)
        if start_date:
            query = query.where(Repertoire.date >= start_date)
        if end_date:
            query = query.where(Repertoire.date <= end_date)
        query = query.order_by(Repertoire.date, Repertoire.time, Repertoire.hall)
        return list(self.session.scalars(query))

    def list_screenings_in_hall(self, hall: str) -> List[Repertoire]:
        return list(self.session.scalars(select(Repertoire).where(Repertoire.hall == hall)))

    def update_screening_seats(self, screening: Repertoire, reserved_count: int, reserved_seats: Sequence[str]):
        """
        Write new seat state to a screening.

        The UPDATE is conditioned on the version read with the screening, so a
        concurrent writer that committed first makes this raise ConflictError.
        """
        screening.num_of_res_tickets = reserved_count
        # New list object so the JSON column is marked dirty
        screening.reserv_seats = list(reserved_seats)
        self.flush()

    # ==================== Reservations ====================

    def insert_reservation(self, reservation: Reservation) -> Reservation:
        return self.add(reservation)

    def get_reservation_by_id(self, reservation_id: int) -> Optional[Reservation]:
        return self.session.get(Reservation, reservation_id)

    def get_reservation_by_idempotency_key(self, key: str) -> Optional[Reservation]:
        return self.session.scalars(
            select(Reservation).where(Reservation.idempotency_key == key)
        ).one_or_none()

    def delete_reservation(self, reservation: Reservation):
        self.delete(reservation)

    def list_reservations_for_user(self, username: str) -> List[Reservation]:
        query = (
            select(Reservation)
            .where(Reservation.username == username)
            .order_by(Reservation.creation_date.desc(), Reservation.id.desc())
        )
        return list(self.session.scalars(query))

    def count_reservations_for_screenings(self, repertoire_ids: Sequence[int]) -> int:
        if not repertoire_ids:
            return 0
        return self.session.scalar(
            select(func.count(Reservation.id)).where(Reservation.repertoire_id.in_(repertoire_ids))
        )
