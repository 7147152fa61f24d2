"""
Movie Service
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from cinema.models import Movie
from cinema.schemas import MovieCreate, MovieUpdate
from cinema.services.cache_service import CacheService
from cinema.services.entity_store import EntityStore
from cinema.services.errors import MovieNotFoundError, ScreeningHasReservationsError, translate_db_errors

logger = logging.getLogger(__name__)


class MovieService:
    """Service for movie CRUD"""

    @staticmethod
    def list_movies(db: Session) -> List[Movie]:
        with translate_db_errors("list movies"):
            return EntityStore(db).list_movies()

    @staticmethod
    def get_movie(db: Session, movie_id: int) -> Movie:
        with translate_db_errors("get movie"):
            movie = EntityStore(db).get_movie_by_id(movie_id)
        if not movie:
            raise MovieNotFoundError(f"movie {movie_id} not found")
        return movie

    @staticmethod
    def create_movie(db: Session, data: MovieCreate) -> Movie:
        with translate_db_errors("create movie"):
            with db.begin():
                movie = EntityStore(db).add(Movie(**data.model_dump()))

        logger.info(f"Movie {movie.id} created: {movie.title}")
        return movie

    @staticmethod
    def update_movie(db: Session, movie_id: int, data: MovieUpdate) -> Movie:
        """Partial update; fields left out of the request or sent as null are unchanged"""
        with translate_db_errors("update movie"):
            with db.begin():
                store = EntityStore(db)
                movie = store.get_movie_by_id(movie_id)
                if not movie:
                    raise MovieNotFoundError(f"movie {movie_id} not found")
                for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
                    setattr(movie, field, value)
                store.flush()

        return movie

    @staticmethod
    def delete_movie(db: Session, movie_id: int) -> None:
        """Delete a movie and its screenings, unless any screening has reservations"""
        with translate_db_errors("delete movie"):
            with db.begin():
                store = EntityStore(db)
                movie = store.get_movie_by_id(movie_id)
                if not movie:
                    raise MovieNotFoundError(f"movie {movie_id} not found")

                screenings = store.list_screenings_for_movie(movie_id)
                if store.count_reservations_for_screenings([s.id for s in screenings]):
                    raise ScreeningHasReservationsError(
                        f"movie {movie_id} has screenings with reservations"
                    )
                for screening in screenings:
                    store.delete(screening)
                store.delete(movie)

        CacheService.invalidate_repertoire(movie_id)
        for screening in screenings:
            CacheService.invalidate_repertoire(movie_id, screening.id)
        logger.info(f"Movie {movie_id} deleted with {len(screenings)} screenings")
