"""
SQLAlchemy Models for the Cinema Reservation API

Import all models here for easy access and to ensure proper relationship setup.
"""
from cinema.core.database import Base

from cinema.models.user import User
from cinema.models.hall import Hall
from cinema.models.movie import Movie
from cinema.models.repertoire import Repertoire
from cinema.models.reservation import Reservation

__all__ = [
    "Base",
    "User",
    "Hall",
    "Movie",
    "Repertoire",
    "Reservation",
]
