"""
Reservation model - one user's block of seats for one screening.

movie_title, date, time and hall are copied from the movie and screening when
the reservation is created and are never refreshed afterwards.
"""
from datetime import datetime

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from cinema.core.database import Base


class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    movie_id = Column(Integer, ForeignKey("movies.id"), nullable=False, index=True)
    repertoire_id = Column(Integer, ForeignKey("repertoires.id"), nullable=False, index=True)
    movie_title = Column(String(500), nullable=False)
    date = Column(Date, nullable=False)
    time = Column(String(10), nullable=False)
    hall = Column(String(100), nullable=False)
    creation_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    reserv_seats = Column(JSON, nullable=False, default=list)
    idempotency_key = Column(String(255), unique=True, nullable=True)

    user = relationship("User", back_populates="reservations")
    repertoire = relationship("Repertoire", back_populates="reservations")

    def __repr__(self):
        return (f"<Reservation(id={self.id}, username='{self.username}', "
                f"repertoire_id={self.repertoire_id}, seats={self.reserv_seats})>")
