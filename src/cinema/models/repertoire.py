"""
Repertoire model - one screening of a movie in a hall at a date and time.

CRITICAL for concurrency control: the seat state of a screening is the only
shared mutable resource of a reservation. Every UPDATE is conditioned on
`version`, so two transactions that read the same snapshot cannot both commit.
"""
from datetime import datetime

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from cinema.core.database import Base


class Repertoire(Base):
    __tablename__ = "repertoires"
    __table_args__ = (
        UniqueConstraint('movie_id', 'date', 'time', 'hall', name='uq_repertoire_slot'),
    )

    id = Column(Integer, primary_key=True, index=True)
    movie_id = Column(Integer, ForeignKey("movies.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    time = Column(String(10), nullable=False)  # '18:30'
    hall = Column(String(100), nullable=False, index=True)  # Hall.name
    num_of_tickets = Column(Integer, nullable=False)
    num_of_res_tickets = Column(Integer, nullable=False, default=0)
    reserv_seats = Column(JSON, nullable=False, default=list)  # sorted seat labels
    version = Column(Integer, nullable=False)  # For optimistic locking
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    movie = relationship("Movie", back_populates="repertoires")
    reservations = relationship("Reservation", back_populates="repertoire")

    def __repr__(self):
        return (f"<Repertoire(id={self.id}, movie_id={self.movie_id}, date='{self.date}', "
                f"time='{self.time}', hall='{self.hall}', "
                f"reserved={self.num_of_res_tickets}/{self.num_of_tickets})>")

    @property
    def available_tickets(self) -> int:
        return self.num_of_tickets - self.num_of_res_tickets
