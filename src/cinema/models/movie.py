"""
Movie model
"""
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from cinema.core.database import Base


class Movie(Base):
    __tablename__ = "movies"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(500), nullable=False, index=True)
    duration = Column(Integer)  # minutes
    genre = Column(String(100))
    directors = Column(String(500))
    actors = Column(Text)
    screening = Column(Date)  # premiere date
    plot = Column(Text)
    poster = Column(String(500))
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    repertoires = relationship("Repertoire", back_populates="movie")

    def __repr__(self):
        return f"<Movie(id={self.id}, title='{self.title}')>"
