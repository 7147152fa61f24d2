"""
Hall model - a cinema auditorium and its seat grid
"""
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Integer, String

from cinema.core.database import Base


class Hall(Base):
    __tablename__ = "halls"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    rows = Column(JSON, nullable=False, default=list)  # ['A', 'B', 'C']
    cols = Column(JSON, nullable=False, default=list)  # [1, 2, 3, 4]
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Hall(id={self.id}, name='{self.name}', seats={self.seat_count})>"

    @property
    def seat_count(self) -> int:
        return len(self.rows or []) * len(self.cols or [])
