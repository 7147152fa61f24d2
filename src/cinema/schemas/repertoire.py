"""
Pydantic schemas for Repertoire (screening) resources
"""
from datetime import date as calendar_date, datetime
from typing import List, Optional

from pydantic import Field, field_validator

from cinema.schemas.common import CinemaSchema, parse_date


class RepertoireCreate(CinemaSchema):
    movie_id: int = Field(..., gt=0)
    date: calendar_date
    time: str = Field(..., min_length=1, max_length=10, description="Time of day, e.g. 18:30")
    hall: str = Field(..., min_length=1, max_length=100)
    num_of_tickets: int = Field(..., gt=0, description="Seat capacity")

    @field_validator('date', mode='before')
    @classmethod
    def validate_date(cls, v):
        return parse_date(v)


class RepertoireUpdate(CinemaSchema):
    """Seat state is not updatable here; it belongs to reservations"""
    date: Optional[calendar_date] = None
    time: Optional[str] = Field(None, min_length=1, max_length=10)
    hall: Optional[str] = Field(None, min_length=1, max_length=100)
    num_of_tickets: Optional[int] = Field(None, gt=0)

    @field_validator('date', mode='before')
    @classmethod
    def validate_date(cls, v):
        if v is None:
            return v
        return parse_date(v)


class RepertoireResponse(CinemaSchema):
    id: int
    movie_id: int
    date: calendar_date
    time: str
    hall: str
    num_of_tickets: int
    num_of_res_tickets: int
    reserv_seats: List[str]
    available_tickets: int
    created_at: datetime
