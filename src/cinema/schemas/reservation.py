"""Pydantic schemas for Reservation resources"""
from datetime import date as calendar_date, datetime
from typing import List

from pydantic import Field, field_validator

from cinema.core.config import settings
from cinema.schemas.common import USERNAME_PATTERN, CinemaSchema, parse_date


class ReservationCreate(CinemaSchema):
    username: str = Field(..., min_length=1, max_length=50, pattern=USERNAME_PATTERN)
    movie_id: int = Field(..., gt=0)
    date: calendar_date
    time: str = Field(..., min_length=1, max_length=10)
    hall: str = Field(..., min_length=1, max_length=100)
    reserv_seats: List[str] = Field(..., min_length=1)

    @field_validator('date', mode='before')
    @classmethod
    def validate_date(cls, v):
        return parse_date(v)

    @field_validator('reserv_seats')
    @classmethod
    def validate_seats(cls, v: List[str]) -> List[str]:
        seats = [seat.strip() for seat in v]
        if any(not seat for seat in seats):
            raise ValueError("seat labels must not be empty")
        if len(set(seats)) != len(seats):
            raise ValueError("duplicate seat labels in request")
        if len(seats) > settings.MAX_SEATS_PER_RESERVATION:
            raise ValueError(
                f"cannot reserve more than {settings.MAX_SEATS_PER_RESERVATION} seats at once"
            )
        return seats


class ReservationResponse(CinemaSchema):
    id: int
    username: str
    user_id: int
    movie_id: int
    repertoire_id: int
    movie_title: str
    date: calendar_date
    time: str
    hall: str
    creation_date: datetime
    reserv_seats: List[str]


class ReservationCreatedResponse(CinemaSchema):
    message: str
    reservation: ReservationResponse
