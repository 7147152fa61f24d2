"""
Pydantic schemas for Movie resources
"""
from datetime import date, datetime
from typing import Optional

from pydantic import Field, field_validator

from cinema.schemas.common import CinemaSchema, parse_date


class MovieBase(CinemaSchema):
    title: str = Field(..., min_length=1, max_length=500, description="Movie title")
    duration: Optional[int] = Field(None, gt=0, description="Running time in minutes")
    genre: Optional[str] = Field(None, max_length=100)
    directors: Optional[str] = Field(None, max_length=500)
    actors: Optional[str] = None
    screening: Optional[date] = Field(None, description="Premiere date (YYYY-MM-DD)")
    plot: Optional[str] = None
    poster: Optional[str] = Field(None, max_length=500)

    @field_validator('screening', mode='before')
    @classmethod
    def validate_screening(cls, v):
        if v is None:
            return v
        return parse_date(v)


class MovieCreate(MovieBase):
    pass


class MovieUpdate(MovieBase):
    title: Optional[str] = Field(None, min_length=1, max_length=500)


class MovieResponse(MovieBase):
    id: int
    created_at: datetime
