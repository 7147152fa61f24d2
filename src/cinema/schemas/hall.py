"""
Pydantic schemas for Hall resources
"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from cinema.schemas.common import CinemaSchema


class HallBase(CinemaSchema):
    name: str = Field(..., min_length=1, max_length=100, description="Hall name")
    rows: List[str] = Field(default_factory=list, description="Row labels, e.g. ['A', 'B']")
    cols: List[int] = Field(default_factory=list, description="Seat numbers within a row")


class HallCreate(HallBase):
    pass


class HallUpdate(CinemaSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    rows: Optional[List[str]] = None
    cols: Optional[List[int]] = None


class HallResponse(HallBase):
    id: int
    seat_count: int
    created_at: datetime
