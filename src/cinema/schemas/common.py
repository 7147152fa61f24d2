"""
Shared schema helpers: camelCase wire names and strict calendar dates
"""
import re
from datetime import date, datetime

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

DATE_FORMAT_ERROR = "invalid date format, should be YYYY-MM-DD"

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

USERNAME_PATTERN = r"^[a-zA-Z0-9_]+$"


def parse_date(value) -> date:
    """
    Parse a YYYY-MM-DD string into a date.

    Raises:
        ValueError: for anything else, including datetimes and timestamps
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise ValueError(DATE_FORMAT_ERROR)
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(DATE_FORMAT_ERROR)


class CinemaSchema(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageResponse(CinemaSchema):
    message: str
