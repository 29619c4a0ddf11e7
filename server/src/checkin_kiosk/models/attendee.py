"""Attendee table layout, SQLModel table and the confirmation view"""

import enum
from datetime import date
from typing import Optional

from pydantic import BaseModel
from sqlmodel import Field, SQLModel

# Column indexes (0-based) of the attendee grid; row 0 is the header row
COL_ID = 0
COL_PHONE = 1
COL_NAME = 2
COL_COURSE_NAME = 3
COL_COURSE_DATE = 4
COL_COURSE_TYPE = 5
COL_STATUS = 6
COL_CHECK_IN_TIME = 7

SHEET_HEADERS = [
    "id",
    "phone",
    "name",
    "course_name",
    "course_date",
    "course_type",
    "status",
    "check_in_time",
]


class AttendeeStatus(str, enum.Enum):
    NOT_CHECKED_IN = ""
    CHECKED_IN = "CheckedIn"


class Attendee(SQLModel, table=True):
    """Attendee row for the SQL-backed store"""

    __tablename__ = "attendees"

    id: str = Field(primary_key=True)
    phone: str = Field(index=True)
    name: str
    course_name: str = Field(default="")
    course_date: Optional[date] = None
    course_type: str = Field(default="")
    status: str = Field(default=AttendeeStatus.NOT_CHECKED_IN.value)
    check_in_time: Optional[str] = Field(default="")

    def to_row(self) -> list:
        """Grid row in SHEET_HEADERS order"""
        return [
            self.id,
            self.phone,
            self.name,
            self.course_name,
            self.course_date,
            self.course_type,
            self.status or "",
            self.check_in_time or "",
        ]


class AttendeeView(BaseModel):
    """What the confirmation screen shows; check_in_time is left out"""

    id: str
    phone: str
    name: str
    course_name: str
    course_date: str
    course_type: str
    status: str
