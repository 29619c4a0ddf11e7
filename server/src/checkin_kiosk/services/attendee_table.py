"""Attendee table adapters over the Google Sheet and the SQL store.

Both expose the table as a grid: a list of rows in ``SHEET_HEADERS`` order
with the header row at index 0. Rows are addressed by their grid index, so
grid row ``i`` is sheet row ``i + 1``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List

from sqlalchemy import or_, update
from sqlmodel import Session, col, select

from checkin_kiosk.backends.sheets_client import SheetsClient
from checkin_kiosk.models.attendee import (
    COL_CHECK_IN_TIME,
    COL_STATUS,
    SHEET_HEADERS,
    Attendee,
    AttendeeStatus,
)

logger = logging.getLogger(__name__)

Grid = List[List[Any]]


class AttendeeTable(ABC):
    """Source of truth for attendee rows"""

    @abstractmethod
    def read_grid(self) -> Grid:
        """Read every row, header first"""

    @abstractmethod
    def mark_checked_in(self, grid_index: int, attendee_id: str, timestamp: str) -> bool:
        """
        Record the check-in for the row at ``grid_index``.

        Returns:
            False if the store refused the write because the row was
            already checked in, True otherwise
        """


class SheetAttendeeTable(AttendeeTable):
    """Attendee rows in a Google Sheet.

    The status and timestamp cells are written one after the other with no
    compare-and-swap, so two kiosks racing on the same row may both write.
    """

    def __init__(self, sheets_client: SheetsClient):
        self.sheets = sheets_client

    def read_grid(self) -> Grid:
        return self.sheets.get_values()

    def mark_checked_in(self, grid_index: int, attendee_id: str, timestamp: str) -> bool:
        row = grid_index + 1
        self.sheets.set_cell(row, COL_STATUS + 1, AttendeeStatus.CHECKED_IN.value)
        self.sheets.set_cell(row, COL_CHECK_IN_TIME + 1, timestamp)
        return True


class SqlAttendeeTable(AttendeeTable):
    """Attendee rows in the ``attendees`` table"""

    def __init__(self, db_session: Session):
        self.db = db_session

    def read_grid(self) -> Grid:
        stmt = select(Attendee).order_by(Attendee.id)
        attendees = self.db.exec(stmt).all()
        return [list(SHEET_HEADERS)] + [attendee.to_row() for attendee in attendees]

    def mark_checked_in(self, grid_index: int, attendee_id: str, timestamp: str) -> bool:
        # Conditional update closes the read-then-write race between kiosks
        stmt = (
            update(Attendee)
            .where(
                col(Attendee.id) == attendee_id,
                or_(
                    col(Attendee.status).is_(None),
                    col(Attendee.status) != AttendeeStatus.CHECKED_IN.value,
                ),
            )
            .values(
                status=AttendeeStatus.CHECKED_IN.value,
                check_in_time=timestamp,
            )
        )
        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if result.rowcount != 1:
            logger.info(f"Conditional check-in for {attendee_id} matched no pending row")
            return False
        return True

    def add_attendees(self, attendees: List[Attendee]) -> None:
        """Insert attendee rows and commit"""
        for attendee in attendees:
            self.db.add(attendee)
        self.db.commit()
