"""Lookup and check-in service for kiosk requests.

Every call scans the full grid, so cost is O(rows) per request. Event
attendee lists are small enough that no index is kept.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from checkin_kiosk.models.attendee import (
    COL_COURSE_DATE,
    COL_COURSE_NAME,
    COL_COURSE_TYPE,
    COL_ID,
    COL_NAME,
    COL_PHONE,
    COL_STATUS,
    AttendeeStatus,
    AttendeeView,
)
from checkin_kiosk.services.attendee_table import AttendeeTable
from checkin_kiosk.services.table_cache import TableSnapshotCache
from checkin_kiosk.utils.clock import SystemClock
from checkin_kiosk.utils.formatting import format_course_date
from checkin_kiosk.utils.phone import canonical_phone, cell_to_str

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "找不到使用者。"
ID_NOT_FOUND_MESSAGE = "找不到使用者 ID。"
ALREADY_CHECKED_IN_MESSAGE = "您已完成報到，無需重複操作。"
TEST_ACCOUNT_MESSAGE = "測試帳號報到成功 (模擬)"


class InvalidRequestError(ValueError):
    """Request is missing a required parameter or names an unknown action"""


class Outcome(str, enum.Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    ALREADY_CHECKED_IN = "already_checked_in"


@dataclass
class QueryResult:
    outcome: Outcome
    attendee: Optional[AttendeeView] = None
    message: Optional[str] = None


@dataclass
class CheckInResult:
    outcome: Outcome
    timestamp: Optional[str] = None
    message: Optional[str] = None
    observed_status: Optional[str] = None
    simulated: bool = False


def _cell(row: List[Any], index: int) -> Any:
    # Sheets drops trailing empty cells from a row
    return row[index] if index < len(row) else ""


class CheckInService:
    """Resolves attendees by phone and applies the one-way check-in"""

    def __init__(
        self,
        table: AttendeeTable,
        cache: TableSnapshotCache,
        clock: Optional[SystemClock] = None,
        test_phone: str = "0987654321",
        phone_country_code: str = "886",
        time_zone: Optional[str] = None,
    ):
        self.table = table
        self.cache = cache
        self.clock = clock or SystemClock()
        self.phone_country_code = phone_country_code
        self.time_zone = time_zone
        self._test_phone = canonical_phone(test_phone, phone_country_code)

    def _canonical(self, value: Any) -> str:
        return canonical_phone(value, self.phone_country_code)

    def is_test_phone(self, value: Any) -> bool:
        return bool(self._test_phone) and self._canonical(value) == self._test_phone

    def load_table(self) -> List[List[Any]]:
        """Grid from the cache, or from the store on a miss (then cached)"""
        cached = self.cache.get()
        if cached is not None:
            logger.info("Hit Cache!")
            return cached

        logger.info("Miss Cache. Loading from store...")
        grid = self.table.read_grid()
        self.cache.put(grid)
        return grid

    def invalidate_cache(self) -> None:
        self.cache.invalidate()

    def _to_view(self, row: List[Any]) -> AttendeeView:
        return AttendeeView(
            id=cell_to_str(_cell(row, COL_ID)),
            phone=cell_to_str(_cell(row, COL_PHONE)),
            name=cell_to_str(_cell(row, COL_NAME)),
            course_name=cell_to_str(_cell(row, COL_COURSE_NAME)),
            course_date=format_course_date(_cell(row, COL_COURSE_DATE), self.time_zone),
            course_type=cell_to_str(_cell(row, COL_COURSE_TYPE)),
            status=cell_to_str(_cell(row, COL_STATUS)).strip(),
        )

    def query(self, phone: Optional[str]) -> QueryResult:
        """
        Find the first attendee whose phone matches.

        Args:
            phone: Phone number as sent by the kiosk

        Returns:
            QueryResult with the attendee view, or a NOT_FOUND outcome

        Raises:
            InvalidRequestError: If phone is missing or empty
        """
        if not phone:
            raise InvalidRequestError("缺少參數：phone")

        wanted = self._canonical(phone)
        grid = self.load_table()

        # Skip header row (index 0)
        if wanted:
            for row in grid[1:]:
                if self._canonical(_cell(row, COL_PHONE)) == wanted:
                    return QueryResult(outcome=Outcome.OK, attendee=self._to_view(row))

        return QueryResult(outcome=Outcome.NOT_FOUND, message=NOT_FOUND_MESSAGE)

    def check_in(self, attendee_id: Optional[str]) -> CheckInResult:
        """
        Mark the attendee as checked in.

        Reads the store directly so a stale cached "not checked in" row can
        never lead to a second write.

        Args:
            attendee_id: Attendee identifier from a previous query

        Returns:
            CheckInResult with the timestamp, or ALREADY_CHECKED_IN / NOT_FOUND

        Raises:
            InvalidRequestError: If attendee_id is missing or empty
        """
        if not attendee_id:
            raise InvalidRequestError("缺少參數：id")

        grid = self.table.read_grid()
        wanted_id = cell_to_str(attendee_id)

        for index in range(1, len(grid)):
            row = grid[index]
            if cell_to_str(_cell(row, COL_ID)) != wanted_id:
                continue

            current_status = cell_to_str(_cell(row, COL_STATUS)).strip()
            logger.info(f"Found ID: {wanted_id}, Current Status: '{current_status}'")

            if current_status == AttendeeStatus.CHECKED_IN.value:
                return self._already_checked_in(current_status)

            if self.is_test_phone(_cell(row, COL_PHONE)):
                logger.info(f"Test account check-in intercepted for ID: {wanted_id}")
                return CheckInResult(
                    outcome=Outcome.OK,
                    timestamp=self.clock.now_iso(),
                    message=TEST_ACCOUNT_MESSAGE,
                    simulated=True,
                )

            timestamp = self.clock.now_iso()
            if not self.table.mark_checked_in(index, wanted_id, timestamp):
                return self._already_checked_in(AttendeeStatus.CHECKED_IN.value)

            self.invalidate_cache()
            logger.info(f"Checked in {wanted_id} at {timestamp}")
            return CheckInResult(outcome=Outcome.OK, timestamp=timestamp)

        return CheckInResult(outcome=Outcome.NOT_FOUND, message=ID_NOT_FOUND_MESSAGE)

    @staticmethod
    def _already_checked_in(observed_status: str) -> CheckInResult:
        return CheckInResult(
            outcome=Outcome.ALREADY_CHECKED_IN,
            message=ALREADY_CHECKED_IN_MESSAGE,
            observed_status=observed_status,
        )
