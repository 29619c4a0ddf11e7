from checkin_kiosk.services.attendee_table import (
    AttendeeTable,
    SheetAttendeeTable,
    SqlAttendeeTable,
)
from checkin_kiosk.services.checkin_service import (
    CheckInResult,
    CheckInService,
    InvalidRequestError,
    Outcome,
    QueryResult,
)
from checkin_kiosk.services.table_cache import TableSnapshotCache

__all__ = [
    "AttendeeTable",
    "SheetAttendeeTable",
    "SqlAttendeeTable",
    "CheckInResult",
    "CheckInService",
    "InvalidRequestError",
    "Outcome",
    "QueryResult",
    "TableSnapshotCache",
]
