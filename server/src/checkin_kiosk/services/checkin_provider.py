"""FastAPI dependencies that assemble the check-in service"""

import logging
import threading

from fastapi import Depends
from sqlmodel import Session

from checkin_kiosk.backends.sheets_client import SheetsClient
from checkin_kiosk.config import config
from checkin_kiosk.models.database import get_db, get_redis
from checkin_kiosk.services.attendee_table import (
    AttendeeTable,
    SheetAttendeeTable,
    SqlAttendeeTable,
)
from checkin_kiosk.services.checkin_service import CheckInService
from checkin_kiosk.services.table_cache import TableSnapshotCache
from checkin_kiosk.utils.clock import SystemClock

_sheets_lock = threading.Lock()
_sheets_client = None

logger = logging.getLogger(__name__)


def get_sheets_client() -> SheetsClient:
    """Get the singleton Google Sheets client"""
    global _sheets_client
    if _sheets_client is None:
        with _sheets_lock:
            if _sheets_client is None:
                _sheets_client = SheetsClient(
                    spreadsheet_id=config["spreadsheet_id"],
                    sheet_name=config["sheet_name"],
                    credentials_file=config["google_service_account_file"],
                )
                logger.info("Initialized singleton Google Sheets client")

    return _sheets_client


def get_attendee_table(db: Session = Depends(get_db)) -> AttendeeTable:
    """Attendee store selected by ATTENDEE_STORE"""
    store = config["attendee_store"]
    if store == "sheets":
        return SheetAttendeeTable(get_sheets_client())
    if store == "sql":
        return SqlAttendeeTable(db)
    raise RuntimeError(f"Unknown ATTENDEE_STORE '{store}', expected 'sheets' or 'sql'")


def get_table_cache(redis_client=Depends(get_redis)) -> TableSnapshotCache:
    return TableSnapshotCache(
        redis_client,
        key=config["cache_key"],
        ttl_seconds=config["cache_ttl_seconds"],
        max_bytes=config["cache_max_bytes"],
    )


def get_checkin_service(
    table: AttendeeTable = Depends(get_attendee_table),
    cache: TableSnapshotCache = Depends(get_table_cache),
) -> CheckInService:
    return CheckInService(
        table,
        cache,
        clock=SystemClock(),
        test_phone=config["test_phone"],
        phone_country_code=config["phone_country_code"],
        time_zone=config["time_zone"],
    )
