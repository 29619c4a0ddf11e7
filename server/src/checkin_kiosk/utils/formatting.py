"""Display formatting for dates and timestamps"""

import re
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from checkin_kiosk.utils.phone import cell_to_str

# 2025-01-03, 2025/1/3, optionally followed by a time part
_DATE_PREFIX = re.compile(r"^\s*(\d{4})[-/](\d{1,2})[-/](\d{1,2})(?:$|[T\s])")

# Day 0 of spreadsheet serial dates
_SERIAL_EPOCH = date(1899, 12, 30)


def _zone(time_zone: str | None):
    if not time_zone:
        return None
    try:
        return ZoneInfo(time_zone)
    except ZoneInfoNotFoundError:
        return None


def format_course_date(value, time_zone: str | None = None) -> str:
    """
    Render a course date as YYYY/MM/DD.

    Aware datetimes are converted to ``time_zone`` first. Numbers are
    spreadsheet serial dates (days since 1899-12-30, time as the fraction).
    Strings that do not look like a date are returned unchanged.
    """
    if value is None:
        return ""
    if isinstance(value, datetime):
        tz = _zone(time_zone)
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.strftime("%Y/%m/%d")
    if isinstance(value, date):
        return value.strftime("%Y/%m/%d")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return (_SERIAL_EPOCH + timedelta(days=int(value))).strftime("%Y/%m/%d")
        except (OverflowError, ValueError):
            return cell_to_str(value)

    text = str(value)
    match = _DATE_PREFIX.match(text)
    if not match:
        return text
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day).strftime("%Y/%m/%d")
    except ValueError:
        return text


def format_check_in_time(timestamp: str, time_zone: str | None = None) -> str:
    """Render an ISO-8601 timestamp in local time, e.g. 2025/01/03 14:05:09"""
    parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    tz = _zone(time_zone)
    if tz is not None and parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz)
    return parsed.strftime("%Y/%m/%d %H:%M:%S")
