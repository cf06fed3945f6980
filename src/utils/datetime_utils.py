"""Date and time helpers.

Provides timezone-aware UTC timestamps for model columns and the
conversions needed to read calendar dates out of spreadsheet cells.

Usage:
    from src.utils.datetime_utils import utc_now, parse_calendar_date

    created_at = Column(DateTime, default=utc_now)
    parse_calendar_date("2024-03-01")   # date(2024, 3, 1)
    parse_calendar_date(45352)          # date(2024, 3, 1), spreadsheet serial
"""

from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from .constants import SPREADSHEET_EPOCH

# Accepted textual date layouts, tried in order after ISO parsing
_DATE_FORMATS = ("%d/%m/%Y", "%d-%m-%Y", "%d.%m.%Y", "%Y/%m/%d")


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def spreadsheet_serial_to_date(serial: float) -> Optional[date]:
    """
    Convert a spreadsheet date serial to a calendar date.

    Serials count days from 1899-12-30; any fractional part (time of
    day) is discarded.

    Args:
        serial: Day count as produced by spreadsheet applications

    Returns:
        The calendar date, or None when the serial is not positive or
        falls outside the supported date range
    """
    if serial <= 0:
        return None
    try:
        return SPREADSHEET_EPOCH + timedelta(days=int(serial))
    except (OverflowError, ValueError):
        return None


def parse_calendar_date(value: Any) -> Optional[date]:
    """
    Parse a spreadsheet cell into a calendar date.

    Accepts date/datetime objects, numeric spreadsheet serials, numeric
    strings holding a serial, ISO 8601 strings (date or date-time) and
    day-first layouts (31/12/2024, 31-12-2024, 31.12.2024).

    Args:
        value: Raw cell value

    Returns:
        The parsed date, or None if the value is not a recognizable date
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        return spreadsheet_serial_to_date(value)

    text = str(value).strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    try:
        return spreadsheet_serial_to_date(float(text))
    except ValueError:
        return None
