"""
Date and duration helpers shared by the readers, heuristics and delay logic.

All datetimes produced here are timezone-aware UTC. Naive inputs are taken
to be UTC already.
"""
import numbers
import re
import warnings
from datetime import date, datetime, timedelta, timezone
from typing import Any, List, Optional

import pandas as pd

from buildtrack.utils.helpers import is_blank

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Days between the spreadsheet epoch (1899-12-30) and the Unix epoch
EXCEL_UNIX_OFFSET_DAYS = 25569

# Free text like a bare month name parses to year 1; such years are not dates
MIN_PARSED_YEAR = 1900

DATE_TOKEN_PATTERN = re.compile(
    r'\b(?:'
    r'(?P<ymd_y>\d{4})-(?P<ymd_m>\d{1,2})-(?P<ymd_d>\d{1,2})'
    r'|'
    r'(?P<dmy_d>\d{1,2})[-/.](?P<dmy_m>\d{1,2})[-/.](?P<dmy_y>\d{4}|\d{2})'
    r')(?!\d)'
)


def utc_today() -> datetime:
    """Midnight UTC of the current day."""
    now = datetime.now(timezone.utc)
    return datetime(now.year, now.month, now.day, tzinfo=timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if isinstance(value, pd.Timestamp):
        value = value.to_pydatetime()
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def excel_serial_to_datetime(serial: float) -> datetime:
    """
    Decode a spreadsheet serial date (days since 1899-12-30).

    Fractions of a day are kept to the millisecond, e.g. 44927 is
    2023-01-01T00:00:00Z and 44927.5 is noon on the same day.
    """
    milliseconds = round((serial - EXCEL_UNIX_OFFSET_DAYS) * 86400 * 1000)
    return UNIX_EPOCH + timedelta(milliseconds=milliseconds)


def parse_date_string(value: str) -> Optional[datetime]:
    """Parse free-form date text with the general pandas parser."""
    text = value.strip()
    if not text:
        return None
    try:
        with warnings.catch_warnings():
            warnings.simplefilter('ignore')
            parsed = pd.to_datetime(text)
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed is pd.NaT or pd.isna(parsed):
        return None
    if parsed.year < MIN_PARSED_YEAR:
        return None
    return _as_utc(parsed)


def to_utc_datetime(value: Any) -> Optional[datetime]:
    """
    Coerce a raw cell value into a UTC datetime.

    Numbers are spreadsheet serials, strings go through the general parser,
    date/datetime objects are normalised. Anything else yields None.
    """
    if is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, numbers.Real):
        try:
            return excel_serial_to_datetime(value)
        except OverflowError:
            return None
    if isinstance(value, str):
        return parse_date_string(value)
    return None


def _build_date(year: int, month: int, day: int) -> Optional[datetime]:
    try:
        return datetime(year, month, day, tzinfo=timezone.utc)
    except ValueError:
        return None


def parse_date_token(match: re.Match) -> Optional[datetime]:
    """
    Turn a DATE_TOKEN_PATTERN match into a datetime.

    Day-first is tried before month-first; two-digit years are 20YY.
    """
    if match.group('ymd_y'):
        return _build_date(
            int(match.group('ymd_y')),
            int(match.group('ymd_m')),
            int(match.group('ymd_d')),
        )

    first = int(match.group('dmy_d'))
    second = int(match.group('dmy_m'))
    year_text = match.group('dmy_y')
    year = int(year_text)
    if len(year_text) == 2:
        year += 2000

    return _build_date(year, second, first) or _build_date(year, first, second)


def find_dates(text: str) -> List[tuple]:
    """
    Find every parseable date token in text.

    Returns:
        List of (match, datetime) tuples in order of appearance
    """
    found = []
    for match in DATE_TOKEN_PATTERN.finditer(text):
        parsed = parse_date_token(match)
        if parsed is not None:
            found.append((match, parsed))
    return found


def to_iso_string(value: datetime) -> str:
    """Format as YYYY-MM-DDTHH:MM:SS.mmmZ."""
    value = _as_utc(value)
    return value.strftime('%Y-%m-%dT%H:%M:%S.') + f'{value.microsecond // 1000:03d}Z'


def to_calendar_date(value: Any) -> Optional[date]:
    """Calendar day (UTC) of an ISO string, date or datetime."""
    parsed = to_utc_datetime(value)
    return parsed.date() if parsed else None


def calendar_days_between(start: Any, end: Any) -> int:
    """
    Whole calendar days from start to end, time of day ignored.

    Negative when end falls before start.

    Raises:
        ValueError: If either value cannot be read as a date
    """
    start_day = to_calendar_date(start)
    end_day = to_calendar_date(end)
    if start_day is None or end_day is None:
        raise ValueError(f'Cannot compute day difference between {start!r} and {end!r}')
    return (end_day - start_day).days


def format_display_date(value: Any) -> str:
    """Short display form (e.g. 'Jan 5, 2024'); '-' when missing."""
    parsed = to_utc_datetime(value)
    if parsed is None:
        return '-'
    return f'{parsed.strftime("%b")} {parsed.day}, {parsed.year}'
