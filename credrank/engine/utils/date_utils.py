"""Date parsing utilities for as-of date handling."""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union
import bittensor as bt

from credrank.engine.utils.error_handling import log_and_raise_validation_error, ErrorMessages

AsOfDate = Union[date, datetime, str]


def parse_as_of_date(value: AsOfDate) -> date:
    """
    Normalize an as-of value to a calendar date (UTC).

    Accepts a `date`, an aware or naive `datetime` (naive is taken as UTC),
    or a 'YYYY-MM-DD' / ISO timestamp string.

    Raises:
        ValueError: If the value cannot be interpreted as a date

    Examples:
        >>> parse_as_of_date('2025-11-25')
        datetime.date(2025, 11, 25)

        >>> parse_as_of_date('2025-11-25T23:30:00-05:00')
        datetime.date(2025, 11, 26)
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(timezone.utc).date()

    if isinstance(value, date):
        return value

    if isinstance(value, str) and value.strip():
        parsed = parse_timestamp(value.strip())
        if parsed is not None:
            return parsed.date()

    log_and_raise_validation_error(
        f"{ErrorMessages.INVALID_AS_OF_DATE}: {value!r}",
        context_info={'expected': 'date, datetime or YYYY-MM-DD string'}
    )


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a date or timestamp string to a timezone-aware UTC datetime.

    Handles both full ISO timestamps and simple 'YYYY-MM-DD' dates
    (set to start of day).

    Returns:
        Timezone-aware datetime in UTC, or None if value is empty/unparseable
    """
    if not value:
        return None

    try:
        if 'T' in value or ':' in value:
            dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
            if dt.tzinfo is None:
                return dt.replace(tzinfo=timezone.utc)
            return dt.astimezone(timezone.utc)

        dt = datetime.strptime(value, '%Y-%m-%d')
        return dt.replace(tzinfo=timezone.utc)

    except (ValueError, AttributeError) as e:
        bt.logging.debug(f"Failed to parse timestamp '{value}': {e}")
        return None


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_day(day: date) -> datetime:
    """00:00:00 UTC on the given day."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    """Last representable instant of the given day in UTC."""
    return start_of_day(day) + timedelta(days=1) - timedelta(microseconds=1)


def utc_now() -> datetime:
    """Default engine clock."""
    return datetime.now(timezone.utc)
