"""
Date and time helpers shared by models and services.

Availability records store calendar dates as 'YYYY-MM-DD' strings and
wall-clock times as 'HH:MM' (24h) strings. These helpers parse caller input
into datetime objects and format them back into the canonical string form.
"""

from datetime import date, datetime, time
from typing import Union

from dateutil.parser import isoparse

from availability_engine.exceptions import InvalidDateRange, InvalidTimeRange

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

DateInput = Union[date, datetime, str]


def parse_date(value: DateInput) -> date:
    """
    Parse a calendar date.

    Args:
        value: date, datetime, or 'YYYY-MM-DD' string

    Returns:
        date object

    Raises:
        InvalidDateRange: If the value is not a recognizable date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except (AttributeError, TypeError, ValueError) as e:
        raise InvalidDateRange(
            f"Invalid date '{value}': expected YYYY-MM-DD",
            original_error=e,
        )


def format_date(value: DateInput) -> str:
    """Format a date as 'YYYY-MM-DD'."""
    return parse_date(value).strftime(DATE_FORMAT)


def parse_time(value: Union[time, str]) -> time:
    """
    Parse a wall-clock time.

    Args:
        value: time or 'HH:MM' string

    Returns:
        time object

    Raises:
        InvalidTimeRange: If the value is not a recognizable time
    """
    if isinstance(value, time):
        return value

    try:
        return datetime.strptime(value.strip(), TIME_FORMAT).time()
    except (AttributeError, TypeError, ValueError) as e:
        raise InvalidTimeRange(
            f"Invalid time '{value}': expected HH:MM",
            original_error=e,
        )


def format_time(value: Union[time, str]) -> str:
    """Format a time as 'HH:MM'."""
    return parse_time(value).strftime(TIME_FORMAT)


def validate_time_window(start_time: Union[time, str], end_time: Union[time, str]) -> None:
    """
    Ensure a time window ends after it starts.

    Raises:
        InvalidTimeRange: If start_time >= end_time or either is malformed
    """
    start = parse_time(start_time)
    end = parse_time(end_time)
    if start >= end:
        raise InvalidTimeRange(
            f"End time must be after start time ({format_time(start)} - {format_time(end)})"
        )


def parse_datetime(value: Union[datetime, str]) -> datetime:
    """
    Parse an ISO 8601 datetime.

    Raises:
        InvalidDateRange: If the value is not a recognizable datetime
    """
    if isinstance(value, datetime):
        return value

    try:
        return isoparse(value)
    except (TypeError, ValueError) as e:
        raise InvalidDateRange(
            f"Invalid datetime '{value}': expected ISO 8601",
            original_error=e,
        )


def is_weekday(value: DateInput) -> bool:
    """Check whether a date falls Monday through Friday."""
    return parse_date(value).weekday() < 5


def overlaps(start_a: time, end_a: time, start_b: time, end_b: time) -> bool:
    """Check whether two half-open time windows overlap."""
    return start_a < end_b and start_b < end_a
