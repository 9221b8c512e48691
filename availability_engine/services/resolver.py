"""
Availability resolution.

Pure read functions over an Availability record: whether a date is
available, its effective working window, the unavailable slots occurring on
it, and whether a time window on that date is free.

Dates without an explicit entry fall back to the defaults: available
Monday through Friday within defaultStartTime-defaultEndTime.
"""

from dataclasses import dataclass
from typing import Optional

from availability_engine.models import Availability, RecurrenceRule, UnavailableTimeSlot
from availability_engine.services.recurrence import occurs_on
from availability_engine.timeutils import (
    DateInput,
    format_date,
    is_weekday,
    overlaps,
    parse_time,
)

WEEKEND_REASON = "Weekend (no availability set)"
UNAVAILABLE_DAY_REASON = "Marked as unavailable for this day"


@dataclass
class DayAvailability:
    """Effective availability for one date."""

    date: str
    available: bool
    start_time: str
    end_time: str
    note: Optional[str] = None
    recurrence: Optional[RecurrenceRule] = None
    explicit: bool = False


@dataclass
class AvailabilityStatus:
    """Result of checking a time window, with a reason when unavailable."""

    available: bool
    reason: Optional[str] = None


def is_day_available(availability: Availability, date: DateInput) -> bool:
    """
    Check whether a date is available.

    An explicit entry wins; otherwise weekdays are available and weekends
    are not.
    """
    day = format_date(date)
    entry = availability.get_date_entry(day)
    if entry is not None:
        return entry.available
    return is_weekday(day)


def first_matching_slot(
    availability: Availability,
    date: DateInput,
) -> Optional[UnavailableTimeSlot]:
    """
    Pick the slot whose note describes a date.

    Returns the first slot (in stored order) anchored on the date. When
    several slots share a date the others are not reflected in the summary.
    """
    day = format_date(date)
    for slot in availability.unavailable_slots:
        if slot.date == day:
            return slot
    return None


def get_availability_details_for_date(
    availability: Availability,
    date: DateInput,
) -> DayAvailability:
    """
    Resolve the effective availability of a date.

    Args:
        availability: User's record
        date: Date to resolve

    Returns:
        DayAvailability with the window and, for explicit entries, the note
        and recurrence of the first slot anchored on that date
    """
    day = format_date(date)
    entry = availability.get_date_entry(day)

    if entry is None:
        return DayAvailability(
            date=day,
            available=is_weekday(day),
            start_time=availability.default_start_time,
            end_time=availability.default_end_time,
        )

    slot = first_matching_slot(availability, day)
    return DayAvailability(
        date=day,
        available=entry.available,
        start_time=entry.start_time,
        end_time=entry.end_time,
        note=slot.title if slot else None,
        recurrence=slot.recurring if slot else None,
        explicit=True,
    )


def slots_on_date(availability: Availability, date: DateInput) -> list[UnavailableTimeSlot]:
    """
    List slots that occur on a date.

    Includes slots anchored on the date and occurrences of recurring slots
    anchored earlier, ordered by start time.
    """
    day = format_date(date)
    matches = [
        slot for slot in availability.unavailable_slots
        if occurs_on(slot.recurring, slot.date, day)
    ]
    return sorted(matches, key=lambda s: (s.start_time, s.end_time))


def find_overlapping_slot(
    availability: Availability,
    date: DateInput,
    start_time: str,
    end_time: str,
) -> Optional[UnavailableTimeSlot]:
    """Return the earliest slot on a date overlapping [start_time, end_time)."""
    start = parse_time(start_time)
    end = parse_time(end_time)
    for slot in slots_on_date(availability, date):
        if overlaps(start, end, parse_time(slot.start_time), parse_time(slot.end_time)):
            return slot
    return None


def is_time_unavailable(
    availability: Availability,
    date: DateInput,
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
) -> bool:
    """
    Check whether a date, or a window on it, is blocked.

    Without a window only the explicit day flag is checked. With a window,
    any overlapping slot occurring on that date also blocks it.
    """
    entry = availability.get_date_entry(format_date(date))
    if entry is not None and not entry.available:
        return True

    if not start_time or not end_time:
        return False

    return find_overlapping_slot(availability, date, start_time, end_time) is not None


def describe_slot(slot: UnavailableTimeSlot) -> str:
    if slot.title:
        return f"Unavailable: {slot.title}"
    return f"Unavailable from {slot.start_time} to {slot.end_time}"


def get_availability_status(
    availability: Availability,
    date: DateInput,
    start_time: str,
    end_time: str,
) -> AvailabilityStatus:
    """
    Check a time window against the day flag, working hours and slots.

    Args:
        availability: User's record
        date: Date of the window
        start_time: Window start (HH:MM)
        end_time: Window end (HH:MM)

    Returns:
        AvailabilityStatus with a human-readable reason when unavailable
    """
    details = get_availability_details_for_date(availability, date)

    if not details.available:
        reason = UNAVAILABLE_DAY_REASON if details.explicit else WEEKEND_REASON
        return AvailabilityStatus(available=False, reason=reason)

    if parse_time(start_time) < parse_time(details.start_time):
        return AvailabilityStatus(
            available=False,
            reason=f"Before working hours (starts at {details.start_time})",
        )

    if parse_time(end_time) > parse_time(details.end_time):
        return AvailabilityStatus(
            available=False,
            reason=f"After working hours (ends at {details.end_time})",
        )

    slot = find_overlapping_slot(availability, date, start_time, end_time)
    if slot is not None:
        return AvailabilityStatus(available=False, reason=describe_slot(slot))

    return AvailabilityStatus(available=True)
