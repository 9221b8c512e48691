"""
Range updates.

Applies one availability decision (flag, time window, optional note and
recurrence) to every date of an inclusive range. All input is validated
before the first date is touched, so a rejected update never yields a
partial record.
"""

import logging
from datetime import timedelta
from typing import Optional

from availability_engine.exceptions import InvalidDateRange
from availability_engine.models import (
    Availability,
    DateAvailability,
    RecurrenceRule,
    UnavailableTimeSlot,
)
from availability_engine.services.slots import IdFactory, generate_id, stamp_series
from availability_engine.timeutils import (
    DateInput,
    format_date,
    format_time,
    parse_date,
    validate_time_window,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_RANGE_DAYS = 1096


def enumerate_dates(start_date: DateInput, end_date: DateInput) -> list[str]:
    """
    List every date of an inclusive range as 'YYYY-MM-DD'.

    Reversed bounds are swapped.
    """
    start = parse_date(start_date)
    end = parse_date(end_date)
    if start > end:
        start, end = end, start
    return [format_date(start + timedelta(days=i)) for i in range((end - start).days + 1)]


def update_range(
    availability: Availability,
    start_date: DateInput,
    end_date: DateInput,
    available: bool,
    start_time: str,
    end_time: str,
    note: Optional[str] = None,
    recurrence: Optional[RecurrenceRule] = None,
    max_range_days: int = DEFAULT_MAX_RANGE_DAYS,
    id_factory: IdFactory = generate_id,
) -> Availability:
    """
    Set availability for every date from start_date to end_date inclusive.

    For each date the explicit entry is replaced (or appended) and every slot
    anchored on that date is dropped. A non-empty note adds one slot per date
    covering the window, titled with the note; all slots added by one call
    share a seriesId when recurrence repeats.

    Args:
        availability: User's record
        start_date: First date (bounds may be given in either order)
        end_date: Last date
        available: Availability flag for every date
        start_time: Window start (HH:MM)
        end_time: Window end (HH:MM)
        note: Optional reason, stored as the title of a new slot
        recurrence: Optional rule for the note slots
        max_range_days: Largest accepted range
        id_factory: Source of new slot and series ids

    Returns:
        New Availability record

    Raises:
        InvalidDateRange: Malformed date or range longer than max_range_days
        InvalidTimeRange: Malformed time, or start_time >= end_time when
            available or a note is given
    """
    start = parse_date(start_date)
    end = parse_date(end_date)
    start_time = format_time(start_time)
    end_time = format_time(end_time)
    note = note.strip() if note else None

    if available or note:
        validate_time_window(start_time, end_time)

    if start > end:
        start, end = end, start

    span = (end - start).days + 1
    if span > max_range_days:
        raise InvalidDateRange(
            f"Range of {span} days exceeds the maximum of {max_range_days}"
        )

    days = enumerate_dates(start, end)
    in_range = set(days)

    # dict keeps the position of replaced entries
    entries = {entry.date: entry for entry in availability.dates}
    for day in days:
        entries[day] = DateAvailability(
            date=day,
            available=available,
            start_time=start_time,
            end_time=end_time,
        )

    slots = [s for s in availability.unavailable_slots if s.date not in in_range]
    if note:
        rule = stamp_series(recurrence, id_factory)
        taken = {s.id for s in slots}
        for day in days:
            slot_id = id_factory()
            while slot_id in taken:
                slot_id = id_factory()
            taken.add(slot_id)
            slots.append(
                UnavailableTimeSlot(
                    id=slot_id,
                    date=day,
                    start_time=start_time,
                    end_time=end_time,
                    title=note,
                    recurring=rule,
                )
            )

    logger.info(
        f"Updated {span} date(s) {days[0]}..{days[-1]} for {availability.user_id} "
        f"(available={available}, {start_time}-{end_time})"
    )
    return availability.model_copy(
        update={"dates": list(entries.values()), "unavailable_slots": slots}
    )


def set_date_availability(
    availability: Availability,
    date: DateInput,
    available: bool,
    start_time: str,
    end_time: str,
    note: Optional[str] = None,
    recurrence: Optional[RecurrenceRule] = None,
    id_factory: IdFactory = generate_id,
) -> Availability:
    """Set availability for a single date (a range of one day)."""
    return update_range(
        availability,
        date,
        date,
        available,
        start_time,
        end_time,
        note=note,
        recurrence=recurrence,
        id_factory=id_factory,
    )


def toggle_date_availability(
    availability: Availability,
    date: DateInput,
) -> tuple[Availability, bool]:
    """
    Flip a date's availability.

    An existing entry keeps its window and has its flag inverted. A date
    without an entry becomes explicitly unavailable with the default hours.

    Returns:
        Tuple of (updated record, new availability flag)
    """
    day = format_date(date)
    existing = availability.get_date_entry(day)

    if existing is None:
        replacement = DateAvailability(
            date=day,
            available=False,
            start_time=availability.default_start_time,
            end_time=availability.default_end_time,
        )
        dates = [*availability.dates, replacement]
    else:
        start_time, end_time = existing.start_time, existing.end_time
        if not existing.available and start_time >= end_time:
            # Unavailable entries may carry an empty window
            start_time = availability.default_start_time
            end_time = availability.default_end_time
        replacement = DateAvailability(
            date=day,
            available=not existing.available,
            start_time=start_time,
            end_time=end_time,
        )
        dates = [replacement if e.date == day else e for e in availability.dates]

    logger.info(
        f"Toggled {day} for {availability.user_id} to available={replacement.available}"
    )
    return availability.model_copy(update={"dates": dates}), replacement.available
