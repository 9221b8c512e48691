"""
Calendar projection of availability data.

Derives read-only pseudo-events so unavailable days and slots render next
to real events. Projected events carry projected=True and are never
written to the event store.
"""

from datetime import time, timedelta
from typing import Iterable, Optional

from availability_engine.models import Availability, CalendarEvent
from availability_engine.models.events import UNAVAILABLE_COLOR
from availability_engine.services.recurrence import (
    DEFAULT_MAX_INSTANCES,
    expand,
    is_recurring,
)
from availability_engine.timeutils import DateInput, format_date, parse_date, parse_datetime

AVAILABLE_COLOR = "#4ade80"


def _in_window(day: str, window_start, window_end) -> bool:
    d = parse_date(day)
    if window_start is not None and d < window_start:
        return False
    if window_end is not None and d > window_end:
        return False
    return True


def project_availability_events(
    availability: Availability,
    window_start: Optional[DateInput] = None,
    window_end: Optional[DateInput] = None,
    include_available: bool = False,
    max_instances: int = DEFAULT_MAX_INSTANCES,
) -> list[CalendarEvent]:
    """
    Build pseudo-events from an availability record.

    Produces one all-day event per date marked unavailable and one event per
    unavailable slot. When both window bounds are given, recurring slots
    expand into one event per occurrence inside the window; otherwise only
    the anchor occurrence is projected.

    Args:
        availability: User's record
        window_start: First date to include (inclusive)
        window_end: Last date to include (inclusive)
        include_available: Also project explicitly available dates as
            'availability' events
        max_instances: Cap on occurrences per recurring slot

    Returns:
        Projected events ordered by start
    """
    start = parse_date(window_start) if window_start is not None else None
    end = parse_date(window_end) if window_end is not None else None
    user_id = availability.user_id
    events = []

    for entry in availability.dates:
        if not _in_window(entry.date, start, end):
            continue
        next_day = format_date(parse_date(entry.date) + timedelta(days=1))
        if not entry.available:
            events.append(
                CalendarEvent(
                    id=f"unavail-day-{user_id}-{entry.date}",
                    title="Unavailable",
                    start=f"{entry.date}T00:00:00",
                    end=f"{next_day}T00:00:00",
                    type="unavailable",
                    created_by=user_id,
                    attendees=[user_id],
                    color=UNAVAILABLE_COLOR,
                    all_day=True,
                    projected=True,
                )
            )
        elif include_available:
            events.append(
                CalendarEvent(
                    id=f"avail-{user_id}-{entry.date}",
                    title="Available",
                    start=f"{entry.date}T{entry.start_time}:00",
                    end=f"{entry.date}T{entry.end_time}:00",
                    type="availability",
                    created_by=user_id,
                    attendees=[user_id],
                    color=AVAILABLE_COLOR,
                    projected=True,
                )
            )

    for slot in availability.unavailable_slots:
        if is_recurring(slot.recurring) and start is not None and end is not None:
            days = [format_date(d) for d in expand(slot.recurring, slot.date, start, end, max_instances)]
        elif _in_window(slot.date, start, end):
            days = [slot.date]
        else:
            days = []

        for day in days:
            event_id = f"unavail-{slot.id}" if day == slot.date else f"unavail-{slot.id}-{day}"
            events.append(
                CalendarEvent(
                    id=event_id,
                    title=slot.title or "Unavailable",
                    description=slot.title or "",
                    start=f"{day}T{slot.start_time}:00",
                    end=f"{day}T{slot.end_time}:00",
                    type="unavailable",
                    created_by=user_id,
                    attendees=[user_id],
                    color=UNAVAILABLE_COLOR,
                    projected=True,
                )
            )

    return sorted(events, key=lambda e: e.start)


def merge_calendar_feed(
    events: Iterable[CalendarEvent],
    projected: Iterable[CalendarEvent],
    day: Optional[DateInput] = None,
) -> list[CalendarEvent]:
    """
    Combine stored and projected events into one feed ordered by start.

    Args:
        events: Stored calendar events
        projected: Events from project_availability_events
        day: If given, keep only events that touch this date

    Returns:
        Merged list
    """
    merged = [*events, *projected]

    if day is not None:
        target = parse_date(day)

        def touches(event: CalendarEvent) -> bool:
            event_start = parse_datetime(event.start).date()
            event_end = parse_datetime(event.end)
            last = event_end.date()
            # All-day events end at midnight of the following day
            if event_end.time() == time.min and last > event_start:
                last -= timedelta(days=1)
            return event_start <= target <= last

        merged = [e for e in merged if touches(e)]

    return sorted(merged, key=lambda e: parse_datetime(e.start).replace(tzinfo=None))
