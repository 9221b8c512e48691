"""
Availability conflict checks across users.

Opt-in checks used before (never inside) meeting scheduling:
- check_conflicts: why each invitee cannot make a proposed meeting
- get_team_availability: effective availability of several users on a date
- find_common_available_slots: windows on a date when enough users are free

Meeting times are compared as wall-clock times on the meeting's start date.
Users without a stored record are checked against the default record.
"""

import logging
from dataclasses import dataclass, field
from datetime import date as date_type, datetime, time, timedelta
from typing import Callable, Iterable, Optional, Union

from availability_engine.integrations.base import AvailabilityRepository
from availability_engine.models import Availability
from availability_engine.services.resolver import (
    UNAVAILABLE_DAY_REASON,
    WEEKEND_REASON,
    DayAvailability,
    describe_slot,
    get_availability_details_for_date,
    get_availability_status,
    slots_on_date,
)
from availability_engine.timeutils import (
    DateInput,
    format_date,
    format_time,
    overlaps,
    parse_datetime,
    parse_time,
)

logger = logging.getLogger(__name__)

RecordFactory = Callable[[str], Availability]


@dataclass
class AvailabilityConflict:
    """A reason one user cannot attend a proposed meeting."""

    user_id: str
    reason: str
    slot_id: Optional[str] = None


@dataclass
class CommonSlot:
    """A window on one date and the users free for all of it."""

    start_time: str
    end_time: str
    available_users: list[str] = field(default_factory=list)


def _load(
    repository: AvailabilityRepository,
    user_id: str,
    default_factory: RecordFactory,
) -> Availability:
    availability = repository.load(user_id)
    return availability if availability is not None else default_factory(user_id)


def conflicts_for_record(
    availability: Availability,
    start: datetime,
    end: datetime,
) -> list[AvailabilityConflict]:
    """
    Check one user's record against a meeting window.

    Args:
        availability: User's record
        start: Meeting start
        end: Meeting end

    Returns:
        Conflicts found, empty if the user is free
    """
    user_id = availability.user_id
    day = format_date(start)
    details = get_availability_details_for_date(availability, day)

    if not details.available:
        reason = UNAVAILABLE_DAY_REASON if details.explicit else WEEKEND_REASON
        return [AvailabilityConflict(user_id=user_id, reason=reason)]

    conflicts = []
    meeting_start = start.time()
    # Meetings running past midnight are checked on their start date only
    same_day = end.date() == start.date()
    meeting_end = end.time() if same_day else time.max

    if (
        not same_day
        or meeting_start < parse_time(details.start_time)
        or meeting_end > parse_time(details.end_time)
    ):
        label = "available" if details.explicit else "default working"
        conflicts.append(
            AvailabilityConflict(
                user_id=user_id,
                reason=f"Outside of {label} hours ({details.start_time} - {details.end_time})",
            )
        )

    for slot in slots_on_date(availability, day):
        if overlaps(
            meeting_start,
            meeting_end,
            parse_time(slot.start_time),
            parse_time(slot.end_time),
        ):
            conflicts.append(
                AvailabilityConflict(
                    user_id=user_id,
                    reason=describe_slot(slot),
                    slot_id=slot.id,
                )
            )

    return conflicts


def check_conflicts(
    repository: AvailabilityRepository,
    invitees: Iterable[str],
    start: Union[datetime, str],
    end: Union[datetime, str],
    default_factory: RecordFactory = Availability.default,
) -> list[AvailabilityConflict]:
    """
    Report availability conflicts for every invitee of a proposed meeting.

    Args:
        repository: Availability storage
        invitees: User ids to check
        start: Meeting start (datetime or ISO 8601 string)
        end: Meeting end
        default_factory: Builds the record for users with none stored

    Returns:
        All conflicts, grouped by invitee in input order
    """
    start_dt = parse_datetime(start)
    end_dt = parse_datetime(end)

    conflicts = []
    for user_id in dict.fromkeys(invitees):
        availability = _load(repository, user_id, default_factory)
        conflicts.extend(conflicts_for_record(availability, start_dt, end_dt))

    logger.debug(f"Found {len(conflicts)} conflict(s) for meeting at {start_dt.isoformat()}")
    return conflicts


def get_team_availability(
    repository: AvailabilityRepository,
    user_ids: Iterable[str],
    date: DateInput,
    default_factory: RecordFactory = Availability.default,
) -> dict[str, DayAvailability]:
    """Resolve each user's effective availability on a date."""
    return {
        user_id: get_availability_details_for_date(
            _load(repository, user_id, default_factory), date
        )
        for user_id in dict.fromkeys(user_ids)
    }


def find_common_available_slots(
    repository: AvailabilityRepository,
    user_ids: Iterable[str],
    date: DateInput,
    duration_minutes: int = 60,
    step_minutes: int = 30,
    min_users: int = 2,
    day_start: str = "09:00",
    day_end: str = "17:00",
    default_factory: RecordFactory = Availability.default,
) -> list[CommonSlot]:
    """
    Find windows on a date when at least min_users users are free.

    Candidate windows of duration_minutes start every step_minutes from
    day_start and must end by day_end. A user is free for a window when the
    day is available, the window lies inside their working hours and no
    unavailable slot overlaps it.

    Returns:
        Windows in chronological order with the users free for each
    """
    if duration_minutes <= 0 or step_minutes <= 0:
        raise ValueError("duration_minutes and step_minutes must be positive")

    users = list(dict.fromkeys(user_ids))
    records = {u: _load(repository, u, default_factory) for u in users}

    anchor = date_type(2000, 1, 1)
    cursor = datetime.combine(anchor, parse_time(day_start))
    limit = datetime.combine(anchor, parse_time(day_end))
    duration = timedelta(minutes=duration_minutes)

    slots = []
    while cursor + duration <= limit:
        window_start = format_time(cursor.time())
        window_end = format_time((cursor + duration).time())
        free = [
            u for u in users
            if get_availability_status(records[u], date, window_start, window_end).available
        ]
        if len(free) >= min_users:
            slots.append(CommonSlot(window_start, window_end, free))
        cursor += timedelta(minutes=step_minutes)

    return slots
