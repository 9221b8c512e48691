"""
Unavailable slot management.

Create, look up and delete unavailable time windows. Every function returns
a new Availability record; the input record is never modified.
"""

import logging
import uuid
from typing import Callable, Optional

from availability_engine.models import (
    Availability,
    RecurrenceRule,
    UnavailableSlotDraft,
    UnavailableTimeSlot,
)
from availability_engine.services.recurrence import is_recurring
from availability_engine.timeutils import validate_time_window

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


def generate_id() -> str:
    """Generate a unique identifier for slots and series."""
    return str(uuid.uuid4())


def stamp_series(
    rule: Optional[RecurrenceRule],
    id_factory: IdFactory = generate_id,
) -> Optional[RecurrenceRule]:
    """
    Give a recurring rule a seriesId if it has none.

    Non-recurring rules (None or type 'none') are dropped so a one-off slot
    never shares a series with anything.
    """
    if not is_recurring(rule):
        return None
    if rule.series_id:
        return rule
    return rule.model_copy(update={"series_id": id_factory()})


def get_slot(availability: Availability, slot_id: str) -> Optional[UnavailableTimeSlot]:
    """Find a slot by id."""
    for slot in availability.unavailable_slots:
        if slot.id == slot_id:
            return slot
    return None


def create_slot(
    availability: Availability,
    draft: UnavailableSlotDraft,
    id_factory: IdFactory = generate_id,
) -> tuple[Availability, UnavailableTimeSlot]:
    """
    Add an unavailable slot.

    Args:
        availability: User's record
        draft: Slot data without an id
        id_factory: Source of new ids

    Returns:
        Tuple of (updated record, created slot)

    Raises:
        InvalidTimeRange: If draft start_time >= end_time
    """
    validate_time_window(draft.start_time, draft.end_time)

    slot_id = id_factory()
    while get_slot(availability, slot_id) is not None:
        slot_id = id_factory()

    slot = UnavailableTimeSlot(
        id=slot_id,
        date=draft.date,
        start_time=draft.start_time,
        end_time=draft.end_time,
        title=draft.title,
        recurring=stamp_series(draft.recurring, id_factory),
    )

    updated = availability.model_copy(
        update={"unavailable_slots": [*availability.unavailable_slots, slot]}
    )
    logger.info(
        f"Created unavailable slot {slot.id} for {availability.user_id} "
        f"on {slot.date} {slot.start_time}-{slot.end_time}"
    )
    return updated, slot


def delete_slot(
    availability: Availability,
    slot_id: str,
    delete_recurring: bool = False,
) -> Availability:
    """
    Remove a slot, or every slot of its recurring series.

    With delete_recurring, every slot whose rule equals the target's rule
    (type, interval, bounds and seriesId) is removed. An unknown id leaves
    the record unchanged.

    Args:
        availability: User's record
        slot_id: Slot to delete
        delete_recurring: Also delete the rest of the series

    Returns:
        Updated record (the same record if nothing matched)
    """
    target = get_slot(availability, slot_id)
    if target is None:
        logger.debug(f"Slot {slot_id} not found for {availability.user_id}")
        return availability

    if delete_recurring and target.is_recurring:
        remaining = [
            s for s in availability.unavailable_slots
            if s.id != slot_id and s.recurring != target.recurring
        ]
    else:
        remaining = [s for s in availability.unavailable_slots if s.id != slot_id]

    removed = len(availability.unavailable_slots) - len(remaining)
    logger.info(f"Deleted {removed} unavailable slot(s) for {availability.user_id}")
    return availability.model_copy(update={"unavailable_slots": remaining})
