"""
Service layer for the Availability Engine.

Provides business logic for:
- Recurrence expansion (python-dateutil rrule)
- Availability resolution with weekday defaults
- Range updates and unavailable slot management
- Meeting scheduling and conflict checks
- Calendar projection of availability data

Use AvailabilityService for repository-backed operations.
"""

from availability_engine.services.recurrence import (
    build_rrule,
    describe_recurrence,
    expand,
    is_recurring,
    occurs_on,
)

from availability_engine.services.resolver import (
    AvailabilityStatus,
    DayAvailability,
    first_matching_slot,
    get_availability_details_for_date,
    get_availability_status,
    is_day_available,
    is_time_unavailable,
    slots_on_date,
)

from availability_engine.services.slots import (
    create_slot,
    delete_slot,
    generate_id,
    get_slot,
)

from availability_engine.services.range_update import (
    enumerate_dates,
    set_date_availability,
    toggle_date_availability,
    update_range,
)

from availability_engine.services.conflicts import (
    AvailabilityConflict,
    CommonSlot,
    check_conflicts,
    find_common_available_slots,
    get_team_availability,
)

from availability_engine.services.meetings import MeetingScheduler

from availability_engine.services.projector import (
    merge_calendar_feed,
    project_availability_events,
)

from availability_engine.services.availability_service import (
    AvailabilityService,
    get_availability_service,
    get_meeting_scheduler,
    reset_availability_service,
)

__all__ = [
    # Recurrence
    "build_rrule",
    "describe_recurrence",
    "expand",
    "is_recurring",
    "occurs_on",
    # Resolution
    "AvailabilityStatus",
    "DayAvailability",
    "first_matching_slot",
    "get_availability_details_for_date",
    "get_availability_status",
    "is_day_available",
    "is_time_unavailable",
    "slots_on_date",
    # Slots
    "create_slot",
    "delete_slot",
    "generate_id",
    "get_slot",
    # Range updates
    "enumerate_dates",
    "set_date_availability",
    "toggle_date_availability",
    "update_range",
    # Conflicts
    "AvailabilityConflict",
    "CommonSlot",
    "check_conflicts",
    "find_common_available_slots",
    "get_team_availability",
    # Meetings
    "MeetingScheduler",
    # Projection
    "merge_calendar_feed",
    "project_availability_events",
    # Availability Service
    "AvailabilityService",
    "get_availability_service",
    "get_meeting_scheduler",
    "reset_availability_service",
]
