"""
Calendar event and notification records.

CalendarEvent covers both stored meetings and the pseudo-events projected
from availability data. NotificationRecord is the per-invitee news entry
written when a meeting is scheduled.
"""

from typing import Literal, Optional

from pydantic import Field

from availability_engine.models.availability import RecordModel

EventType = Literal["meeting", "other", "availability", "unavailable"]
EventStatus = Literal["confirmed", "pending", "cancelled"]
Priority = Literal["low", "medium", "high"]

MEETING_COLOR = "#3b82f6"
UNAVAILABLE_COLOR = "#ef4444"


class CalendarEvent(RecordModel):
    """
    A calendar entry.

    start/end are ISO 8601 datetimes. attendees and assigned_to hold the
    same user ids for meetings. projected is True only for entries derived
    from availability data, which are never persisted.
    """

    id: str
    title: str
    description: str = ""
    start: str
    end: str
    location: str = ""
    type: EventType = "meeting"
    status: EventStatus = "confirmed"
    created_by: Optional[str] = None
    attendees: list[str] = Field(default_factory=list)
    assigned_to: list[str] = Field(default_factory=list)
    color: Optional[str] = None
    priority: Priority = "medium"
    is_required: bool = False
    all_day: bool = False
    projected: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def involves(self, user_id: str) -> bool:
        """Check whether a user created, attends or is assigned to the event."""
        return (
            self.created_by == user_id
            or user_id in self.attendees
            or user_id in self.assigned_to
        )


class NotificationRecord(RecordModel):
    """News item telling an invitee about a new meeting."""

    id: str
    type: Literal["meeting"] = "meeting"
    title: str
    description: str
    date: str
    priority: Priority = "medium"
    status: Literal["pending", "done"] = "pending"
    link: str = "/calendar"
    related_to: Optional[str] = None
    for_user: str
    event_id: str
    read: bool = False
