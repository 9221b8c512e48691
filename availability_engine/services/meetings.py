"""
Meeting scheduling.

Builds a confirmed meeting event from an organizer, invitees and a time
window, stores it, and tells each invitee about it.

The event store is authoritative: if it fails, scheduling fails. The
notification store and notifier are best effort. Their failures are
logged and never undo the event.

Scheduling does not consult availability. Callers that want to warn about
conflicts call check_conflicts() first.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Union

from availability_engine.exceptions import InvalidMeetingRequest, InvalidTimeRange
from availability_engine.integrations.base import (
    AvailabilityRepository,
    EventStore,
    NotificationStore,
    Notifier,
)
from availability_engine.models import Availability, CalendarEvent, NotificationRecord, Priority
from availability_engine.models.events import MEETING_COLOR
from availability_engine.services.conflicts import AvailabilityConflict, RecordFactory, check_conflicts
from availability_engine.services.slots import IdFactory, generate_id
from availability_engine.timeutils import parse_datetime

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _comparable(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    """Treat a naive datetime as UTC when compared with an aware one."""
    if (start.tzinfo is None) != (end.tzinfo is None):
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        else:
            end = end.replace(tzinfo=timezone.utc)
    return start, end


class MeetingScheduler:
    """
    Creates meetings and their per-invitee notifications.

    Attributes:
        event_store: Where meetings are saved
        notification_store: Where invitee news records are saved
        notifier: Delivery channel for invitations
        repository: Availability storage, used only by check_conflicts
        send_notifications: Default for schedule(send_notifications=None)
        default_factory: Record used by check_conflicts for users with none
            stored
    """

    def __init__(
        self,
        event_store: EventStore,
        notification_store: NotificationStore,
        notifier: Notifier,
        repository: Optional[AvailabilityRepository] = None,
        send_notifications: bool = True,
        clock: Clock = _utc_now,
        id_factory: IdFactory = generate_id,
        default_factory: RecordFactory = Availability.default,
    ):
        self.event_store = event_store
        self.notification_store = notification_store
        self.notifier = notifier
        self.repository = repository
        self.send_notifications = send_notifications
        self.default_factory = default_factory
        self._clock = clock
        self._id_factory = id_factory

    def schedule(
        self,
        organizer_id: str,
        invitees: Iterable[str],
        title: str,
        description: str = "",
        start: Union[datetime, str, None] = None,
        end: Union[datetime, str, None] = None,
        location: str = "",
        priority: Priority = "medium",
        is_required: bool = False,
        send_notifications: Optional[bool] = None,
    ) -> CalendarEvent:
        """
        Schedule a meeting.

        Args:
            organizer_id: User creating the meeting
            invitees: Users invited (the organizer is added automatically)
            title: Meeting title
            description: Optional details
            start: Start datetime or ISO 8601 string
            end: End datetime or ISO 8601 string
            location: Optional location
            priority: low, medium or high
            is_required: Whether attendance is mandatory
            send_notifications: Override the scheduler default

        Returns:
            The stored CalendarEvent

        Raises:
            InvalidMeetingRequest: Empty title, no invitees besides the organizer,
                or missing times
            InvalidTimeRange: end <= start
        """
        title = (title or "").strip()
        if not title:
            raise InvalidMeetingRequest("Meeting title is required")

        invited = [u for u in dict.fromkeys(invitees) if u and u != organizer_id]
        if not invited:
            raise InvalidMeetingRequest("At least one invitee is required")

        if start is None or end is None:
            raise InvalidMeetingRequest("Meeting start and end are required")

        start_dt, end_dt = _comparable(parse_datetime(start), parse_datetime(end))
        if end_dt <= start_dt:
            raise InvalidTimeRange(
                f"Meeting must end after it starts ({start_dt.isoformat()} - {end_dt.isoformat()})"
            )

        now = self._clock().isoformat()
        participants = [organizer_id, *invited]
        event = CalendarEvent(
            id=self._id_factory(),
            title=title,
            description=description or "",
            start=start_dt.isoformat(),
            end=end_dt.isoformat(),
            location=location or "",
            type="meeting",
            status="confirmed",
            created_by=organizer_id,
            attendees=participants,
            assigned_to=list(participants),
            color=MEETING_COLOR,
            priority=priority,
            is_required=is_required,
            created_at=now,
            updated_at=now,
        )

        stored = self.event_store.add(event)
        logger.info(
            f"Scheduled meeting {stored.id} '{title}' by {organizer_id} "
            f"with {len(invited)} invitee(s)"
        )

        deliver = self.send_notifications if send_notifications is None else send_notifications
        for user_id in invited:
            self._record_notification(stored, user_id, now)
            if deliver:
                self._deliver_invitation(stored, user_id)

        return stored

    def _record_notification(self, event: CalendarEvent, user_id: str, now: str) -> None:
        record = NotificationRecord(
            id=f"meeting-{event.id}-{user_id}",
            title=f"New Meeting: {event.title}",
            description=event.description or "No description provided",
            date=now,
            priority=event.priority,
            related_to=event.title,
            for_user=user_id,
            event_id=event.id,
        )
        try:
            self.notification_store.add(record)
        except Exception as e:
            logger.error(
                f"Failed to store meeting notification for {user_id}: {e}",
                exc_info=True,
            )

    def _deliver_invitation(self, event: CalendarEvent, user_id: str) -> None:
        payload = {
            "type": "meeting_invitation",
            "eventId": event.id,
            "title": event.title,
            "description": event.description,
            "start": event.start,
            "end": event.end,
            "location": event.location,
            "organizer": event.created_by,
            "isRequired": event.is_required,
        }
        try:
            self.notifier.notify(user_id, payload)
        except Exception as e:
            logger.warning(f"Failed to deliver meeting invitation to {user_id}: {e}")

    def check_conflicts(
        self,
        invitees: Iterable[str],
        start: Union[datetime, str],
        end: Union[datetime, str],
    ) -> list[AvailabilityConflict]:
        """
        Report invitees who are unavailable for a proposed meeting.

        Raises:
            RuntimeError: If the scheduler has no availability repository
        """
        if self.repository is None:
            raise RuntimeError("MeetingScheduler was created without an availability repository")
        return check_conflicts(
            self.repository, invitees, start, end, default_factory=self.default_factory
        )
