"""
Availability service - binds the pure engines to a repository.

Each mutating call loads the user's record once, applies one transform and
saves at most once. Validation errors are raised before the save, so a
rejected call leaves storage untouched.
"""

import logging
from typing import Optional

from availability_engine.config import Settings, get_settings
from availability_engine.integrations import (
    AvailabilityListener,
    AvailabilityRepository,
    InMemoryEventStore,
    InMemoryKeyValueStore,
    InMemoryNotificationStore,
    KeyValueAvailabilityRepository,
    LoggingNotifier,
)
from availability_engine.integrations.base import Unsubscribe
from availability_engine.models import (
    Availability,
    CalendarEvent,
    RecurrenceRule,
    UnavailableSlotDraft,
    UnavailableTimeSlot,
)
from availability_engine.services import range_update, resolver, slots
from availability_engine.services.meetings import MeetingScheduler
from availability_engine.services.projector import project_availability_events
from availability_engine.services.resolver import AvailabilityStatus, DayAvailability
from availability_engine.services.slots import IdFactory, generate_id
from availability_engine.timeutils import DateInput

logger = logging.getLogger(__name__)

# Singleton instances
_availability_service: Optional["AvailabilityService"] = None
_meeting_scheduler: Optional[MeetingScheduler] = None


class AvailabilityService:
    """
    Per-user availability operations over an AvailabilityRepository.

    Users without a stored record get the default record: no explicit dates,
    default hours from settings, no slots.
    """

    def __init__(
        self,
        repository: AvailabilityRepository,
        settings: Optional[Settings] = None,
        id_factory: IdFactory = generate_id,
    ):
        self.repository = repository
        self._settings = settings or get_settings()
        self._id_factory = id_factory

    def default_record(self, user_id: str) -> Availability:
        return Availability.default(
            user_id,
            start_time=self._settings.default_start_time,
            end_time=self._settings.default_end_time,
        )

    def _load(self, user_id: str) -> Availability:
        availability = self.repository.load(user_id)
        return availability if availability is not None else self.default_record(user_id)

    def subscribe(self, listener: AvailabilityListener) -> Unsubscribe:
        """Register a listener called with the user id after each save."""
        return self.repository.subscribe(listener)

    # =========================================================================
    # Reads
    # =========================================================================

    def get_availability(self, user_id: str) -> Availability:
        """
        Get a user's record, creating and saving the default on first read.

        Args:
            user_id: Record owner

        Returns:
            Stored or newly created Availability
        """
        availability = self.repository.load(user_id)
        if availability is None:
            availability = self.default_record(user_id)
            self.repository.save(availability)
            logger.info(f"Created default availability for {user_id}")
        return availability

    def is_day_available(self, user_id: str, date: DateInput) -> bool:
        return resolver.is_day_available(self.get_availability(user_id), date)

    def get_day_details(self, user_id: str, date: DateInput) -> DayAvailability:
        return resolver.get_availability_details_for_date(self.get_availability(user_id), date)

    def get_day_status(
        self,
        user_id: str,
        date: DateInput,
        start_time: str,
        end_time: str,
    ) -> AvailabilityStatus:
        return resolver.get_availability_status(
            self.get_availability(user_id), date, start_time, end_time
        )

    def slots_on_date(self, user_id: str, date: DateInput) -> list[UnavailableTimeSlot]:
        return resolver.slots_on_date(self.get_availability(user_id), date)

    def project_events(
        self,
        user_id: str,
        window_start: Optional[DateInput] = None,
        window_end: Optional[DateInput] = None,
        include_available: bool = False,
    ) -> list[CalendarEvent]:
        """Project a user's unavailable days and slots as calendar events."""
        return project_availability_events(
            self.get_availability(user_id),
            window_start,
            window_end,
            include_available=include_available,
            max_instances=self._settings.max_recurrence_instances,
        )

    # =========================================================================
    # Mutations
    # =========================================================================

    def reset_availability(self, user_id: str) -> Availability:
        """Replace a user's record with the default record."""
        availability = self.default_record(user_id)
        self.repository.save(availability)
        logger.info(f"Reset availability for {user_id}")
        return availability

    def update_range(
        self,
        user_id: str,
        start_date: DateInput,
        end_date: DateInput,
        available: bool,
        start_time: str,
        end_time: str,
        note: Optional[str] = None,
        recurrence: Optional[RecurrenceRule] = None,
    ) -> Availability:
        """
        Apply one availability decision to every date in a range and save.

        Raises:
            InvalidDateRange: Malformed or oversized range
            InvalidTimeRange: Malformed or unordered time window
        """
        updated = range_update.update_range(
            self._load(user_id),
            start_date,
            end_date,
            available,
            start_time,
            end_time,
            note=note,
            recurrence=recurrence,
            max_range_days=self._settings.max_range_days,
            id_factory=self._id_factory,
        )
        self.repository.save(updated)
        return updated

    def set_date_availability(
        self,
        user_id: str,
        date: DateInput,
        available: bool,
        start_time: str,
        end_time: str,
        note: Optional[str] = None,
        recurrence: Optional[RecurrenceRule] = None,
    ) -> Availability:
        return self.update_range(
            user_id, date, date, available, start_time, end_time, note, recurrence
        )

    def toggle_date(self, user_id: str, date: DateInput) -> bool:
        """
        Flip a date's availability and save.

        Returns:
            The date's new availability flag
        """
        updated, available = range_update.toggle_date_availability(self._load(user_id), date)
        self.repository.save(updated)
        return available

    def create_slot(self, user_id: str, draft: UnavailableSlotDraft) -> UnavailableTimeSlot:
        """
        Add an unavailable slot and save.

        Raises:
            InvalidTimeRange: If draft start_time >= end_time
        """
        updated, slot = slots.create_slot(self._load(user_id), draft, self._id_factory)
        self.repository.save(updated)
        return slot

    def delete_slot(self, user_id: str, slot_id: str, delete_recurring: bool = False) -> bool:
        """
        Delete a slot (or its whole series) and save.

        Returns:
            True if anything was removed; unknown ids are not an error
        """
        availability = self._load(user_id)
        updated = slots.delete_slot(availability, slot_id, delete_recurring)
        if updated is availability:
            return False
        self.repository.save(updated)
        return True


def _build_repository(settings: Settings) -> AvailabilityRepository:
    if settings.uses_database:
        from availability_engine.integrations.database import SQLAlchemyKeyValueStore

        logger.info("Using database key-value store for availability")
        store = SQLAlchemyKeyValueStore()
    else:
        logger.info("Using in-memory key-value store for availability")
        store = InMemoryKeyValueStore()
    return KeyValueAvailabilityRepository(store, key_prefix=settings.availability_key_prefix)


def get_availability_service() -> AvailabilityService:
    """
    Get the availability service singleton.

    Returns:
        AvailabilityService backed by the configured storage
    """
    global _availability_service

    if _availability_service is None:
        settings = get_settings()
        _availability_service = AvailabilityService(_build_repository(settings), settings)
        logger.info("Availability service initialized")

    return _availability_service


def get_meeting_scheduler() -> MeetingScheduler:
    """
    Get the meeting scheduler singleton.

    Shares its availability repository and default record with
    get_availability_service().
    """
    global _meeting_scheduler

    if _meeting_scheduler is None:
        settings = get_settings()
        service = get_availability_service()
        _meeting_scheduler = MeetingScheduler(
            event_store=InMemoryEventStore(),
            notification_store=InMemoryNotificationStore(),
            notifier=LoggingNotifier(),
            repository=service.repository,
            send_notifications=settings.send_meeting_notifications,
            default_factory=service.default_record,
        )
        logger.info("Meeting scheduler initialized")

    return _meeting_scheduler


def reset_availability_service():
    """Reset the service singletons (useful for testing)."""
    global _availability_service, _meeting_scheduler
    _availability_service = None
    _meeting_scheduler = None
