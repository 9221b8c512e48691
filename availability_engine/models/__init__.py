"""
Models for the Availability Engine.

Pydantic records for availability, events and notifications, plus the
SQLAlchemy table used by the database key-value adapter (imported here so
Alembic can discover it).
"""

from availability_engine.models.availability import (
    Availability,
    DateAvailability,
    RecordModel,
    RecurrenceRule,
    RecurrenceType,
    UnavailableSlotDraft,
    UnavailableTimeSlot,
)
from availability_engine.models.base import Base, KeyValueEntry
from availability_engine.models.events import (
    CalendarEvent,
    EventStatus,
    EventType,
    NotificationRecord,
    Priority,
)

__all__ = [
    # Availability records
    "Availability",
    "DateAvailability",
    "RecordModel",
    "RecurrenceRule",
    "RecurrenceType",
    "UnavailableSlotDraft",
    "UnavailableTimeSlot",
    # Event records
    "CalendarEvent",
    "EventStatus",
    "EventType",
    "NotificationRecord",
    "Priority",
    # Tables
    "Base",
    "KeyValueEntry",
]
