"""
Storage and delivery adapters for the Availability Engine.

The SQLAlchemy store lives in availability_engine.integrations.database and
is imported on demand so the in-memory setup never creates an engine.
"""

from availability_engine.integrations.base import (
    AvailabilityListener,
    AvailabilityRepository,
    EventStore,
    KeyValueStore,
    NotificationStore,
    Notifier,
)
from availability_engine.integrations.memory import (
    InMemoryEventStore,
    InMemoryKeyValueStore,
    InMemoryNotificationStore,
    LoggingNotifier,
)
from availability_engine.integrations.repository import KeyValueAvailabilityRepository

__all__ = [
    "AvailabilityListener",
    "AvailabilityRepository",
    "EventStore",
    "KeyValueStore",
    "NotificationStore",
    "Notifier",
    "InMemoryEventStore",
    "InMemoryKeyValueStore",
    "InMemoryNotificationStore",
    "LoggingNotifier",
    "KeyValueAvailabilityRepository",
]
