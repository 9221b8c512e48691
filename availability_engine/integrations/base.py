"""
Storage and delivery protocols.

Defines the interfaces the engine depends on. The engine never talks to a
concrete store; adapters in this package implement these protocols.
"""

from abc import abstractmethod
from typing import Any, Callable, Optional, Protocol, Sequence

from availability_engine.models import Availability, CalendarEvent, NotificationRecord

AvailabilityListener = Callable[[str], None]
Unsubscribe = Callable[[], None]


class KeyValueStore(Protocol):
    """
    Protocol for string key-value storage.

    Implementations:
    - InMemoryKeyValueStore: process-local dict
    - SQLAlchemyKeyValueStore: key_value_store table
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous value."""
        ...


class AvailabilityRepository(Protocol):
    """
    Protocol for availability persistence.

    Saves are last-write-wins. Listeners registered with subscribe() are
    called with the user id after every save so other views can reload.
    """

    @abstractmethod
    def load(self, user_id: str) -> Optional[Availability]:
        """
        Load a user's record.

        Args:
            user_id: Record owner

        Returns:
            Availability or None if the user has no record yet
        """
        ...

    @abstractmethod
    def save(self, availability: Availability) -> None:
        """
        Persist a complete record.

        Args:
            availability: Record to store under its user_id
        """
        ...

    @abstractmethod
    def subscribe(self, listener: AvailabilityListener) -> Unsubscribe:
        """
        Register a change listener.

        Args:
            listener: Called with the user id after each save

        Returns:
            Callable that removes the listener
        """
        ...


class EventStore(Protocol):
    """Protocol for calendar event storage."""

    @abstractmethod
    def add(self, event: CalendarEvent) -> CalendarEvent:
        """Store a new event and return it."""
        ...

    @abstractmethod
    def get(self, event_id: str) -> Optional[CalendarEvent]:
        """Return an event by id, or None."""
        ...

    @abstractmethod
    def list_for_user(self, user_id: str) -> Sequence[CalendarEvent]:
        """Return events the user created, attends or is assigned to."""
        ...


class NotificationStore(Protocol):
    """Protocol for per-user notification records."""

    @abstractmethod
    def add(self, record: NotificationRecord) -> None:
        """Store a notification record."""
        ...

    @abstractmethod
    def list_for_user(self, user_id: str) -> Sequence[NotificationRecord]:
        """Return records addressed to a user, oldest first."""
        ...


class Notifier(Protocol):
    """Protocol for delivering a notification to a user."""

    @abstractmethod
    def notify(self, user_id: str, payload: dict[str, Any]) -> None:
        """
        Deliver a payload to a user.

        Args:
            user_id: Recipient
            payload: JSON-serializable message content
        """
        ...
