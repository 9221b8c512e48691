"""
In-memory adapters.

Process-local implementations of the storage and delivery protocols. Used
by default in development and throughout the tests.
"""

import logging
from collections import deque
from typing import Any, Optional, Sequence

from availability_engine.models import CalendarEvent, NotificationRecord

logger = logging.getLogger(__name__)

MAX_SENT_HISTORY = 100


class InMemoryKeyValueStore:
    """KeyValueStore backed by a dict."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def keys(self) -> list[str]:
        return list(self._data)


class InMemoryEventStore:
    """EventStore backed by an insertion-ordered dict."""

    def __init__(self):
        self._events: dict[str, CalendarEvent] = {}

    def add(self, event: CalendarEvent) -> CalendarEvent:
        self._events[event.id] = event
        return event

    def get(self, event_id: str) -> Optional[CalendarEvent]:
        return self._events.get(event_id)

    def list_for_user(self, user_id: str) -> Sequence[CalendarEvent]:
        return [e for e in self._events.values() if e.involves(user_id)]


class InMemoryNotificationStore:
    """NotificationStore backed by a list."""

    def __init__(self):
        self._records: list[NotificationRecord] = []

    def add(self, record: NotificationRecord) -> None:
        self._records.append(record)

    def list_for_user(self, user_id: str) -> Sequence[NotificationRecord]:
        return [r for r in self._records if r.for_user == user_id]


class LoggingNotifier:
    """
    Notifier that only logs.

    Stands in for email or push delivery, which lives outside this engine.
    Keeps the most recent payloads in `sent`, oldest dropped first.
    """

    def __init__(self, max_history: int = MAX_SENT_HISTORY):
        self.sent: deque[tuple[str, dict[str, Any]]] = deque(maxlen=max_history)

    def notify(self, user_id: str, payload: dict[str, Any]) -> None:
        self.sent.append((user_id, payload))
        logger.info(f"Notification for {user_id}: {payload.get('title', '')}")
