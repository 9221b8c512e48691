"""
Pytest configuration and fixtures for Availability Engine tests.

Provides deterministic id factories, sample availability records,
in-memory repositories and an in-memory SQLite session factory.
"""

import itertools
from typing import Callable, Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from availability_engine.config import Settings
from availability_engine.integrations import (
    InMemoryEventStore,
    InMemoryKeyValueStore,
    InMemoryNotificationStore,
    KeyValueAvailabilityRepository,
    LoggingNotifier,
)
from availability_engine.models import (
    Availability,
    DateAvailability,
    RecurrenceRule,
    UnavailableTimeSlot,
)
from availability_engine.models.base import Base
from availability_engine.services import AvailabilityService, MeetingScheduler


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Sequential ids: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults only (no .env file)."""
    return Settings(_env_file=None)


@pytest.fixture
def empty_availability() -> Availability:
    """Default record: no explicit dates, 09:00-17:00, no slots."""
    return Availability.default("user-1")


@pytest.fixture
def sample_availability() -> Availability:
    """
    Record with explicit dates and slots in June 2024.

    - 2024-06-10 (Monday): explicitly unavailable
    - 2024-06-12 (Wednesday): available 10:00-15:00, with a titled slot
    - 2024-06-15 (Saturday): explicitly available 09:00-12:00
    - Weekly standup slot anchored on Monday 2024-06-03
    """
    return Availability(
        user_id="user-1",
        dates=[
            DateAvailability(date="2024-06-10", available=False, start_time="09:00", end_time="17:00"),
            DateAvailability(date="2024-06-12", available=True, start_time="10:00", end_time="15:00"),
            DateAvailability(date="2024-06-15", available=True, start_time="09:00", end_time="12:00"),
        ],
        unavailable_slots=[
            UnavailableTimeSlot(
                id="slot-dentist",
                date="2024-06-12",
                start_time="11:00",
                end_time="12:00",
                title="Dentist",
            ),
            UnavailableTimeSlot(
                id="slot-standup",
                date="2024-06-03",
                start_time="09:00",
                end_time="09:30",
                title="Standup",
                recurring=RecurrenceRule(type="weekly", series_id="series-standup"),
            ),
        ],
    )


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def repository(kv_store: InMemoryKeyValueStore) -> KeyValueAvailabilityRepository:
    """Availability repository over an empty in-memory store."""
    return KeyValueAvailabilityRepository(kv_store)


@pytest.fixture
def service(repository, settings, id_factory) -> AvailabilityService:
    """AvailabilityService with deterministic ids."""
    return AvailabilityService(repository, settings, id_factory=id_factory)


@pytest.fixture
def event_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def notification_store() -> InMemoryNotificationStore:
    return InMemoryNotificationStore()


@pytest.fixture
def notifier() -> LoggingNotifier:
    return LoggingNotifier()


@pytest.fixture
def scheduler(event_store, notification_store, notifier, repository, id_factory) -> MeetingScheduler:
    """MeetingScheduler over in-memory stores with deterministic ids."""
    return MeetingScheduler(
        event_store=event_store,
        notification_store=notification_store,
        notifier=notifier,
        repository=repository,
        id_factory=id_factory,
    )


@pytest.fixture(scope="function")
def session_factory() -> Generator[Callable[[], Session], None, None]:
    """
    Session factory bound to a fresh in-memory SQLite database.

    StaticPool keeps one connection so every session sees the same database.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    try:
        yield factory
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
