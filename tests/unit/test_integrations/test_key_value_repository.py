"""
Unit tests for KeyValueAvailabilityRepository.

Tests key layout, JSON storage, change listeners and handling of
unreadable stored values.
"""

import json
import logging

import pytest

from availability_engine.exceptions import AvailabilityStorageError
from availability_engine.integrations import (
    InMemoryKeyValueStore,
    KeyValueAvailabilityRepository,
)


class TestLoadAndSave:
    """Test load/save against an in-memory store."""

    def test_missing_user(self, repository):
        assert repository.load("nobody") is None

    def test_key_layout(self, repository, kv_store, sample_availability):
        repository.save(sample_availability)

        assert kv_store.keys() == ["availability-user-1"]
        assert json.loads(kv_store.get("availability-user-1"))["userId"] == "user-1"

    def test_custom_prefix(self, kv_store, sample_availability):
        repository = KeyValueAvailabilityRepository(kv_store, key_prefix="avail:")

        repository.save(sample_availability)

        assert kv_store.get("avail:user-1") is not None

    def test_round_trip(self, repository, sample_availability):
        repository.save(sample_availability)

        assert repository.load("user-1") == sample_availability

    def test_resave_writes_identical_bytes(self, repository, kv_store, sample_availability):
        repository.save(sample_availability)
        before = kv_store.get("availability-user-1")

        repository.save(repository.load("user-1"))

        assert kv_store.get("availability-user-1") == before

    def test_reads_existing_camel_case_value(self):
        store = InMemoryKeyValueStore(
            {
                "availability-u": json.dumps(
                    {
                        "userId": "u",
                        "dates": [],
                        "defaultStartTime": "08:30",
                        "defaultEndTime": "16:30",
                    }
                )
            }
        )
        repository = KeyValueAvailabilityRepository(store)

        availability = repository.load("u")

        assert availability.default_start_time == "08:30"
        assert availability.unavailable_slots == []

    def test_corrupt_value(self):
        repository = KeyValueAvailabilityRepository(InMemoryKeyValueStore({"availability-u": "{oops"}))

        with pytest.raises(AvailabilityStorageError) as exc_info:
            repository.load("u")

        assert exc_info.value.retryable is True
        assert exc_info.value.original_error is not None


class TestListeners:
    """Test change notification."""

    def test_listener_called_after_save(self, repository, kv_store, sample_availability):
        seen = []
        repository.subscribe(lambda user_id: seen.append((user_id, kv_store.get(f"availability-{user_id}"))))

        repository.save(sample_availability)

        assert seen == [("user-1", sample_availability.to_json())]

    def test_unsubscribe(self, repository, sample_availability):
        seen = []
        unsubscribe = repository.subscribe(seen.append)

        unsubscribe()
        unsubscribe()
        repository.save(sample_availability)

        assert seen == []

    def test_failing_listener_logged(self, repository, sample_availability, caplog):
        """A failing listener does not stop the save or later listeners."""
        seen = []

        def broken(user_id):
            raise RuntimeError("listener bug")

        repository.subscribe(broken)
        repository.subscribe(seen.append)

        with caplog.at_level(logging.ERROR):
            repository.save(sample_availability)

        assert seen == ["user-1"]
        assert repository.load("user-1") == sample_availability
        assert "listener failed" in caplog.text
