"""
Unit tests for SQLAlchemyKeyValueStore.

Runs against an in-memory SQLite database; failure handling uses a mocked
session.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from availability_engine.exceptions import AvailabilityStorageError
from availability_engine.integrations import KeyValueAvailabilityRepository
from availability_engine.integrations.database import SQLAlchemyKeyValueStore
from availability_engine.models import KeyValueEntry


class TestSQLAlchemyKeyValueStore:
    """Test SQLAlchemyKeyValueStore against SQLite."""

    def test_get_missing(self, session_factory):
        store = SQLAlchemyKeyValueStore(session_factory)

        assert store.get("k") is None

    def test_set_and_get(self, session_factory):
        store = SQLAlchemyKeyValueStore(session_factory)

        store.set("k", "v1")
        store.set("k", "v2")

        assert store.get("k") == "v2"

    def test_single_row_per_key(self, session_factory):
        store = SQLAlchemyKeyValueStore(session_factory)

        store.set("k", "v1")
        store.set("k", "v1")

        with session_factory() as session:
            assert session.query(KeyValueEntry).count() == 1

    def test_repository_round_trip(self, session_factory, sample_availability):
        repository = KeyValueAvailabilityRepository(SQLAlchemyKeyValueStore(session_factory))

        repository.save(sample_availability)

        assert repository.load("user-1") == sample_availability


class TestSQLAlchemyKeyValueStoreErrors:
    """Test database error handling."""

    def make_failing_store(self):
        session = MagicMock()
        session.get.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))
        return SQLAlchemyKeyValueStore(lambda: session), session

    def test_read_error_wrapped(self):
        store, session = self.make_failing_store()

        with pytest.raises(AvailabilityStorageError) as exc_info:
            store.get("k")

        assert exc_info.value.retryable is True
        session.rollback.assert_called_once()
        session.close.assert_called_once()

    def test_write_error_wrapped(self):
        store, session = self.make_failing_store()

        with pytest.raises(AvailabilityStorageError):
            store.set("k", "v")

        session.commit.assert_not_called()

    def test_other_errors_propagate(self):
        session = MagicMock()
        session.get.side_effect = KeyError("boom")
        store = SQLAlchemyKeyValueStore(lambda: session)

        with pytest.raises(KeyError):
            store.get("k")

        session.rollback.assert_called_once()
