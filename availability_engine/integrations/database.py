"""
SQLAlchemy key-value store.

Stores values in the key_value_store table. Database errors are wrapped in
AvailabilityStorageError so callers can retry the whole operation.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Generator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from availability_engine.exceptions import AvailabilityStorageError
from availability_engine.models import KeyValueEntry

logger = logging.getLogger(__name__)


class SQLAlchemyKeyValueStore:
    """
    KeyValueStore backed by the key_value_store table.

    Args:
        session_factory: Callable returning a new Session. Defaults to the
            application SessionLocal.
    """

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        if session_factory is None:
            from availability_engine.database import SessionLocal

            session_factory = SessionLocal
        self._session_factory = session_factory

    @contextmanager
    def _session(self, operation: str, key: str) -> Generator[Session, None, None]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Key-value {operation} failed for '{key}': {e}")
            raise AvailabilityStorageError(
                f"Failed to {operation} '{key}'",
                original_error=e,
            )
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get(self, key: str) -> Optional[str]:
        with self._session("read", key) as session:
            entry = session.get(KeyValueEntry, key)
            return entry.value if entry is not None else None

    def set(self, key: str, value: str) -> None:
        with self._session("write", key) as session:
            entry = session.get(KeyValueEntry, key)
            if entry is None:
                session.add(KeyValueEntry(key=key, value=value))
            elif entry.value != value:
                entry.value = value
