"""
Availability repository on top of a key-value store.

Each user's record is stored as deterministic JSON under
'{key_prefix}{user_id}', so loading and re-saving an unchanged record writes
the same bytes back.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from availability_engine.exceptions import AvailabilityStorageError
from availability_engine.integrations.base import (
    AvailabilityListener,
    KeyValueStore,
    Unsubscribe,
)
from availability_engine.models import Availability

logger = logging.getLogger(__name__)


class KeyValueAvailabilityRepository:
    """
    AvailabilityRepository backed by any KeyValueStore.

    Attributes:
        store: Underlying key-value store
        key_prefix: Prefix prepended to user ids to form storage keys
    """

    def __init__(self, store: KeyValueStore, key_prefix: str = "availability-"):
        self.store = store
        self.key_prefix = key_prefix
        self._listeners: list[AvailabilityListener] = []

    def key_for(self, user_id: str) -> str:
        return f"{self.key_prefix}{user_id}"

    def load(self, user_id: str) -> Optional[Availability]:
        raw = self.store.get(self.key_for(user_id))
        if raw is None:
            logger.debug(f"No availability stored for {user_id}")
            return None

        try:
            return Availability.from_json(raw)
        except ValidationError as e:
            raise AvailabilityStorageError(
                f"Stored availability for {user_id} is unreadable",
                original_error=e,
            )

    def save(self, availability: Availability) -> None:
        self.store.set(self.key_for(availability.user_id), availability.to_json())
        logger.debug(f"Saved availability for {availability.user_id}")
        self._notify(availability.user_id)

    def subscribe(self, listener: AvailabilityListener) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, user_id: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(user_id)
            except Exception as e:
                logger.error(
                    f"Availability listener failed for {user_id}: {e}",
                    exc_info=True,
                )
