"""
FastAPI dependency injection providers.

Provides the availability service, meeting scheduler and user context.
Tests replace these through app.dependency_overrides.
"""

import logging
from typing import Optional

from fastapi import Header, HTTPException

from availability_engine.services import (
    AvailabilityService,
    MeetingScheduler,
    get_availability_service,
    get_meeting_scheduler,
)

logger = logging.getLogger(__name__)


def get_service() -> AvailabilityService:
    """Dependency injection for the availability service singleton."""
    return get_availability_service()


def get_scheduler() -> MeetingScheduler:
    """Dependency injection for the meeting scheduler singleton."""
    return get_meeting_scheduler()


def get_organizer_id(
    x_user_id: Optional[str] = Header(None, description="User ID"),
) -> str:
    """
    Extract the acting user from the X-User-ID header.

    Raises:
        HTTPException: 400 if the header is missing or blank
    """
    if not x_user_id or not x_user_id.strip():
        logger.warning("Meeting request without X-User-ID header")
        raise HTTPException(status_code=400, detail="X-User-ID header is required")
    return x_user_id.strip()
