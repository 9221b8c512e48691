"""
Pydantic request and response models for the Availability API.

Stored records (Availability, UnavailableTimeSlot, CalendarEvent) are
returned as-is with their camelCase keys; the envelopes below use
snake_case like the rest of the API.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from availability_engine.models import CalendarEvent, RecurrenceRule, UnavailableTimeSlot


# =============================================================================
# Request Models
# =============================================================================


class RangeUpdateRequest(BaseModel):
    """Set availability for every date of an inclusive range."""

    start_date: str = Field(..., description="First date (YYYY-MM-DD)", examples=["2024-01-01"])
    end_date: str = Field(..., description="Last date (YYYY-MM-DD); may precede start_date")
    available: bool = Field(..., description="Availability flag for every date")
    start_time: str = Field(default="09:00", description="Window start (HH:MM)")
    end_time: str = Field(default="17:00", description="Window end (HH:MM)")
    note: Optional[str] = Field(
        None,
        max_length=500,
        description="Reason; creates an unavailable slot on every date",
    )
    recurrence: Optional[RecurrenceRule] = Field(
        None,
        description="Recurrence for the note slots",
    )


class ScheduleMeetingRequest(BaseModel):
    """Schedule a meeting with one or more invitees."""

    title: str = Field(..., max_length=200, examples=["Quarterly planning"])
    description: str = Field(default="", max_length=2000)
    invitees: list[str] = Field(..., description="Invited user ids")
    start: datetime = Field(..., description="Start (ISO 8601)")
    end: datetime = Field(..., description="End (ISO 8601)")
    location: str = Field(default="", max_length=200)
    priority: Literal["low", "medium", "high"] = "medium"
    is_required: bool = False
    send_notifications: Optional[bool] = Field(
        None,
        description="Deliver invitations (defaults to server setting)",
    )


class ConflictCheckRequest(BaseModel):
    """Check invitees' availability for a proposed meeting."""

    invitees: list[str] = Field(..., min_length=1)
    start: datetime
    end: datetime


class CommonSlotsRequest(BaseModel):
    """Find windows on a date when enough users are free."""

    user_ids: list[str] = Field(..., min_length=1)
    date: str = Field(..., description="Date (YYYY-MM-DD)")
    duration_minutes: int = Field(default=60, ge=5, le=24 * 60)
    step_minutes: int = Field(default=30, ge=5, le=24 * 60)
    min_users: int = Field(default=2, ge=1)

    @field_validator("user_ids")
    @classmethod
    def validate_user_ids(cls, v: list[str]) -> list[str]:
        if not all(u.strip() for u in v):
            raise ValueError("User ids cannot be empty")
        return v


# =============================================================================
# Response Models
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"] = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    storage_backend: str = Field(..., description="Configured key-value store")


class DayAvailabilityResponse(BaseModel):
    """Effective availability of one date."""

    date: str
    available: bool
    start_time: str
    end_time: str
    explicit: bool = Field(..., description="True if the date has its own entry")
    note: Optional[str] = None
    recurrence: Optional[RecurrenceRule] = None
    recurrence_description: str = "Does not repeat"
    slots: list[UnavailableTimeSlot] = Field(default_factory=list)
    window_available: Optional[bool] = Field(
        None,
        description="Status of the start/end query window, if one was given",
    )
    reason: Optional[str] = None


class ToggleResponse(BaseModel):
    """Result of toggling a date."""

    date: str
    available: bool


class DeleteSlotResponse(BaseModel):
    """Result of deleting a slot."""

    slot_id: str
    deleted: bool
    delete_recurring: bool


class EventListResponse(BaseModel):
    """Projected availability events."""

    events: list[CalendarEvent]
    total: int


class ConflictModel(BaseModel):
    """One availability conflict."""

    user_id: str
    reason: str
    slot_id: Optional[str] = None


class ConflictCheckResponse(BaseModel):
    """Conflicts for a proposed meeting."""

    has_conflicts: bool
    conflicts: list[ConflictModel]


class CommonSlotModel(BaseModel):
    start_time: str
    end_time: str
    available_users: list[str]


class CommonSlotsResponse(BaseModel):
    """Windows when enough users are free."""

    date: str
    slots: list[CommonSlotModel]
