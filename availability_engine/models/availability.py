"""
Availability records.

Pydantic models for a user's working-hours calendar. Records serialize to
JSON with camelCase keys (userId, defaultStartTime, unavailableSlots, ...)
and are treated as immutable values: every mutation produces a new record.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from availability_engine.exceptions import SchedulingError
from availability_engine.timeutils import format_date, format_time, parse_time

RecurrenceType = Literal["none", "daily", "weekly", "monthly", "yearly"]

DEFAULT_START_TIME = "09:00"
DEFAULT_END_TIME = "17:00"


def _normalize_date(v: str) -> str:
    try:
        return format_date(v)
    except SchedulingError as e:
        raise ValueError(e.message)


def _normalize_time(v: str) -> str:
    try:
        return format_time(v)
    except SchedulingError as e:
        raise ValueError(e.message)


class RecordModel(BaseModel):
    """Base for stored records: camelCase JSON keys, immutable instances."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_json(self) -> str:
        """Serialize deterministically (field order fixed, None fields omitted)."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


class RecurrenceRule(RecordModel):
    """
    Recurrence attached to an unavailable slot.

    The anchor is the owning slot's date. end_after counts occurrences
    including the anchor; end_date is an inclusive bound.
    """

    type: RecurrenceType = "none"
    interval: int = Field(default=1, ge=1)
    end_date: Optional[str] = None
    end_after: Optional[int] = Field(default=None, ge=1)
    series_id: Optional[str] = None

    @field_validator("end_date")
    @classmethod
    def validate_end_date(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _normalize_date(v)


class DateAvailability(RecordModel):
    """Explicit availability entry for a single date."""

    date: str
    available: bool
    start_time: str = DEFAULT_START_TIME
    end_time: str = DEFAULT_END_TIME

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        return _normalize_date(v)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return _normalize_time(v)

    @model_validator(mode="after")
    def validate_window(self) -> "DateAvailability":
        if self.available and parse_time(self.start_time) >= parse_time(self.end_time):
            raise ValueError(
                f"startTime must be before endTime on {self.date}"
            )
        return self


class UnavailableSlotDraft(RecordModel):
    """
    Caller input for a new unavailable slot.

    Times are normalized but not ordered here; ordering is checked by the
    slot manager so it can raise InvalidTimeRange.
    """

    date: str
    start_time: str
    end_time: str
    title: Optional[str] = None
    recurring: Optional[RecurrenceRule] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        return _normalize_date(v)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return _normalize_time(v)


class UnavailableTimeSlot(UnavailableSlotDraft):
    """An unavailable window within a day, optionally recurring from its date."""

    id: str

    @model_validator(mode="after")
    def validate_window(self) -> "UnavailableTimeSlot":
        if parse_time(self.start_time) >= parse_time(self.end_time):
            raise ValueError(
                f"Slot {self.id}: startTime must be before endTime"
            )
        return self

    @property
    def is_recurring(self) -> bool:
        return self.recurring is not None and self.recurring.type != "none"


class Availability(RecordModel):
    """
    A user's complete availability record.

    Attributes:
        user_id: Owner of the record
        dates: Explicit per-date entries, unique by date
        default_start_time: Working-hours start for dates without an entry
        default_end_time: Working-hours end for dates without an entry
        unavailable_slots: Time windows marked unavailable, unique by id
    """

    user_id: str
    dates: list[DateAvailability] = Field(default_factory=list)
    default_start_time: str = DEFAULT_START_TIME
    default_end_time: str = DEFAULT_END_TIME
    # Records saved before slots existed have no unavailableSlots key
    unavailable_slots: list[UnavailableTimeSlot] = Field(default_factory=list)

    @field_validator("default_start_time", "default_end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return _normalize_time(v)

    @model_validator(mode="after")
    def validate_uniqueness(self) -> "Availability":
        seen_dates = set()
        for entry in self.dates:
            if entry.date in seen_dates:
                raise ValueError(f"Duplicate date entry: {entry.date}")
            seen_dates.add(entry.date)

        seen_ids = set()
        for slot in self.unavailable_slots:
            if slot.id in seen_ids:
                raise ValueError(f"Duplicate slot id: {slot.id}")
            seen_ids.add(slot.id)
        return self

    @classmethod
    def default(
        cls,
        user_id: str,
        start_time: str = DEFAULT_START_TIME,
        end_time: str = DEFAULT_END_TIME,
    ) -> "Availability":
        """Create the record a user gets before setting any availability."""
        return cls(
            user_id=user_id,
            dates=[],
            default_start_time=start_time,
            default_end_time=end_time,
            unavailable_slots=[],
        )

    @classmethod
    def from_json(cls, raw: str) -> "Availability":
        return cls.model_validate_json(raw)

    def get_date_entry(self, date: str) -> Optional[DateAvailability]:
        """Return the explicit entry for a 'YYYY-MM-DD' date, if any."""
        for entry in self.dates:
            if entry.date == date:
                return entry
        return None
