"""
Unit tests for availability record models.

Tests camelCase serialization, normalization, validation and
compatibility with records saved before slots existed.
"""

import json

import pytest
from pydantic import ValidationError

from availability_engine.models import (
    Availability,
    DateAvailability,
    RecurrenceRule,
    UnavailableSlotDraft,
    UnavailableTimeSlot,
)


class TestRecurrenceRule:
    """Test RecurrenceRule model."""

    def test_defaults(self):
        rule = RecurrenceRule()

        assert rule.type == "none"
        assert rule.interval == 1
        assert rule.end_date is None
        assert rule.end_after is None

    def test_camel_case_input(self):
        rule = RecurrenceRule.model_validate(
            {"type": "weekly", "interval": 2, "endDate": "2024-12-31", "endAfter": 5, "seriesId": "s"}
        )

        assert (rule.end_date, rule.end_after, rule.series_id) == ("2024-12-31", 5, "s")

    def test_invalid_type(self):
        with pytest.raises(ValidationError):
            RecurrenceRule(type="hourly")

    def test_interval_must_be_positive(self):
        with pytest.raises(ValidationError):
            RecurrenceRule(type="daily", interval=0)

    def test_end_after_must_be_positive(self):
        with pytest.raises(ValidationError):
            RecurrenceRule(type="daily", end_after=0)

    def test_invalid_end_date(self):
        with pytest.raises(ValidationError):
            RecurrenceRule(type="daily", end_date="2024-13-01")


class TestDateAvailability:
    """Test DateAvailability model."""

    def test_default_hours(self):
        entry = DateAvailability(date="2024-06-11", available=True)

        assert (entry.start_time, entry.end_time) == ("09:00", "17:00")

    def test_time_normalized(self):
        entry = DateAvailability(date="2024-06-11", available=True, start_time="9:00", end_time="17:00")

        assert entry.start_time == "09:00"

    def test_available_requires_ordered_window(self):
        with pytest.raises(ValidationError):
            DateAvailability(date="2024-06-11", available=True, start_time="17:00", end_time="09:00")

    def test_unavailable_allows_any_window(self):
        entry = DateAvailability(date="2024-06-11", available=False, start_time="12:00", end_time="12:00")

        assert entry.available is False

    def test_invalid_date(self):
        with pytest.raises(ValidationError):
            DateAvailability(date="June 11", available=True)

    def test_frozen(self):
        entry = DateAvailability(date="2024-06-11", available=True)

        with pytest.raises(ValidationError):
            entry.available = False


class TestUnavailableTimeSlot:
    """Test slot and draft models."""

    def test_slot_requires_ordered_window(self):
        with pytest.raises(ValidationError):
            UnavailableTimeSlot(id="s", date="2024-06-11", start_time="10:00", end_time="10:00")

    def test_draft_allows_unordered_window(self):
        draft = UnavailableSlotDraft(date="2024-06-11", start_time="10:00", end_time="09:00")

        assert draft.end_time == "09:00"

    def test_malformed_time(self):
        with pytest.raises(ValidationError):
            UnavailableSlotDraft(date="2024-06-11", start_time="10am", end_time="11:00")

    def test_is_recurring(self):
        one_off = UnavailableTimeSlot(id="a", date="2024-06-11", start_time="10:00", end_time="11:00")
        none_rule = one_off.model_copy(update={"recurring": RecurrenceRule(type="none")})
        weekly = one_off.model_copy(update={"recurring": RecurrenceRule(type="weekly")})

        assert one_off.is_recurring is False
        assert none_rule.is_recurring is False
        assert weekly.is_recurring is True


class TestAvailability:
    """Test Availability record model."""

    def test_default_record(self):
        availability = Availability.default("user-1")

        assert availability.user_id == "user-1"
        assert availability.dates == []
        assert availability.unavailable_slots == []
        assert (availability.default_start_time, availability.default_end_time) == ("09:00", "17:00")

    def test_camel_case_json(self, sample_availability):
        data = json.loads(sample_availability.to_json())

        assert set(data) == {"userId", "dates", "defaultStartTime", "defaultEndTime", "unavailableSlots"}
        assert data["dates"][1] == {
            "date": "2024-06-12", "available": True, "startTime": "10:00", "endTime": "15:00",
        }
        assert data["unavailableSlots"][1]["recurring"] == {
            "type": "weekly", "interval": 1, "seriesId": "series-standup",
        }

    def test_json_round_trip_is_stable(self, sample_availability):
        raw = sample_availability.to_json()

        assert Availability.from_json(raw).to_json() == raw

    def test_record_without_slots_key(self):
        """Records saved before slots existed load with an empty slot list."""
        raw = json.dumps(
            {
                "userId": "user-1",
                "dates": [{"date": "2024-06-11", "available": False, "startTime": "09:00", "endTime": "17:00"}],
                "defaultStartTime": "09:00",
                "defaultEndTime": "17:00",
            }
        )

        availability = Availability.from_json(raw)

        assert availability.unavailable_slots == []
        assert availability.get_date_entry("2024-06-11").available is False

    def test_duplicate_dates_rejected(self):
        with pytest.raises(ValidationError):
            Availability(
                user_id="user-1",
                dates=[
                    DateAvailability(date="2024-06-11", available=True),
                    DateAvailability(date="2024-06-11", available=False),
                ],
            )

    def test_duplicate_slot_ids_rejected(self):
        slot = UnavailableTimeSlot(id="s", date="2024-06-11", start_time="10:00", end_time="11:00")

        with pytest.raises(ValidationError):
            Availability(user_id="user-1", unavailable_slots=[slot, slot])

    def test_malformed_json(self):
        with pytest.raises(ValidationError):
            Availability.from_json("{not json")

    def test_get_date_entry_missing(self, sample_availability):
        assert sample_availability.get_date_entry("2024-06-11") is None
