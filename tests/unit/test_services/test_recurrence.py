"""
Unit tests for the recurrence service.

Tests occurrence checks, window expansion and rule descriptions.
"""

from datetime import date

import pytest

from availability_engine.exceptions import InvalidDateRange
from availability_engine.models import RecurrenceRule
from availability_engine.services.recurrence import (
    describe_recurrence,
    expand,
    is_recurring,
    occurs_on,
)


class TestIsRecurring:
    """Test is_recurring function."""

    def test_none_rule(self):
        """A missing rule does not repeat."""
        assert is_recurring(None) is False

    def test_type_none(self):
        """A rule of type 'none' does not repeat."""
        assert is_recurring(RecurrenceRule(type="none")) is False

    @pytest.mark.parametrize("rule_type", ["daily", "weekly", "monthly", "yearly"])
    def test_repeating_types(self, rule_type):
        """Every other type repeats."""
        assert is_recurring(RecurrenceRule(type=rule_type)) is True


class TestOccursOnNonRecurring:
    """Test occurs_on for one-off slots."""

    def test_anchor_date_matches(self):
        """A one-off slot occurs only on its anchor."""
        assert occurs_on(None, "2024-06-03", "2024-06-03") is True

    def test_other_date_does_not_match(self):
        """A one-off slot does not occur on other dates."""
        assert occurs_on(RecurrenceRule(type="none"), "2024-06-03", "2024-06-10") is False

    def test_accepts_date_objects(self):
        """Dates can be passed as date objects."""
        assert occurs_on(None, date(2024, 6, 3), date(2024, 6, 3)) is True


class TestOccursOnDaily:
    """Test occurs_on for daily rules."""

    def test_every_day_after_anchor(self):
        """Daily rules occur on every later date."""
        rule = RecurrenceRule(type="daily")
        assert occurs_on(rule, "2024-01-01", "2024-01-02") is True
        assert occurs_on(rule, "2024-01-01", "2025-07-19") is True

    def test_not_before_anchor(self):
        """No occurrences before the anchor."""
        rule = RecurrenceRule(type="daily")
        assert occurs_on(rule, "2024-01-10", "2024-01-09") is False

    def test_end_date_is_inclusive(self):
        """The end date itself is an occurrence; the day after is not."""
        rule = RecurrenceRule(type="daily", end_date="2024-01-05")
        assert occurs_on(rule, "2024-01-01", "2024-01-05") is True
        assert occurs_on(rule, "2024-01-01", "2024-01-06") is False

    def test_end_after_counts_anchor(self):
        """end_after=3 yields the anchor and the next two days."""
        rule = RecurrenceRule(type="daily", end_after=3)
        assert occurs_on(rule, "2024-01-01", "2024-01-03") is True
        assert occurs_on(rule, "2024-01-01", "2024-01-04") is False

    def test_interval(self):
        """Every 3 days skips the days in between."""
        rule = RecurrenceRule(type="daily", interval=3)
        assert occurs_on(rule, "2024-01-01", "2024-01-04") is True
        assert occurs_on(rule, "2024-01-01", "2024-01-03") is False


class TestOccursOnWeekly:
    """Test occurs_on for weekly rules."""

    def test_same_weekday(self):
        """Weekly rules occur on the anchor's weekday."""
        rule = RecurrenceRule(type="weekly")
        assert occurs_on(rule, "2024-06-03", "2024-06-17") is True

    def test_different_weekday(self):
        """Other weekdays do not match."""
        rule = RecurrenceRule(type="weekly")
        assert occurs_on(rule, "2024-06-03", "2024-06-18") is False

    def test_every_two_weeks(self):
        """Interval 2 skips alternate weeks."""
        rule = RecurrenceRule(type="weekly", interval=2)
        assert occurs_on(rule, "2024-06-03", "2024-06-10") is False
        assert occurs_on(rule, "2024-06-03", "2024-06-17") is True


class TestOccursOnMonthly:
    """Test occurs_on for monthly rules."""

    def test_same_day_of_month(self):
        """Monthly rules occur on the anchor's day number."""
        rule = RecurrenceRule(type="monthly")
        assert occurs_on(rule, "2024-01-15", "2024-03-15") is True
        assert occurs_on(rule, "2024-01-15", "2024-03-16") is False

    def test_thirty_first_skips_short_months(self):
        """A rule anchored on the 31st has no occurrence in 30-day months."""
        rule = RecurrenceRule(type="monthly")
        assert occurs_on(rule, "2024-01-31", "2024-04-30") is False
        assert occurs_on(rule, "2024-01-31", "2024-02-29") is False
        assert occurs_on(rule, "2024-01-31", "2024-03-31") is True


class TestOccursOnYearly:
    """Test occurs_on for yearly rules."""

    def test_same_day_each_year(self):
        """Yearly rules occur on the anchor's month and day."""
        rule = RecurrenceRule(type="yearly")
        assert occurs_on(rule, "2024-07-04", "2026-07-04") is True

    def test_leap_day_skips_common_years(self):
        """A rule anchored on Feb 29 skips non-leap years."""
        rule = RecurrenceRule(type="yearly")
        assert occurs_on(rule, "2024-02-29", "2025-02-28") is False
        assert occurs_on(rule, "2024-02-29", "2028-02-29") is True


class TestExpand:
    """Test expand function."""

    def test_weekly_within_month(self):
        """Weekly occurrences inside the window are listed in order."""
        rule = RecurrenceRule(type="weekly")
        result = expand(rule, "2024-06-03", "2024-06-01", "2024-06-30")

        assert result == [
            date(2024, 6, 3),
            date(2024, 6, 10),
            date(2024, 6, 17),
            date(2024, 6, 24),
        ]

    def test_window_after_anchor(self):
        """A window starting after the anchor omits earlier occurrences."""
        rule = RecurrenceRule(type="weekly")
        result = expand(rule, "2024-06-03", "2024-06-11", "2024-06-20")

        assert result == [date(2024, 6, 17)]

    def test_window_before_anchor(self):
        """A window entirely before the anchor is empty."""
        rule = RecurrenceRule(type="daily")
        assert expand(rule, "2024-06-03", "2024-05-01", "2024-05-31") == []

    def test_non_recurring(self):
        """A one-off slot expands to its anchor when inside the window."""
        assert expand(None, "2024-06-03", "2024-06-01", "2024-06-30") == [date(2024, 6, 3)]
        assert expand(None, "2024-06-03", "2024-07-01", "2024-07-31") == []

    def test_monthly_thirty_first(self):
        """Only months with a 31st produce occurrences."""
        rule = RecurrenceRule(type="monthly")
        result = expand(rule, "2024-01-31", "2024-01-01", "2024-06-30")

        assert result == [date(2024, 1, 31), date(2024, 3, 31), date(2024, 5, 31)]

    def test_bounded_by_end_date(self):
        """The rule's end date cuts the window short."""
        rule = RecurrenceRule(type="daily", end_date="2024-01-03")
        result = expand(rule, "2024-01-01", "2024-01-01", "2024-01-31")

        assert result == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]

    def test_bounded_by_end_after(self):
        """The occurrence count includes the anchor."""
        rule = RecurrenceRule(type="weekly", end_after=2)
        result = expand(rule, "2024-06-03", "2024-06-01", "2024-12-31")

        assert result == [date(2024, 6, 3), date(2024, 6, 10)]

    def test_capped_by_max_instances(self):
        """Expansion never returns more than max_instances dates."""
        rule = RecurrenceRule(type="daily")
        result = expand(rule, "2024-01-01", "2024-01-01", "2024-12-31", max_instances=5)

        assert len(result) == 5
        assert result[-1] == date(2024, 1, 5)

    def test_reversed_window_is_empty(self):
        """A window whose start is after its end yields nothing."""
        rule = RecurrenceRule(type="daily")
        assert expand(rule, "2024-01-01", "2024-01-31", "2024-01-01") == []

    def test_restartable(self):
        """Repeated calls return the same result."""
        rule = RecurrenceRule(type="weekly", interval=2)
        first = expand(rule, "2024-06-03", "2024-06-01", "2024-09-30")
        second = expand(rule, "2024-06-03", "2024-06-01", "2024-09-30")

        assert first == second

    def test_invalid_date(self):
        """Malformed dates raise InvalidDateRange."""
        with pytest.raises(InvalidDateRange):
            expand(RecurrenceRule(type="daily"), "2024-13-01", "2024-01-01", "2024-01-31")


class TestDescribeRecurrence:
    """Test describe_recurrence function."""

    def test_no_rule(self):
        assert describe_recurrence(None) == "Does not repeat"
        assert describe_recurrence(RecurrenceRule(type="none")) == "Does not repeat"

    def test_simple_labels(self):
        assert describe_recurrence(RecurrenceRule(type="daily")) == "Daily"
        assert describe_recurrence(RecurrenceRule(type="weekly")) == "Weekly"
        assert describe_recurrence(RecurrenceRule(type="yearly")) == "Yearly"

    def test_interval_with_end_date(self):
        rule = RecurrenceRule(type="weekly", interval=2, end_date="2024-12-31")
        assert describe_recurrence(rule) == "Every 2 weeks, until 2024-12-31"

    def test_end_after(self):
        rule = RecurrenceRule(type="monthly", end_after=5)
        assert describe_recurrence(rule) == "Monthly, 5 times"

    def test_single_occurrence(self):
        rule = RecurrenceRule(type="daily", interval=3, end_after=1)
        assert describe_recurrence(rule) == "Every 3 days, 1 time"
