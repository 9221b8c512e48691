"""
Recurrence expansion service.

Answers "does this recurring slot occur on date X" and lists occurrences in
a window. Rules are never materialized: a recurring slot is stored once, on
its anchor date, and expanded on read.

Uses python-dateutil rrule for period arithmetic:
- Monthly rules anchored on a day missing from a month skip that month
- Yearly rules anchored on Feb 29 skip non-leap years
"""

import logging
from datetime import date, datetime, time
from typing import Optional

from dateutil.rrule import DAILY, MONTHLY, WEEKLY, YEARLY, rrule

from availability_engine.models import RecurrenceRule
from availability_engine.timeutils import DateInput, parse_date

logger = logging.getLogger(__name__)

DEFAULT_MAX_INSTANCES = 500

FREQUENCIES = {
    "daily": DAILY,
    "weekly": WEEKLY,
    "monthly": MONTHLY,
    "yearly": YEARLY,
}

# (label when interval is 1, unit name for "Every N ...")
PERIOD_NAMES = {
    "daily": ("Daily", "days"),
    "weekly": ("Weekly", "weeks"),
    "monthly": ("Monthly", "months"),
    "yearly": ("Yearly", "years"),
}


def is_recurring(rule: Optional[RecurrenceRule]) -> bool:
    """Check whether a rule repeats (None and type 'none' do not)."""
    return rule is not None and rule.type != "none"


def _midnight(d: date) -> datetime:
    return datetime.combine(d, time.min)


def _end_date(rule: RecurrenceRule) -> Optional[date]:
    return parse_date(rule.end_date) if rule.end_date else None


def build_rrule(rule: RecurrenceRule, anchor_date: DateInput) -> rrule:
    """
    Build a dateutil rrule for a recurring rule.

    end_after maps to COUNT. end_date is applied by callers rather than as
    UNTIL, since dateutil rejects rules carrying both.

    Args:
        rule: Recurring rule (type must not be 'none')
        anchor_date: First occurrence

    Returns:
        rrule yielding midnight datetimes
    """
    anchor = parse_date(anchor_date)
    if rule.end_after is not None:
        return rrule(
            FREQUENCIES[rule.type],
            dtstart=_midnight(anchor),
            interval=rule.interval,
            count=rule.end_after,
        )

    end = _end_date(rule)
    return rrule(
        FREQUENCIES[rule.type],
        dtstart=_midnight(anchor),
        interval=rule.interval,
        until=_midnight(end) if end else None,
    )


def occurs_on(
    rule: Optional[RecurrenceRule],
    anchor_date: DateInput,
    target_date: DateInput,
) -> bool:
    """
    Check whether a rule anchored on anchor_date has an occurrence on target_date.

    Args:
        rule: Recurrence rule, or None for a one-off
        anchor_date: The owning slot's date
        target_date: Date to test

    Returns:
        True if target_date is an occurrence
    """
    anchor = parse_date(anchor_date)
    target = parse_date(target_date)

    if target == anchor:
        return True
    if not is_recurring(rule) or target < anchor:
        return False

    end = _end_date(rule)
    if end is not None and target > end:
        return False

    return _midnight(target) in build_rrule(rule, anchor)


def expand(
    rule: Optional[RecurrenceRule],
    anchor_date: DateInput,
    range_start: DateInput,
    range_end: DateInput,
    max_instances: int = DEFAULT_MAX_INSTANCES,
) -> list[date]:
    """
    List occurrences of a rule within an inclusive date range.

    Args:
        rule: Recurrence rule, or None for a one-off
        anchor_date: The owning slot's date
        range_start: First date of the window (inclusive)
        range_end: Last date of the window (inclusive)
        max_instances: Maximum dates to return (safety limit)

    Returns:
        Sorted list of occurrence dates
    """
    anchor = parse_date(anchor_date)
    start = parse_date(range_start)
    end = parse_date(range_end)

    if start > end:
        return []

    if not is_recurring(rule):
        return [anchor] if start <= anchor <= end else []

    rule_end = _end_date(rule)
    limit = min(end, rule_end) if rule_end else end

    occurrences = []
    if start <= anchor <= end:
        occurrences.append(anchor)

    if limit > anchor:
        window_start = max(start, anchor)
        for dt in build_rrule(rule, anchor).between(
            _midnight(window_start), _midnight(limit), inc=True
        ):
            if dt.date() != anchor:
                occurrences.append(dt.date())

    if len(occurrences) > max_instances:
        logger.warning(
            f"Recurrence from {anchor} truncated to {max_instances} occurrences"
        )
    return occurrences[:max_instances]


def describe_recurrence(rule: Optional[RecurrenceRule]) -> str:
    """
    Human-readable summary of a rule.

    Examples:
        "Does not repeat", "Weekly", "Every 2 weeks, until 2024-12-31",
        "Monthly, 5 times"
    """
    if not is_recurring(rule):
        return "Does not repeat"

    label, unit = PERIOD_NAMES[rule.type]
    text = label if rule.interval == 1 else f"Every {rule.interval} {unit}"

    if rule.end_after is not None:
        text += f", {rule.end_after} time" + ("" if rule.end_after == 1 else "s")
    if rule.end_date:
        text += f", until {rule.end_date}"
    return text
