"""Recurrence rule: the successor of an occurrence date.

Day-based intervals use ``datetime.date`` arithmetic, so results are calendar
days and unaffected by daylight-saving transitions.

Month and year steps keep the day-of-month and let days past the end of the
target month spill into the next one: Jan 31 → Mar 2 (2024), Feb 29 2024 →
Mar 1 2025. Each step only sees the previous occurrence, so a series never
gets stuck on a shortened day such as the 29th.
"""

from __future__ import annotations

from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from .models import Frequency

_DAY_STEPS: dict[Frequency, timedelta] = {
    Frequency.DAILY: timedelta(days=1),
    Frequency.WEEKLY: timedelta(days=7),
    Frequency.BIWEEKLY: timedelta(days=14),
}

_MONTH_STEPS: dict[Frequency, int] = {
    Frequency.MONTHLY: 1,
    Frequency.YEARLY: 12,
}


def _add_months(anchor: date, months: int) -> date:
    # Step from the 1st so relativedelta never clamps, then re-add the day.
    first = anchor.replace(day=1) + relativedelta(months=months)
    return first + timedelta(days=anchor.day - 1)


def repeats(frequency: Frequency) -> bool:
    return frequency != Frequency.ONCE


def next_occurrence(anchor: date, frequency: Frequency) -> date | None:
    """Return the occurrence following ``anchor``, or ``None`` for ``Once``."""

    frequency = Frequency(frequency)
    if frequency in _DAY_STEPS:
        return anchor + _DAY_STEPS[frequency]
    if frequency in _MONTH_STEPS:
        return _add_months(anchor, _MONTH_STEPS[frequency])
    return None


__all__ = ["next_occurrence", "repeats"]
