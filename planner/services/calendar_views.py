"""Week and month calendar views over event occurrences."""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date, timedelta
from itertools import chain

from planner.domain.models import EventRecord, Occurrence
from planner.services.recurrence import MAX_OCCURRENCES, expand

SUNDAY = calendar.SUNDAY


def week_dates(reference: date, first_weekday: int = SUNDAY) -> list[date]:
    """The seven dates of the week containing *reference*."""
    offset = (reference.weekday() - first_weekday) % 7
    first = reference - timedelta(days=offset)
    return [first + timedelta(days=i) for i in range(7)]


def month_weeks(reference: date, first_weekday: int = SUNDAY) -> list[list[int | None]]:
    """Month grid for *reference*'s month; padding days are ``None``."""
    grid = calendar.Calendar(first_weekday).monthdayscalendar(reference.year, reference.month)
    return [[day or None for day in week] for week in grid]


def _sorted(occurrences: list[Occurrence]) -> list[Occurrence]:
    return sorted(occurrences, key=lambda o: (o.concrete_date, o.start_time, o.end_time))


def buckets_for_week(
    occurrences: Iterable[Occurrence],
    reference: date,
    first_weekday: int = SUNDAY,
) -> dict[int, list[Occurrence]]:
    """Group occurrences of the week containing *reference* by weekday.

    Keys are ``date.weekday()`` values in display order starting at
    *first_weekday*; every weekday is present. Occurrences outside the
    week are dropped.
    """
    days = week_dates(reference, first_weekday)
    buckets: dict[int, list[Occurrence]] = {d.weekday(): [] for d in days}
    for occ in occurrences:
        if days[0] <= occ.concrete_date <= days[-1]:
            buckets[occ.concrete_date.weekday()].append(occ)
    return {weekday: _sorted(items) for weekday, items in buckets.items()}


def buckets_for_month(
    occurrences: Iterable[Occurrence],
    reference: date,
) -> dict[int, list[Occurrence]]:
    """Group occurrences of *reference*'s calendar month by day-of-month."""
    _, days_in_month = calendar.monthrange(reference.year, reference.month)
    buckets: dict[int, list[Occurrence]] = {day: [] for day in range(1, days_in_month + 1)}
    for occ in occurrences:
        d = occ.concrete_date
        if d.year == reference.year and d.month == reference.month:
            buckets[d.day].append(occ)
    return {day: _sorted(items) for day, items in buckets.items()}


def month_bounds(reference: date) -> tuple[date, date]:
    _, days_in_month = calendar.monthrange(reference.year, reference.month)
    return reference.replace(day=1), reference.replace(day=days_in_month)


def occurrences_between(
    events: Iterable[EventRecord],
    start: date,
    end: date,
    max_occurrences: int = MAX_OCCURRENCES,
) -> list[Occurrence]:
    """Expand *events* into one chronologically sorted occurrence list."""
    return _sorted(list(chain.from_iterable(expand(e, start, end, max_occurrences) for e in events)))
