"""Service for detecting scheduling conflicts between timetable entries and
between calendar events."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from datetime import date, time, timedelta

from planner.domain.models import DaySchedule, EventRecord, Occurrence, ScheduleEntry
from planner.services.recurrence import MAX_OCCURRENCES, expand, repeats

DEFAULT_HORIZON_DAYS = 365


def slots_intersect(a: Iterable[int], b: Iterable[int]) -> bool:
    """True when the two slot ranges share at least one slot index."""
    return not set(a).isdisjoint(b)


def detect(
    candidate: Iterable[DaySchedule],
    existing: Iterable[ScheduleEntry],
) -> list[ScheduleEntry]:
    """Return every existing entry that shares a (day, slot) with *candidate*.

    Back-to-back ranges (e.g. slots 1-2 and 3-4) do not conflict. Each
    conflicting entry is listed once, in the order of *existing*.
    """
    by_day: dict[str, set[int]] = defaultdict(set)
    for schedule in candidate:
        by_day[schedule.day].update(schedule.range)

    return [
        entry
        for entry in existing
        if entry.day in by_day and slots_intersect(entry.range, by_day[entry.day])
    ]


def _overlaps(a_start: time, a_end: time, b_start: time, b_end: time) -> bool:
    # Touching boundaries (a_end == b_start) are not a conflict
    return a_start < b_end and b_start < a_end


def _window(candidate: EventRecord, horizon_days: int) -> tuple[date, date]:
    rule = candidate.repeat
    if not repeats(rule):
        return candidate.date, candidate.date
    if rule.end_date is not None:
        return candidate.date, rule.end_date
    return candidate.date, candidate.date + timedelta(days=horizon_days)


def find_event_conflicts(
    candidate: EventRecord,
    existing: Iterable[EventRecord],
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    max_occurrences: int = MAX_OCCURRENCES,
) -> list[EventRecord]:
    """Return existing events with an occurrence overlapping one of *candidate*'s.

    Recurring events on either side are expanded over the candidate's own
    window. An existing event with the candidate's id is skipped so an
    edited event never conflicts with its previous version.
    """
    start, end = _window(candidate, horizon_days)
    wanted: dict[date, list[Occurrence]] = defaultdict(list)
    for occ in expand(candidate, start, end, max_occurrences):
        wanted[occ.concrete_date].append(occ)

    conflicts: list[EventRecord] = []
    for event in existing:
        if event.id == candidate.id:
            continue
        for occ in expand(event, start, end, max_occurrences):
            if any(
                _overlaps(occ.start_time, occ.end_time, mine.start_time, mine.end_time)
                for mine in wanted.get(occ.concrete_date, ())
            ):
                conflicts.append(event)
                break
    return conflicts
