"""Tests for the conflict-detection service."""

from __future__ import annotations

from datetime import date, time

from planner.domain.models import (
    DaySchedule,
    EventRecord,
    Lecture,
    RepeatRule,
    ScheduleEntry,
)
from planner.services.conflicts import detect, find_event_conflicts, slots_intersect

_LECTURE = Lecture(id="CS101", title="Algorithms", credits="3", grade=2, major="CS")


def _entry(day: str, slots: list[int], title: str = "Existing") -> ScheduleEntry:
    return ScheduleEntry(
        day=day, range=slots, subject=_LECTURE.model_copy(update={"title": title})
    )


def _event(
    start: str, end: str, on: date = date(2024, 7, 20), title: str = "팀 회의", **overrides
) -> EventRecord:
    return EventRecord(
        title=title,
        date=on,
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
        **overrides,
    )


# ---------------------------------------------------------------------------
# detect (timetable slots)
# ---------------------------------------------------------------------------


def test_disjoint_ranges_same_day_do_not_conflict():
    existing = [_entry("월", [1, 2, 3])]
    assert detect([DaySchedule(day="월", range=[5, 6])], existing) == []


def test_back_to_back_slots_are_not_a_conflict():
    """Slots 1-2 and 3-4 touch but do not overlap."""
    existing = [_entry("월", [1, 2])]
    assert detect([DaySchedule(day="월", range=[3, 4])], existing) == []


def test_shared_slot_is_a_conflict():
    existing = [_entry("화", [3, 4, 5])]
    conflicts = detect([DaySchedule(day="화", range=[5, 6])], existing)
    assert conflicts == existing


def test_same_slots_on_other_day_do_not_conflict():
    existing = [_entry("수", [1, 2])]
    assert detect([DaySchedule(day="목", range=[1, 2])], existing) == []


def test_returns_every_conflicting_entry_once_in_order():
    """Each overlapping entry is reported once, in stored order."""
    first = _entry("월", [1, 2], title="A")
    unrelated = _entry("월", [8], title="B")
    second = _entry("금", [4], title="C")
    candidate = [
        DaySchedule(day="월", range=[2, 3]),
        DaySchedule(day="월", range=[1]),
        DaySchedule(day="금", range=[3, 4]),
    ]
    assert detect(candidate, [first, unrelated, second]) == [first, second]


def test_entry_with_empty_range_never_conflicts():
    broken = ScheduleEntry.model_construct(day="월", range=[], room=None, subject=_LECTURE)
    assert detect([DaySchedule(day="월", range=[1, 2, 3])], [broken]) == []


def test_slots_intersect_uses_set_membership():
    assert slots_intersect([1, 2], (2, 9))
    assert not slots_intersect([1, 2], (3,))


# ---------------------------------------------------------------------------
# find_event_conflicts (dated events)
# ---------------------------------------------------------------------------


def test_partial_overlap_is_reported():
    existing = _event("10:00", "11:00")
    candidate = _event("10:30", "11:30", title="새 회의")
    assert find_event_conflicts(candidate, [existing]) == [existing]


def test_exact_boundary_no_conflict():
    existing = _event("09:00", "10:00")
    candidate = _event("10:00", "11:00")
    assert find_event_conflicts(candidate, [existing]) == []


def test_different_date_no_conflict():
    existing = _event("10:00", "11:00", on=date(2024, 7, 21))
    candidate = _event("10:00", "11:00")
    assert find_event_conflicts(candidate, [existing]) == []


def test_recurring_existing_event_conflicts_on_later_occurrence():
    """A weekly event clashes with a candidate on one of its later dates."""
    weekly = _event(
        "14:00",
        "15:00",
        on=date(2024, 7, 1),
        repeat=RepeatRule(is_repeating=True, type="weekly", interval=1),
    )
    # 2024-07-15 is two weeks after the series start
    candidate = _event("14:30", "15:30", on=date(2024, 7, 15))
    assert find_event_conflicts(candidate, [weekly]) == [weekly]


def test_recurring_candidate_checks_its_whole_window():
    """A repeating candidate is checked against events after its base date."""
    later = _event("09:00", "09:30", on=date(2024, 7, 4))
    candidate = _event(
        "09:15",
        "10:00",
        on=date(2024, 7, 1),
        repeat=RepeatRule(is_repeating=True, type="daily", interval=1, end_date=date(2024, 7, 5)),
    )
    assert find_event_conflicts(candidate, [later]) == [later]


def test_event_does_not_conflict_with_its_previous_version():
    """Updating an event in place is not a clash with itself."""
    original = _event("10:00", "11:00")
    edited = original.model_copy(update={"end_time": time(12, 0)})
    assert find_event_conflicts(edited, [original]) == []
