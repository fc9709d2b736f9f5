"""Tests for week and month bucketing."""

from __future__ import annotations

from datetime import date, time

from planner.domain.models import EventRecord, Occurrence, RepeatRule
from planner.services.calendar_views import (
    buckets_for_month,
    buckets_for_week,
    month_weeks,
    occurrences_between,
    week_dates,
)

_MONDAY = 0
_SUNDAY = 6


def _occ(on: date, start: str = "10:00", end: str = "11:00") -> Occurrence:
    return Occurrence(
        source_event_id="evt",
        concrete_date=on,
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
    )


def _count(buckets: dict) -> int:
    return sum(len(items) for items in buckets.values())


def _july_events() -> list[EventRecord]:
    return [
        EventRecord(
            title="팀 회의",
            date=date(2024, 7, 1),
            start_time=time(10, 0),
            end_time=time(11, 0),
            repeat=RepeatRule(is_repeating=True, type="weekly"),
        ),
        EventRecord(title="생일 파티", date=date(2024, 7, 20), start_time=time(19, 0), end_time=time(22, 0)),
        EventRecord(title="운동", date=date(2024, 7, 3), start_time=time(18, 0), end_time=time(19, 0)),
    ]


def test_week_dates_start_on_sunday_by_default():
    days = week_dates(date(2024, 7, 20))
    assert days[0] == date(2024, 7, 14)
    assert days[-1] == date(2024, 7, 20)


def test_week_dates_with_monday_start():
    days = week_dates(date(2024, 7, 20), _MONDAY)
    assert days[0] == date(2024, 7, 15)
    assert days[-1] == date(2024, 7, 21)


def test_week_buckets_have_every_weekday_in_display_order():
    """Empty weekdays still get a bucket, ordered from the first weekday."""
    buckets = buckets_for_week([], date(2024, 7, 20))
    assert list(buckets) == [6, 0, 1, 2, 3, 4, 5]
    assert all(items == [] for items in buckets.values())


def test_week_buckets_drop_occurrences_outside_the_week():
    inside = _occ(date(2024, 7, 16))
    outside = _occ(date(2024, 7, 21))
    buckets = buckets_for_week([inside, outside], date(2024, 7, 20))
    assert buckets[1] == [inside]
    assert _count(buckets) == 1


def test_bucket_contents_are_sorted_by_start_time():
    late = _occ(date(2024, 7, 16), "15:00", "16:00")
    early = _occ(date(2024, 7, 16), "09:00", "10:00")
    assert buckets_for_week([late, early], date(2024, 7, 16))[1] == [early, late]


def test_month_buckets_cover_every_day():
    buckets = buckets_for_month([], date(2024, 2, 10))
    assert list(buckets) == list(range(1, 30))


def test_month_buckets_drop_other_months():
    july = _occ(date(2024, 7, 31))
    august = _occ(date(2024, 8, 1))
    buckets = buckets_for_month([july, august], date(2024, 7, 20))
    assert buckets[31] == [july]
    assert _count(buckets) == 1


def test_month_view_is_a_superset_of_the_week_view():
    """Every occurrence in a week bucket also appears in that month's buckets."""
    reference = date(2024, 7, 20)
    occurrences = occurrences_between(_july_events(), date(2024, 7, 1), date(2024, 7, 31))

    week = buckets_for_week(occurrences, reference)
    month = buckets_for_month(occurrences, reference)

    week_items = [o for items in week.values() for o in items]
    month_items = [o for items in month.values() for o in items]
    assert week_items
    assert all(o in month_items for o in week_items)
    assert len(month_items) > len(week_items)


def test_occurrences_between_is_chronological():
    occurrences = occurrences_between(_july_events(), date(2024, 7, 1), date(2024, 7, 10))
    assert [(o.concrete_date, o.title) for o in occurrences] == [
        (date(2024, 7, 1), "팀 회의"),
        (date(2024, 7, 3), "운동"),
        (date(2024, 7, 8), "팀 회의"),
    ]


def test_month_weeks_grid():
    """Padding days outside the month are None."""
    weeks = month_weeks(date(2024, 7, 1), _SUNDAY)
    # July 2024 starts on a Monday
    assert weeks[0] == [None, 1, 2, 3, 4, 5, 6]
    assert weeks[-1][:4] == [28, 29, 30, 31]
    assert weeks[-1][4:] == [None, None, None]
