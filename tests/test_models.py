"""Tests for record validation and wire field names."""

from __future__ import annotations

from datetime import date, time

import pytest
from pydantic import ValidationError

from planner.domain.models import EventRecord, Lecture, ScheduleEntry, SearchOptions


def test_event_accepts_camel_case_and_snake_case():
    camel = EventRecord.model_validate(
        {
            "title": "팀 회의",
            "date": "2024-07-20",
            "startTime": "10:00",
            "endTime": "11:00",
            "repeat": {"isRepeating": True, "type": "weekly", "interval": 2, "endDate": "2024-08-31"},
            "notificationTime": 60,
        }
    )
    snake = EventRecord(
        title="팀 회의",
        date=date(2024, 7, 20),
        start_time=time(10, 0),
        end_time=time(11, 0),
    )
    assert camel.repeat.interval == 2
    assert camel.repeat.end_date == date(2024, 8, 31)
    assert camel.notification_time == 60
    assert snake.start_time == camel.start_time


def test_event_serializes_with_original_field_names():
    event = EventRecord(id=1, title="팀 회의", date=date(2024, 7, 20), start_time=time(10), end_time=time(11))
    dumped = event.model_dump(mode="json", by_alias=True)
    assert dumped["id"] == "1"
    assert dumped["startTime"] == "10:00"
    assert dumped["endTime"] == "11:00"
    assert dumped["repeat"] == {"isRepeating": False, "type": "none", "interval": 1, "endDate": None}
    assert dumped["notificationTime"] == 10


def test_event_end_must_follow_start():
    with pytest.raises(ValidationError, match="end_time must be after start_time"):
        EventRecord(title="x", date=date(2024, 7, 20), start_time=time(11), end_time=time(10))


def test_schedule_entry_subject_keeps_its_type():
    """A lecture subject is not coerced into an event record."""
    lecture = Lecture(id="CS101", title="자료구조", credits=3, grade=2)
    entry = ScheduleEntry.model_validate(
        {"day": "월", "range": [1, 2], "subject": lecture.model_dump()}
    )
    assert isinstance(entry.subject, Lecture)
    assert entry.subject.credits == "3"


def test_search_options_compare_by_value():
    assert SearchOptions(days=("월",)) == SearchOptions(days=("월",))
    assert SearchOptions() != SearchOptions(query="a")
    with pytest.raises(ValidationError):
        SearchOptions().query = "changed"
