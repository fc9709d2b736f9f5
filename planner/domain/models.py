"""Domain models for the calendar and timetable system."""

from __future__ import annotations

import uuid
from datetime import date, datetime, time
from enum import StrEnum

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


class RepeatType(StrEnum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def _new_id() -> str:
    return str(uuid.uuid4())


class CamelModel(BaseModel):
    """Base for records exchanged with clients: camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


# ---------------------------------------------------------------------------
# Timetable records
# ---------------------------------------------------------------------------


class DaySchedule(CamelModel):
    day: str
    range: list[int]
    room: str | None = None

    @field_validator("range")
    @classmethod
    def _strictly_increasing(cls, value: list[int]) -> list[int]:
        if not value:
            raise ValueError("range must not be empty")
        if any(b <= a for a, b in zip(value, value[1:])):
            raise ValueError("range must be strictly increasing")
        return value


class Lecture(CamelModel):
    id: str
    title: str
    credits: str = ""
    grade: int = 0
    major: str = ""
    schedule: str = ""


# ---------------------------------------------------------------------------
# Calendar records
# ---------------------------------------------------------------------------


class RepeatRule(CamelModel):
    is_repeating: bool = False
    # Kept as a plain string; unknown values are rejected by validate_repeat().
    type: str = RepeatType.NONE.value
    interval: int = 1
    end_date: date | None = None


class EventRecord(CamelModel):
    id: str = Field(default_factory=_new_id)
    title: str
    date: date
    start_time: time
    end_time: time
    description: str = ""
    location: str = ""
    category: str = ""
    repeat: RepeatRule = Field(default_factory=RepeatRule)
    notification_time: int = Field(default=10, ge=0)

    @model_validator(mode="after")
    def _end_after_start(self) -> EventRecord:
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self

    @field_serializer("start_time", "end_time")
    def _hhmm(self, value: time) -> str:
        return value.strftime("%H:%M")


class Occurrence(CamelModel):
    """One concrete, dated instance of an event. Never stored."""

    source_event_id: str
    concrete_date: date
    start_time: time
    end_time: time
    title: str = ""

    @field_serializer("start_time", "end_time")
    def _hhmm(self, value: time) -> str:
        return value.strftime("%H:%M")


class ScheduleEntry(DaySchedule):
    subject: EventRecord | Lecture


class Notification(CamelModel):
    event_id: str
    occurrence_date: date
    title: str
    message: str
    due_at: datetime

    @property
    def key(self) -> str:
        return f"{self.event_id}:{self.occurrence_date.isoformat()}"


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class SearchOptions(CamelModel):
    """Lecture search filters. An empty field matches everything."""

    model_config = ConfigDict(frozen=True)

    query: str = ""
    grades: tuple[int, ...] = ()
    days: tuple[str, ...] = ()
    times: tuple[int, ...] = ()
    majors: tuple[str, ...] = ()
    credits: int | None = None


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class Timetable(CamelModel):
    id: str
    entries: list[ScheduleEntry] = Field(default_factory=list)


class LecturePage(CamelModel):
    total: int
    page: int
    last_page: int
    items: list[Lecture]
