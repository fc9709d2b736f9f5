"""Weekday labels and the class-period table used by timetables."""

from __future__ import annotations

from datetime import time
from typing import NamedTuple

# Timetable weekdays, Monday first. Index matches date.weekday().
DAY_LABELS = ("월", "화", "수", "목", "금", "토")
ALL_DAY_LABELS = DAY_LABELS + ("일",)


class TimeSlot(NamedTuple):
    id: int
    start: time
    end: time

    @property
    def label(self) -> str:
        return f"{self.start:%H:%M}~{self.end:%H:%M}"


def _build_slots() -> tuple[TimeSlot, ...]:
    slots: list[TimeSlot] = []
    # Periods 1-18: half-hour periods from 09:00 to 18:00
    for i in range(18):
        minutes = 9 * 60 + i * 30
        slots.append(
            TimeSlot(
                i + 1,
                time(minutes // 60, minutes % 60),
                time((minutes + 30) // 60, (minutes + 30) % 60),
            )
        )
    # Periods 19-24: 50-minute evening periods with 5-minute breaks
    for i in range(6):
        minutes = 18 * 60 + i * 55
        slots.append(
            TimeSlot(
                19 + i,
                time(minutes // 60, minutes % 60),
                time((minutes + 50) // 60, (minutes + 50) % 60),
            )
        )
    return tuple(slots)


TIME_SLOTS = _build_slots()
SLOT_IDS = frozenset(slot.id for slot in TIME_SLOTS)


def day_index(label: str) -> int | None:
    """Return the ``date.weekday()`` value for a weekday label, or None."""
    try:
        return ALL_DAY_LABELS.index(label)
    except ValueError:
        return None
