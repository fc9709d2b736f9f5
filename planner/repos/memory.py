"""In-memory repositories for events, timetables and sent notifications."""

from __future__ import annotations

import uuid

from planner.domain.models import EventRecord, ScheduleEntry


class EventRepository:
    """Dict-backed store for EventRecord instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, EventRecord] = {}

    def add(self, event: EventRecord) -> None:
        self._store[event.id] = event

    def get(self, event_id: str) -> EventRecord | None:
        return self._store.get(event_id)

    def list_all(self) -> list[EventRecord]:
        return list(self._store.values())

    def delete(self, event_id: str) -> bool:
        return self._store.pop(event_id, None) is not None


class TimetableRepository:
    """Named timetables, each an ordered list of ScheduleEntry.

    Entries are owned by exactly one table; deleting a table drops them.
    """

    def __init__(self) -> None:
        self._tables: dict[str, list[ScheduleEntry]] = {}

    def create(self, table_id: str | None = None) -> str:
        table_id = table_id or f"schedule-{uuid.uuid4().hex[:12]}"
        self._tables.setdefault(table_id, [])
        return table_id

    def list_ids(self) -> list[str]:
        return list(self._tables)

    def get(self, table_id: str) -> list[ScheduleEntry] | None:
        entries = self._tables.get(table_id)
        return None if entries is None else list(entries)

    def add_entries(self, table_id: str, entries: list[ScheduleEntry]) -> None:
        self._tables[table_id].extend(entries)

    def remove_at(self, table_id: str, day: str, slot: int) -> list[ScheduleEntry]:
        """Drop the entries covering ``(day, slot)``; return the removed ones."""
        kept: list[ScheduleEntry] = []
        removed: list[ScheduleEntry] = []
        for entry in self._tables[table_id]:
            (removed if entry.day == day and slot in entry.range else kept).append(entry)
        self._tables[table_id] = kept
        return removed

    def duplicate(self, table_id: str) -> str:
        new_id = self.create()
        self._tables[new_id] = [e.model_copy() for e in self._tables[table_id]]
        return new_id

    def delete(self, table_id: str) -> bool:
        return self._tables.pop(table_id, None) is not None


class NotificationLog:
    """Set of occurrence keys (``<event id>:<date>``) already notified."""

    def __init__(self) -> None:
        self._sent: set[str] = set()

    def mark_sent(self, key: str) -> None:
        self._sent.add(key)

    def sent(self) -> frozenset[str]:
        return frozenset(self._sent)
