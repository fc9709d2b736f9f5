"""Committing lectures to timetables."""

from __future__ import annotations

import logging

from planner.domain.errors import ScheduleConflict
from planner.domain.models import Lecture, ScheduleEntry
from planner.repos.memory import TimetableRepository
from planner.services.conflicts import detect
from planner.services.parser import parse_schedule

logger = logging.getLogger(__name__)


def add_lecture(repo: TimetableRepository, table_id: str, lecture: Lecture) -> list[ScheduleEntry]:
    """Add every parsed block of *lecture*'s schedule to a table.

    Raises ``KeyError`` for an unknown table and ``ScheduleConflict`` when a
    block overlaps an entry already in the table or another block of the
    same lecture; nothing is added then.
    """
    existing = repo.get(table_id)
    if existing is None:
        raise KeyError(table_id)

    schedules = parse_schedule(lecture.schedule)
    conflicts = detect(schedules, existing)

    entries: list[ScheduleEntry] = []
    for s in schedules:
        # Blocks of one lecture must not overlap each other either
        conflicts.extend(detect([s], entries))
        entries.append(ScheduleEntry(day=s.day, range=s.range, room=s.room, subject=lecture))

    if conflicts:
        logger.info(
            "Rejected %s for table %s: overlaps %d entr(ies)",
            lecture.id,
            table_id,
            len(conflicts),
        )
        raise ScheduleConflict(conflicts)

    repo.add_entries(table_id, entries)
    return entries
