"""Parsing raw lecture schedules and loose date input."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime

import dateparser

from planner.domain.models import DaySchedule
from planner.services.slots import ALL_DAY_LABELS, SLOT_IDS

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = "<p>"

_BLOCK_RE = re.compile(
    r"^\s*(?P<day>\S)\s*(?P<start>\d+)(?:\s*~\s*(?P<end>\d+))?\s*(?:\((?P<room>[^)]*)\))?"
)


def _parse_block(block: str) -> DaySchedule | None:
    m = _BLOCK_RE.match(block)
    if m is None or m.group("day") not in ALL_DAY_LABELS:
        return None

    start = int(m.group("start"))
    end = int(m.group("end") or start)
    if end < start or start not in SLOT_IDS or end not in SLOT_IDS:
        return None

    room = (m.group("room") or "").strip() or None
    return DaySchedule(day=m.group("day"), range=list(range(start, end + 1)), room=room)


def parse_schedule(raw: str | None) -> list[DaySchedule]:
    """Parse a lecture's raw schedule string into DaySchedule blocks.

    The string is a ``<p>``-separated list such as ``월1~3(7-0301)<p>수4``.
    Blocks that cannot be read are skipped, so malformed input simply
    yields fewer (or no) schedules instead of raising.
    """
    if not raw:
        return []

    schedules: list[DaySchedule] = []
    for block in raw.split(BLOCK_SEPARATOR):
        if not block.strip():
            continue
        parsed = _parse_block(block)
        if parsed is None:
            logger.debug("Skipping unreadable schedule block %r", block)
            continue
        schedules.append(parsed)
    return schedules


def parse_reference_date(raw: str | None, today: date) -> date | None:
    """Parse a loose date expression ("today", "next monday", "2024-07-20")."""
    if not raw or not raw.strip():
        return None
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        pass

    settings = {
        "PREFER_DATES_FROM": "future",
        "RELATIVE_BASE": datetime.combine(today, datetime.min.time()),
        "RETURN_AS_TIMEZONE_AWARE": False,
    }
    result = dateparser.parse(raw, settings=settings)
    if result is None:
        return None
    return result.date()
