"""Service for compiling repeat rules into RRULE strings and expanding
events into their concrete, dated occurrences."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, datetime, time

from dateutil.rrule import rrulestr

from planner.domain.errors import InvalidRecurrence
from planner.domain.models import EventRecord, Occurrence, RepeatRule, RepeatType

MAX_OCCURRENCES = 1000


def validate_repeat(rule: RepeatRule) -> None:
    """Raise ``InvalidRecurrence`` for rules that cannot be expanded."""
    if rule.type not in {t.value for t in RepeatType}:
        raise InvalidRecurrence(f"Unknown repeat type: {rule.type!r}")
    if rule.interval <= 0:
        raise InvalidRecurrence(f"Repeat interval must be positive, got {rule.interval}")


def repeats(rule: RepeatRule) -> bool:
    return rule.is_repeating and rule.type != RepeatType.NONE


def _rrule_body(rule: RepeatRule, until: date | None) -> str:
    parts = [f"FREQ={rule.type.upper()}"]
    if rule.interval > 1:
        parts.append(f"INTERVAL={rule.interval}")
    if until is not None:
        parts.append(f"UNTIL={until.strftime('%Y%m%d')}T235959")
    return ";".join(parts)


def compile_rrule(rule: RepeatRule) -> str | None:
    """Compile a RepeatRule into an RRULE string.

    Returns ``None`` if the rule does not repeat.
    """
    validate_repeat(rule)
    if not repeats(rule):
        return None
    return _rrule_body(rule, rule.end_date)


def _occurrence(event: EventRecord, on: date) -> Occurrence:
    return Occurrence(
        source_event_id=event.id,
        concrete_date=on,
        start_time=event.start_time,
        end_time=event.end_time,
        title=event.title,
    )


def _upper_bound(end: date | None, rule: RepeatRule) -> date | None:
    bounds = [d for d in (end, rule.end_date) if d is not None]
    return min(bounds) if bounds else None


def expand(
    event: EventRecord,
    start: date | None = None,
    end: date | None = None,
    max_occurrences: int = MAX_OCCURRENCES,
) -> Iterator[Occurrence]:
    """Yield the occurrences of *event* that fall within ``[start, end]``.

    Both bounds are inclusive and optional. A non-repeating event yields its
    base date only. Monthly rules skip months that have no matching
    day-of-month (Jan 31 -> Mar 31 -> May 31 ...). At most
    *max_occurrences* are yielded so an unbounded window still terminates.
    """
    rule = event.repeat
    validate_repeat(rule)

    if not repeats(rule):
        if (start is None or event.date >= start) and (end is None or event.date <= end):
            yield _occurrence(event, event.date)
        return

    until = _upper_bound(end, rule)
    if until is not None and until < event.date:
        return

    recurrence = rrulestr(
        f"DTSTART:{event.date.strftime('%Y%m%d')}T000000\n"
        f"RRULE:{_rrule_body(rule, until)}"
    )

    first = max(start, event.date) if start is not None else event.date
    after = datetime.combine(first, time.min)
    for dt in recurrence.xafter(after, count=max_occurrences, inc=True):
        yield _occurrence(event, dt.date())
