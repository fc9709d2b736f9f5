"""Lecture and event search: option filters, pagination and a memoized
search session."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from planner.domain.models import EventRecord, Lecture, SearchOptions
from planner.services.conflicts import slots_intersect
from planner.services.parser import parse_schedule

PAGE_SIZE = 100


def _matches_query(lecture: Lecture, query: str) -> bool:
    if not query:
        return True
    needle = query.lower()
    return needle in lecture.title.lower() or needle in lecture.id.lower()


def _matches_days(lecture: Lecture, days: tuple[str, ...]) -> bool:
    if not days:
        return True
    return any(s.day in days for s in parse_schedule(lecture.schedule))


def _matches_times(lecture: Lecture, times: tuple[int, ...]) -> bool:
    if not times:
        return True
    return any(slots_intersect(s.range, times) for s in parse_schedule(lecture.schedule))


def matches(lecture: Lecture, options: SearchOptions) -> bool:
    """AND of every non-empty filter in *options*."""
    return (
        _matches_query(lecture, options.query)
        and (not options.grades or lecture.grade in options.grades)
        and (not options.majors or lecture.major in options.majors)
        and (not options.credits or lecture.credits.startswith(str(options.credits)))
        and _matches_days(lecture, options.days)
        and _matches_times(lecture, options.times)
    )


def filter_lectures(lectures: Iterable[Lecture], options: SearchOptions) -> list[Lecture]:
    """Return the lectures matching *options*, in their original order."""
    return [lecture for lecture in lectures if matches(lecture, options)]


def search_events(events: Iterable[EventRecord], query: str) -> list[EventRecord]:
    """Case-insensitive substring search over title, description and location."""
    needle = query.strip().lower()
    if not needle:
        return list(events)
    return [
        e
        for e in events
        if needle in e.title.lower()
        or needle in e.description.lower()
        or needle in e.location.lower()
    ]


def all_majors(lectures: Iterable[Lecture]) -> list[str]:
    return list(dict.fromkeys(lecture.major for lecture in lectures))


def last_page(total: int, page_size: int = PAGE_SIZE) -> int:
    return math.ceil(total / page_size)


def paginate(items: Sequence, page: int, page_size: int = PAGE_SIZE) -> list:
    """Cumulative slice: everything up to and including *page*."""
    return list(items[: max(page, 0) * page_size])


class LectureSearch:
    """Search session over a loaded lecture list.

    The filtered list is only recomputed when the options (by value) or the
    lecture list change. Paging is explicit: callers ask for the next page
    when their viewport needs more rows.
    """

    def __init__(self, lectures: Sequence[Lecture] = (), page_size: int = PAGE_SIZE) -> None:
        self.page_size = page_size
        self.page = 1
        self._lectures: Sequence[Lecture] = lectures
        self._options: SearchOptions | None = None
        self._results: list[Lecture] = []
        self.computations = 0

    def load(self, lectures: Sequence[Lecture]) -> None:
        if lectures is self._lectures:
            return
        self._lectures = lectures
        self._options = None
        self.page = 1

    def results(self, options: SearchOptions) -> list[Lecture]:
        if options != self._options:
            self._results = filter_lectures(self._lectures, options)
            self._options = options
            self.page = 1
            self.computations += 1
        return self._results

    @property
    def last_page(self) -> int:
        return last_page(len(self._results), self.page_size)

    def next_page(self) -> int:
        self.page = max(1, min(self.last_page, self.page + 1))
        return self.page

    def visible(self) -> list[Lecture]:
        return paginate(self._results, self.page, self.page_size)
