"""FastAPI application: entry point for the calendar and timetable service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date, datetime

from fastapi import FastAPI, HTTPException, Query

from planner.config import get_settings
from planner.domain.errors import CatalogFetchError, InvalidRecurrence, ScheduleConflict
from planner.domain.models import (
    EventRecord,
    Lecture,
    LecturePage,
    ScheduleEntry,
    SearchOptions,
    Timetable,
)
from planner.logging_config import configure_logging
from planner.repos.memory import EventRepository, NotificationLog, TimetableRepository
from planner.services.calendar_views import (
    buckets_for_month,
    buckets_for_week,
    month_bounds,
    month_weeks,
    occurrences_between,
    week_dates,
)
from planner.services.catalog import HttpCatalogProvider, LectureCatalog
from planner.services.conflicts import find_event_conflicts
from planner.services.parser import parse_reference_date
from planner.services.recurrence import validate_repeat
from planner.services.reminders import due_notifications
from planner.services.search import LectureSearch, all_majors, paginate, search_events
from planner.services.timetable import add_lecture

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

# ── Application state (owned here, injected into services) ───────────
event_repo = EventRepository()
timetable_repo = TimetableRepository()
notification_log = NotificationLog()
catalog = LectureCatalog(
    HttpCatalogProvider(settings.catalog_base_url, timeout=settings.catalog_timeout)
)
lecture_search = LectureSearch(page_size=settings.page_size)


@asynccontextmanager
async def lifespan(_: FastAPI):
    yield
    await catalog.provider.aclose()


app = FastAPI(title="Planner Service", lifespan=lifespan)


def _dump(items) -> list[dict]:
    return [item.model_dump(mode="json", by_alias=True) for item in items]


def _check_event(event: EventRecord, force: bool) -> None:
    try:
        validate_repeat(event.repeat)
    except InvalidRecurrence as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    conflicts = find_event_conflicts(
        event,
        event_repo.list_all(),
        horizon_days=settings.recurrence_horizon_days,
        max_occurrences=settings.max_occurrences,
    )
    if conflicts and not force:
        logger.info("Rejected event %s: overlaps %d event(s)", event.id, len(conflicts))
        raise HTTPException(
            status_code=409,
            detail={"message": "일정 겹침 경고", "conflicts": _dump(conflicts)},
        )


def _reference(raw: str | None) -> date:
    today = date.today()
    if raw is None:
        return today
    parsed = parse_reference_date(raw, today)
    if parsed is None:
        raise HTTPException(status_code=422, detail=f"Unrecognised date: {raw!r}")
    return parsed


# ── Events ────────────────────────────────────────────────────────────


@app.post("/events", response_model=EventRecord, status_code=201)
def create_event(event: EventRecord, force: bool = False) -> EventRecord:
    """Commit a new event unless it overlaps an existing one (or *force*)."""
    if event_repo.get(event.id) is not None:
        raise HTTPException(status_code=400, detail="Event already exists")
    _check_event(event, force)
    event_repo.add(event)
    return event


@app.get("/events", response_model=list[EventRecord])
def list_events(q: str = "") -> list[EventRecord]:
    """Return stored events, optionally narrowed by a search query."""
    return search_events(event_repo.list_all(), q)


@app.get("/events/{event_id}", response_model=EventRecord)
def get_event(event_id: str) -> EventRecord:
    event = event_repo.get(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@app.put("/events/{event_id}", response_model=EventRecord)
def update_event(event_id: str, event: EventRecord, force: bool = False) -> EventRecord:
    if event_repo.get(event_id) is None:
        raise HTTPException(status_code=404, detail="Event not found")
    event = event.model_copy(update={"id": event_id})
    _check_event(event, force)
    event_repo.add(event)
    return event


@app.delete("/events/{event_id}")
def delete_event(event_id: str) -> dict:
    if not event_repo.delete(event_id):
        raise HTTPException(status_code=404, detail="Event not found")
    return {"status": "deleted"}


# ── Calendar views ────────────────────────────────────────────────────


@app.get("/calendar/week")
def week_view(date: str | None = None) -> dict:
    """Occurrences of the week containing *date*, bucketed by weekday."""
    reference = _reference(date)
    days = week_dates(reference, settings.first_weekday)
    occurrences = occurrences_between(
        event_repo.list_all(), days[0], days[-1], settings.max_occurrences
    )
    buckets = buckets_for_week(occurrences, reference, settings.first_weekday)
    return {
        "dates": [d.isoformat() for d in days],
        "buckets": {weekday: _dump(items) for weekday, items in buckets.items()},
    }


@app.get("/calendar/month")
def month_view(date: str | None = None) -> dict:
    """Occurrences of *date*'s month, bucketed by day-of-month."""
    reference = _reference(date)
    start, end = month_bounds(reference)
    occurrences = occurrences_between(
        event_repo.list_all(), start, end, settings.max_occurrences
    )
    buckets = buckets_for_month(occurrences, reference)
    return {
        "year": reference.year,
        "month": reference.month,
        "weeks": month_weeks(reference, settings.first_weekday),
        "buckets": {day: _dump(items) for day, items in buckets.items()},
    }


@app.post("/notifications/tick")
def tick(now: datetime | None = None) -> dict:
    """Return notifications due at *now* and record them as sent.

    Pass *now* as a query param to control the simulated clock.
    """
    current_time = now or datetime.now()
    due = due_notifications(event_repo.list_all(), current_time, notification_log.sent())
    for notification in due:
        notification_log.mark_sent(notification.key)
    return {"time": current_time.isoformat(), "notifications": _dump(due)}


# ── Timetables ────────────────────────────────────────────────────────


def _table(table_id: str) -> Timetable:
    entries = timetable_repo.get(table_id)
    if entries is None:
        raise HTTPException(status_code=404, detail="Timetable not found")
    return Timetable(id=table_id, entries=entries)


@app.post("/tables", response_model=Timetable, status_code=201)
def create_table() -> Timetable:
    return _table(timetable_repo.create())


@app.get("/tables", response_model=list[Timetable])
def list_tables() -> list[Timetable]:
    return [_table(table_id) for table_id in timetable_repo.list_ids()]


@app.get("/tables/{table_id}", response_model=Timetable)
def get_table(table_id: str) -> Timetable:
    return _table(table_id)


@app.delete("/tables/{table_id}")
def delete_table(table_id: str) -> dict:
    if not timetable_repo.delete(table_id):
        raise HTTPException(status_code=404, detail="Timetable not found")
    return {"status": "deleted"}


@app.post("/tables/{table_id}/duplicate", response_model=Timetable, status_code=201)
def duplicate_table(table_id: str) -> Timetable:
    _table(table_id)
    return _table(timetable_repo.duplicate(table_id))


@app.post("/tables/{table_id}/lectures", response_model=list[ScheduleEntry], status_code=201)
def add_table_lecture(table_id: str, lecture: Lecture) -> list[ScheduleEntry]:
    """Add a lecture's schedule blocks to a timetable; 409 on any overlap."""
    _table(table_id)
    try:
        return add_lecture(timetable_repo, table_id, lecture)
    except ScheduleConflict as exc:
        raise HTTPException(
            status_code=409,
            detail={"message": "시간표 겹침", "conflicts": _dump(exc.conflicts)},
        ) from exc


@app.delete("/tables/{table_id}/entries")
def remove_table_entries(table_id: str, day: str, time: int) -> dict:
    """Remove the entries covering the ``(day, time)`` cell."""
    _table(table_id)
    removed = timetable_repo.remove_at(table_id, day, time)
    return {"removed": len(removed)}


# ── Lecture catalog ───────────────────────────────────────────────────


async def _lectures() -> list[Lecture]:
    try:
        return await catalog.all_lectures()
    except CatalogFetchError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@app.get("/lectures", response_model=LecturePage)
async def search_lectures(
    query: str = "",
    grades: list[int] = Query(default=[]),
    days: list[str] = Query(default=[]),
    times: list[int] = Query(default=[]),
    majors: list[str] = Query(default=[]),
    credits: int | None = None,
    page: int = Query(default=1, ge=1),
) -> LecturePage:
    """Filter the catalog; *page* selects how many rows are visible."""
    lecture_search.load(await _lectures())
    options = SearchOptions(
        query=query,
        grades=tuple(grades),
        days=tuple(days),
        times=tuple(times),
        majors=tuple(majors),
        credits=credits,
    )
    results = lecture_search.results(options)
    last = lecture_search.last_page
    page = min(page, max(last, 1))
    return LecturePage(
        total=len(results),
        page=page,
        last_page=last,
        items=paginate(results, page, settings.page_size),
    )


@app.get("/lectures/majors", response_model=list[str])
async def list_majors() -> list[str]:
    return all_majors(await _lectures())
