"""Service for computing due event notifications."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from planner.domain.models import EventRecord, Notification
from planner.services.recurrence import expand

# Minutes before start offered to users: 1 min, 10 min, 1 h, 2 h, 1 day
NOTIFICATION_OPTIONS = [1, 10, 60, 120, 1440]


def notification_message(event: EventRecord) -> str:
    return f"{event.notification_time}분 후 {event.title} 일정이 시작됩니다."


def due_notifications(
    events: Iterable[EventRecord],
    now: datetime,
    notified: set[str] | frozenset[str] = frozenset(),
) -> list[Notification]:
    """Return notifications for occurrences that start within their event's
    ``notification_time`` after *now* and have not been sent yet.

    A lead time can reach past midnight, so each event is expanded from
    today up to the date of ``now + notification_time``.
    """
    today = now.date()
    due: list[Notification] = []
    for event in events:
        horizon = (now + timedelta(minutes=event.notification_time)).date()
        for occ in expand(event, today, horizon):
            starts_at = datetime.combine(occ.concrete_date, occ.start_time, tzinfo=now.tzinfo)
            if not (now < starts_at <= now + timedelta(minutes=event.notification_time)):
                continue
            notification = Notification(
                event_id=event.id,
                occurrence_date=occ.concrete_date,
                title=event.title,
                message=notification_message(event),
                due_at=starts_at - timedelta(minutes=event.notification_time),
            )
            if notification.key not in notified:
                due.append(notification)
    return due
