"""
iCalendar export for resolved syllabus events.

All-day entries are written as DATE values with an exclusive end on the day
after the later of end/start; timed entries without an end last 60 minutes.
The export timestamp is passed in so output is reproducible in tests.
"""
from __future__ import annotations

import re
import typing as t
from datetime import datetime, timedelta

from icalendar import Calendar, Event

from syllabus_server.models import ResolvedEvent

from .models import CalendarEntry


PRODID = "-//SyllabusToCalendar//EN"
UID_DOMAIN = "syllabus.local"
DEFAULT_EVENT_MINUTES = 60

_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|]+')


def entries_from_events(events: t.Iterable[ResolvedEvent]) -> list[CalendarEntry]:
    """Convert resolved events to export entries, keeping the source line as description."""
    return [
        CalendarEntry(
            title=event.title,
            start=event.start,
            end=event.end,
            all_day=event.all_day,
            description=f"From syllabus: {event.source_line}" if event.source_line else None,
        )
        for event in events
    ]


def _build_event(entry: CalendarEntry, uid: str, stamp: datetime) -> Event:
    vevent = Event()
    vevent.add("uid", uid)
    vevent.add("summary", entry.title)
    vevent.add("dtstamp", stamp)

    if entry.all_day:
        last_day = max(entry.end, entry.start) if entry.end else entry.start
        vevent.add("dtstart", entry.start.date())
        vevent.add("dtend", last_day.date() + timedelta(days=1))
    else:
        vevent.add("dtstart", entry.start)
        vevent.add("dtend", entry.end or entry.start + timedelta(minutes=DEFAULT_EVENT_MINUTES))

    if entry.description:
        vevent.add("description", entry.description)
    vevent.add("status", "CONFIRMED")
    return vevent


def make_ics(
        entries: t.Sequence[CalendarEntry],
        calendar_name: str = "Syllabus",
        now: t.Optional[datetime] = None,
) -> str:
    """
    Serialize entries into an iCalendar document.

    :param entries: Events to export, in order.
    :param calendar_name: Display name written to NAME and X-WR-CALNAME.
    :param now: Export time used for DTSTAMP and UIDs; defaults to the local clock.
    :return: The .ics text (CRLF line endings).
    """
    current = now or datetime.now()
    stamp_ms = int(current.timestamp() * 1000)
    stamp = current.replace(microsecond=0)

    calendar = Calendar()
    calendar.add("prodid", PRODID)
    calendar.add("version", "2.0")
    calendar.add("calscale", "GREGORIAN")
    calendar.add("name", calendar_name)
    calendar.add("x-wr-calname", calendar_name)

    for index, entry in enumerate(entries):
        uid = f"{stamp_ms}-{index}@{UID_DOMAIN}"
        calendar.add_component(_build_event(entry, uid, stamp))

    return calendar.to_ical().decode("utf-8")


def sanitize_filename(name: str) -> str:
    """Make a calendar name safe to use as a download filename."""
    return _UNSAFE_FILENAME_RE.sub("_", str(name)).strip() or "calendar"
