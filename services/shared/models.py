"""
Shared Pydantic models for REST API serialization.

Field names follow the JSON wire format used by browser clients (camelCase),
while the dataclasses in syllabus_server and calendar_server stay snake_case.
"""
from __future__ import annotations

import typing as t
from datetime import datetime

from pydantic import BaseModel

from calendar_server.models import CalendarEntry
from syllabus_server.settings import DEFAULT_DEADLINE_TIME, DEFAULT_DURATION_MINUTES


class ParseTextRequest(BaseModel):
    """
    Request model for parsing pasted syllabus text.

    Fields accept anything; bad values fall back to defaults inside the resolver.
    """
    text: t.Any = None
    fallbackYear: t.Any = None
    defaultDurationMinutes: t.Any = DEFAULT_DURATION_MINUTES
    defaultTime: t.Any = DEFAULT_DEADLINE_TIME   # "HH:MM" 24h; falsy disables deadline times


class ParsedEventOut(BaseModel):
    """One resolved event as returned by /parse."""
    title: str
    start: str                      # ISO datetime, naive local time
    end: t.Optional[str] = None     # absent for deadlines and all-day events
    allDay: bool = False
    sourceLine: str = ""


class IcsEvent(BaseModel):
    """An event submitted for export, possibly edited by the user after parsing."""
    title: t.Optional[str] = None
    start: datetime
    end: t.Optional[datetime] = None
    allDay: bool = False
    sourceLine: t.Optional[str] = None

    def to_entry(self) -> CalendarEntry:
        return CalendarEntry(
            title="Untitled" if self.title is None else self.title,
            start=_local_naive(self.start),
            end=_local_naive(self.end) if self.end else None,
            all_day=self.allDay,
            description=f"From syllabus: {self.sourceLine}" if self.sourceLine else None,
        )


class IcsRequest(BaseModel):
    """Request model for building an .ics file from events."""
    events: list[IcsEvent]
    calendarName: t.Optional[str] = None


def _local_naive(value: datetime) -> datetime:
    # "2025-09-19T22:00:00Z" from a browser becomes local wall-clock time
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value
