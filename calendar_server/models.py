"""
Data models for the calendar export.

This module contains the dataclass the iCalendar serializer consumes; it is
decoupled from ResolvedEvent so edited or hand-made events can be exported too.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import typing as t


@dataclass
class CalendarEntry:
    """One event to write into an .ics export."""
    title: str
    start: datetime
    end: t.Optional[datetime] = None
    all_day: bool = False
    description: t.Optional[str] = None
