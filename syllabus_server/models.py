"""
Data models for resolved syllabus events.

This module contains the dataclass produced by the event resolver for every
syllabus line that describes a dated event.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import typing as t


@dataclass(frozen=True)
class ResolvedEvent:
    """
    One calendar-ready event derived from a single syllabus line, e.g.:
    - "Sep 19 3–4pm — Quiz 1"  -> timed event 15:00-16:00
    - "HW2 due 10/9"           -> deadline at 23:59, no end
    - "Oct 6 Midterm"          -> all-day event
    """
    title: str
    start: datetime                    # naive local time
    end: t.Optional[datetime] = None   # None for deadlines and all-day events
    all_day: bool = False
    source_line: str = ""

    @property
    def dedupe_key(self) -> tuple[str, str]:
        return self.title, self.start.isoformat()

    def to_dict(self) -> dict[str, t.Any]:
        """JSON-friendly form with ISO-8601 timestamps and camelCase keys."""
        data: dict[str, t.Any] = {
            "title": self.title,
            "start": self.start.isoformat(),
            "allDay": self.all_day,
            "sourceLine": self.source_line,
        }
        if self.end is not None:
            data["end"] = self.end.isoformat()
        return data
