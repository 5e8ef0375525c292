"""
Event resolution: turns filtered syllabus lines into ResolvedEvents.

Every line is handled on its own. A line that cannot be pinned to a month and
day is dropped without a diagnostic, so one malformed line never aborts a
batch; the public entry point returns an empty list rather than raising.
"""
from __future__ import annotations

import math
import re
import typing as t
from datetime import date, datetime, timedelta

from rich.console import Console
from rich.markup import escape

from .date_extraction import CandidateSpan, Extractor, ParsedComponent, extract_spans
from .line_filter import extract_title, is_deadline_line, is_event_line
from .models import ResolvedEvent
from .settings import DEFAULT_DEADLINE_TIME, DEFAULT_DURATION_MINUTES, FALLBACK_TITLE


error_console = Console(stderr=True)

_TIME_TOKEN_RE = re.compile(r"(\b\d{1,2}:\d{2}\s?(am|pm)?\b)|(\b\d{1,2}\s?(am|pm)\b)", re.IGNORECASE)
_LINE_BREAK_RE = re.compile(r"\r?\n")


def coerce_fallback_year(value: t.Any, today: t.Optional[date] = None) -> int:
    """
    Use ``value`` as the fallback year when it is a finite number, else the current year.

    :param value: Anything a client may send ("2025", 2025.0, None, "soon").
    :param today: Override for the current date (tests).
    """
    current_year = (today or date.today()).year
    if value is None or isinstance(value, bool) or value == "":
        return current_year
    try:
        number = float(value)
    except (TypeError, ValueError):
        return current_year
    if not math.isfinite(number) or not 1 <= int(number) <= 9999:
        return current_year
    return int(number)


def coerce_duration_minutes(value: t.Any) -> float:
    """Zero, missing or non-numeric durations fall back to the configured default."""
    try:
        minutes = float(value)
    except (TypeError, ValueError):
        return DEFAULT_DURATION_MINUTES
    if not math.isfinite(minutes) or minutes == 0:
        return DEFAULT_DURATION_MINUTES
    return minutes


def _has_clock(span: CandidateSpan) -> bool:
    return span.start.is_certain("hour") or span.start.is_certain("minute")


def _with_default_time(line: str, spans: list[CandidateSpan], default_time: str) -> str:
    if not spans:
        return f"{line} {default_time}"
    stop = spans[0].index + len(spans[0].text)
    return f"{line[:stop]} {default_time}{line[stop:]}"


def _end_on_or_after(start: datetime, component: ParsedComponent) -> datetime:
    """Give a yearless range end the start's year, or the next one when it wraps ("Dec 30 - Jan 2")."""
    if component.is_certain("year"):
        return component.to_datetime()
    end = component.with_year(start.year).to_datetime()
    if (end.month, end.day) < (start.month, start.day):
        end = component.with_year(start.year + 1).to_datetime()
    return end


def _extract(
        line: str,
        reference: datetime,
        is_deadline: bool,
        has_time_token: bool,
        default_time: t.Optional[str],
        extractor: Extractor,
) -> t.Optional[CandidateSpan]:
    spans = extractor(line, reference)

    # Deadline with no written time: retry with the default due time placed right
    # after the date so "Due 10/9 HW2" and "HW2 due 10/9" both become instants
    if is_deadline and not has_time_token and default_time:
        untimed = not spans or not (_has_clock(spans[0]) or spans[0].end is not None)
        if untimed:
            rescued = extractor(_with_default_time(line, spans, default_time), reference)
            if rescued and (not spans or _has_clock(rescued[0])):
                spans = rescued

    return spans[0] if spans else None


def resolve_line(
        line: str,
        fallback_year: int,
        default_duration_minutes: float = DEFAULT_DURATION_MINUTES,
        default_time: t.Optional[str] = DEFAULT_DEADLINE_TIME,
        extractor: Extractor = extract_spans,
) -> t.Optional[ResolvedEvent]:
    """
    Resolve one syllabus line into an event.

    :param line: A trimmed line that passed the line filter.
    :param fallback_year: Year used whenever the line does not spell one out.
    :param default_duration_minutes: Length given to timed, non-deadline events.
    :param default_time: "HH:MM" due time for deadlines without a time; falsy disables it.
    :param extractor: Date/time extraction capability.
    :return: The resolved event, or None when the line has no usable date.
    """
    is_deadline = is_deadline_line(line)
    has_time_token = bool(_TIME_TOKEN_RE.search(line))

    # Only the year of the reference matters; Aug 1 is a neutral term anchor
    reference = datetime(fallback_year, 8, 1)

    span = _extract(line, reference, is_deadline, has_time_token, default_time, extractor)
    if span is None:
        return None

    # Month and day must be written, otherwise everything collapses onto the reference date
    if not (span.start.is_certain("month") and span.start.is_certain("day")):
        return None

    start_component = span.start
    if not start_component.is_certain("year"):
        start_component = start_component.with_year(fallback_year)
    try:
        start = start_component.to_datetime()
    except ValueError:
        return None

    end: t.Optional[datetime] = None
    if span.end is not None:
        try:
            end = _end_on_or_after(start, span.end)
        except (ValueError, OverflowError):
            end = None
    has_range = end is not None

    has_time = _has_clock(span) or has_range or has_time_token

    if not has_range and has_time and not is_deadline:
        try:
            end = start + timedelta(minutes=default_duration_minutes)
        except (ValueError, OverflowError):
            # Past datetime.max ("Dec 31 11:30pm" in year 9999): drop the line alone
            return None

    return ResolvedEvent(
        title=extract_title(line) or FALLBACK_TITLE,
        start=start,
        end=end,
        all_day=not has_time,
        source_line=line,
    )


def dedupe_events(events: t.Iterable[ResolvedEvent]) -> list[ResolvedEvent]:
    """Keep the first event for every (title, start) pair, preserving input order."""
    seen: set[tuple[str, str]] = set()
    unique: list[ResolvedEvent] = []
    for event in events:
        if event.dedupe_key in seen:
            continue
        seen.add(event.dedupe_key)
        unique.append(event)
    return unique


def split_lines(text: str) -> list[str]:
    """Split pasted text into trimmed, non-empty lines."""
    return [line.strip() for line in _LINE_BREAK_RE.split(text) if line.strip()]


def parse_syllabus_text(
        text: t.Any,
        fallback_year: t.Any = None,
        default_duration_minutes: t.Any = DEFAULT_DURATION_MINUTES,
        default_time: t.Optional[str] = DEFAULT_DEADLINE_TIME,
        extractor: t.Optional[Extractor] = None,
) -> list[ResolvedEvent]:
    """
    Parse pasted syllabus text into calendar-friendly events.

    Example:
        >>> parse_syllabus_text("Sep 19 3–4pm — Quiz 1", fallback_year=2025)[0].title
        'Quiz 1'

    :param text: The raw pasted text; anything other than a non-empty string yields [].
    :param fallback_year: Year for dates without one; non-numeric means the current year.
    :param default_duration_minutes: Length of timed events that have no explicit end.
    :param default_time: Due time for deadlines without a time; falsy disables it.
    :param extractor: Optional replacement for the built-in date/time extractor.
    :return: Resolved, de-duplicated events in input order.
    """
    if not isinstance(text, str) or not text.strip():
        return []

    try:
        year = coerce_fallback_year(fallback_year)
        minutes = coerce_duration_minutes(default_duration_minutes)
        resolved: list[ResolvedEvent] = []
        for line in split_lines(text):
            if not is_event_line(line):
                continue
            event = resolve_line(line, year, minutes, default_time, extractor or extract_spans)
            if event is not None:
                resolved.append(event)
        return dedupe_events(resolved)
    except Exception as e:
        # Callers always get a list, never an error payload
        error_console.print(f"[red]Error:[/red] syllabus parse failed: {escape(str(e))}")
        return []
