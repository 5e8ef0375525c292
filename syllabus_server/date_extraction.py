"""
Date/time extraction for single syllabus lines.

The resolver only depends on the narrow contract implemented here:

    extract_spans(text, reference) -> list[CandidateSpan]

Each span carries per-field certainty flags so callers can tell a year that was
written in the text from one that was inferred from the reference date. Any
other extractor honouring the same contract can be injected into the resolver.

Month names and am/pm markers are looked up in dateutil's ``parserinfo``
vocabulary.
"""
from __future__ import annotations

import re
import typing as t
from dataclasses import dataclass, field, replace
from datetime import date, datetime

from dateutil.parser import parserinfo


_INFO = parserinfo()

FIELDS = ("year", "month", "day", "hour", "minute")


@dataclass(frozen=True)
class ParsedComponent:
    """
    A (possibly partial) point in time found in text.

    ``certain`` holds the names of the fields that were written explicitly;
    every other field was implied from the reference date or defaulted to 0.
    """
    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    certain: frozenset[str] = field(default_factory=frozenset)

    def is_certain(self, name: str) -> bool:
        return name in self.certain

    def with_year(self, year: int) -> ParsedComponent:
        return replace(self, year=year)

    def to_datetime(self) -> datetime:
        """Build a naive datetime; raises ValueError for impossible dates."""
        return datetime(self.year, self.month, self.day, self.hour, self.minute)


@dataclass(frozen=True)
class CandidateSpan:
    """One date/time expression found in text, optionally a range."""
    index: int
    text: str
    start: ParsedComponent
    end: t.Optional[ParsedComponent] = None


Extractor = t.Callable[[str, datetime], list[CandidateSpan]]


# -----------------------------
# Patterns
# -----------------------------

_MONTH_WORDS = sorted(
    {name.lower() for names in _INFO.MONTHS for name in names},
    key=len,
    reverse=True,
)
_MONTH = r"(?P<month>" + "|".join(_MONTH_WORDS) + r")\b\.?"
_ORDINAL = r"(?:st|nd|rd|th)?"
_YEAR4 = r"(?P<year>(?:19|20)\d{2})\b"
_MERIDIEM = r"[ap]\.?m\b\.?"
_NOT_A_TIME = r"(?!/|\s*(?::|" + _MERIDIEM + r"))"

_ISO_DATE_RE = re.compile(r"\b(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})\b")
_MONTH_DAY_RE = re.compile(
    r"\b" + _MONTH + r"\s*(?P<day>\d{1,2})" + _ORDINAL + r"\b"
    r"(?:\s*[-–—]\s*(?P<day2>\d{1,2})" + _ORDINAL + r"\b" + _NOT_A_TIME + r")?"
    r"(?:,?\s+" + _YEAR4 + r")?",
    re.IGNORECASE,
)
_DAY_MONTH_RE = re.compile(
    r"\b(?P<day>\d{1,2})" + _ORDINAL + r"\s+(?:of\s+)?" + _MONTH + r"(?:,?\s+" + _YEAR4 + r")?",
    re.IGNORECASE,
)
_SLASH_DATE_RE = re.compile(
    r"(?<![\d/])(?P<month>\d{1,2})/(?P<day>\d{1,2})(?:/(?P<year>\d{4}|\d{2}))?(?![\d/])"
)

_TIME_RANGE_RE = re.compile(
    r"(?<![\d:/.])(?P<h1>\d{1,2})(?::(?P<m1>\d{2}))?\s?(?P<ap1>" + _MERIDIEM + r")?"
    r"\s*(?:[-–—]|\bto\b)\s*"
    r"(?P<h2>\d{1,2})(?::(?P<m2>\d{2}))?\s?(?P<ap2>" + _MERIDIEM + r")?(?![\d:])",
    re.IGNORECASE,
)
_TIME_RE = re.compile(
    r"(?<![\d:/.])(?P<h>\d{1,2})(?::(?P<m>\d{2}))?\s?(?P<ap>" + _MERIDIEM + r")?(?![\d:])",
    re.IGNORECASE,
)
_TIME_WORD_RE = re.compile(r"\b(?P<word>noon|midnight)\b", re.IGNORECASE)

# What may sit between two dates of a range, or between a date and its time
_DATE_RANGE_GAP_RE = re.compile(r"^\s*(?:[-–—]|to|through|thru|until)\s*$", re.IGNORECASE)
_JOIN_GAP_RE = re.compile(r"^[\s,.]*(?:(?:at|@|from|by|on)\s*)?$", re.IGNORECASE)


# -----------------------------
# Tokens
# -----------------------------

@dataclass
class _DateToken:
    start: int
    stop: int
    month: int
    day: int
    year: t.Optional[int] = None
    until: t.Optional[_DateToken] = None


@dataclass
class _TimeToken:
    start: int
    stop: int
    hour: int
    minute: int
    minute_certain: bool
    until: t.Optional[_TimeToken] = None


def _overlaps(start: int, stop: int, taken: list[tuple[int, int]]) -> bool:
    return any(start < other_stop and other_start < stop for other_start, other_stop in taken)


def _is_valid_day(year: t.Optional[int], month: int, day: int) -> bool:
    # Without a written year, Feb 29 is allowed; the year is settled later
    try:
        date(2000 if year is None else year, month, day)
    except ValueError:
        return False
    return True


def _month_number(name: str) -> t.Optional[int]:
    return _INFO.month(name.rstrip("."))


def _expand_year(raw: t.Optional[str]) -> t.Optional[int]:
    if not raw:
        return None
    year = int(raw)
    return 2000 + year if len(raw) == 2 else year


def _find_dates(text: str) -> list[_DateToken]:
    tokens: list[_DateToken] = []
    taken: list[tuple[int, int]] = []

    def add(token: _DateToken) -> None:
        tokens.append(token)
        taken.append((token.start, token.stop))

    for match in _ISO_DATE_RE.finditer(text):
        year, month, day = int(match["year"]), int(match["month"]), int(match["day"])
        if _is_valid_day(year, month, day):
            add(_DateToken(match.start(), match.end(), month, day, year))

    # Month-first wins over day-first: "HW 1 Oct 3" is October 3rd
    for pattern in (_MONTH_DAY_RE, _DAY_MONTH_RE):
        for match in pattern.finditer(text):
            if _overlaps(match.start(), match.end(), taken):
                continue
            if pattern is _DAY_MONTH_RE and match["month"] == "may":
                continue  # "HW 3 may be submitted late"
            month = _month_number(match["month"])
            day = int(match["day"])
            year = _expand_year(match["year"])
            if month is None or not _is_valid_day(year, month, day):
                continue
            token = _DateToken(match.start(), match.end(), month, day, year)
            day2 = match.groupdict().get("day2")
            if day2 and _is_valid_day(year, month, int(day2)) and int(day2) >= day:
                token.until = _DateToken(match.start("day2"), match.end("day2"), month, int(day2), year)
            add(token)

    for match in _SLASH_DATE_RE.finditer(text):
        if _overlaps(match.start(), match.end(), taken):
            continue
        month, day = int(match["month"]), int(match["day"])
        year = _expand_year(match["year"])
        if _is_valid_day(year, month, day):
            add(_DateToken(match.start(), match.end(), month, day, year))

    tokens.sort(key=lambda tok: tok.start)
    return _join_date_ranges(text, tokens)


def _join_date_ranges(text: str, tokens: list[_DateToken]) -> list[_DateToken]:
    joined: list[_DateToken] = []
    for token in tokens:
        previous = joined[-1] if joined else None
        if (
            previous is not None
            and previous.until is None
            and _DATE_RANGE_GAP_RE.match(text[previous.stop:token.start])
        ):
            previous.until = token
            previous.stop = token.stop
            continue
        joined.append(token)
    return joined


def _to_24h(hour: int, minute: int, pm: t.Optional[bool]) -> t.Optional[tuple[int, int]]:
    if minute > 59:
        return None
    if pm is None:
        return (hour, minute) if hour <= 23 else None
    if not 1 <= hour <= 12:
        return None
    return hour % 12 + (12 if pm else 0), minute


def _is_pm(meridiem: t.Optional[str]) -> t.Optional[bool]:
    if not meridiem:
        return None
    return _INFO.ampm(meridiem.replace(".", "")) == 1


def _range_clocks(match: re.Match) -> t.Optional[tuple[tuple[int, int], tuple[int, int]]]:
    h1, h2 = int(match["h1"]), int(match["h2"])
    m1, m2 = int(match["m1"] or 0), int(match["m2"] or 0)
    pm1, pm2 = _is_pm(match["ap1"]), _is_pm(match["ap2"])

    if pm1 is None and pm2 is not None:
        # "3-4pm", "11-1pm": borrow the written meridiem, flip it if start > end
        end = _to_24h(h2, m2, pm2)
        begin = _to_24h(h1, m1, pm2)
        if end is not None and (begin is None or begin > end):
            begin = _to_24h(h1, m1, not pm2)
    elif pm2 is None and pm1 is not None:
        begin = _to_24h(h1, m1, pm1)
        end = _to_24h(h2, m2, pm1)
        if begin is not None and (end is None or end < begin):
            end = _to_24h(h2, m2, not pm1)
    else:
        begin = _to_24h(h1, m1, pm1)
        end = _to_24h(h2, m2, pm2)
        if pm1 is None and begin is not None and end is not None and end < begin and end[0] < 12:
            end = (end[0] + 12, end[1])

    if begin is None or end is None:
        return None
    return begin, end


def _find_times(text: str, taken: list[tuple[int, int]]) -> list[_TimeToken]:
    tokens: list[_TimeToken] = []

    for match in _TIME_RANGE_RE.finditer(text):
        if _overlaps(match.start(), match.end(), taken):
            continue
        has_meridiem = bool(match["ap1"] or match["ap2"])
        if not has_meridiem and not (match["m1"] and match["m2"]):
            continue  # "Chapters 3-4"
        clocks = _range_clocks(match)
        if clocks is None:
            continue
        (h1, m1), (h2, m2) = clocks
        token = _TimeToken(match.start(), match.end(), h1, m1, bool(match["m1"]))
        token.until = _TimeToken(match.start("h2"), match.end(), h2, m2, bool(match["m2"]))
        tokens.append(token)
        taken.append((match.start(), match.end()))

    for match in _TIME_RE.finditer(text):
        if _overlaps(match.start(), match.end(), taken):
            continue
        if not (match["m"] or match["ap"]):
            continue  # bare numbers are not times
        clock = _to_24h(int(match["h"]), int(match["m"] or 0), _is_pm(match["ap"]))
        if clock is None:
            continue
        tokens.append(_TimeToken(match.start(), match.end(), clock[0], clock[1], bool(match["m"])))
        taken.append((match.start(), match.end()))

    for match in _TIME_WORD_RE.finditer(text):
        if _overlaps(match.start(), match.end(), taken):
            continue
        hour = 12 if match["word"].lower() == "noon" else 0
        tokens.append(_TimeToken(match.start(), match.end(), hour, 0, True))

    tokens.sort(key=lambda tok: tok.start)
    return tokens


# -----------------------------
# Assembly
# -----------------------------

def _implied_year(month: int, day: int, reference: datetime) -> int:
    """Forward-date: a day already past the reference falls in the next year."""
    try:
        if date(reference.year, month, day) < reference.date():
            return reference.year + 1
    except ValueError:
        pass
    return reference.year


def _date_component(
        token: _DateToken,
        reference: datetime,
        clock: t.Optional[_TimeToken] = None,
        year_hint: t.Optional[int] = None,
) -> ParsedComponent:
    certain = {"month", "day"}
    if token.year is not None:
        year = token.year
        certain.add("year")
    elif year_hint is not None:
        year = year_hint
    else:
        year = _implied_year(token.month, token.day, reference)

    hour = minute = 0
    if clock is not None:
        hour, minute = clock.hour, clock.minute
        certain.add("hour")
        if clock.minute_certain:
            certain.add("minute")

    return ParsedComponent(year, token.month, token.day, hour, minute, frozenset(certain))


def _time_only_component(clock: _TimeToken, reference: datetime) -> ParsedComponent:
    certain = {"hour", "minute"} if clock.minute_certain else {"hour"}
    return ParsedComponent(
        reference.year, reference.month, reference.day, clock.hour, clock.minute, frozenset(certain)
    )


def _inherit_date(base: ParsedComponent, clock: _TimeToken) -> ParsedComponent:
    """Range end on the start's day: date fields keep the start's certainty."""
    certain = {name for name in ("year", "month", "day") if base.is_certain(name)}
    certain.add("hour")
    if clock.minute_certain:
        certain.add("minute")
    return replace(base, hour=clock.hour, minute=clock.minute, certain=frozenset(certain))


def _adjacent_time(
        text: str,
        token: _DateToken,
        times: list[_TimeToken],
        used: set[int],
) -> t.Optional[_TimeToken]:
    for idx, clock in enumerate(times):
        if idx in used or clock.start < token.stop:
            continue
        if _JOIN_GAP_RE.match(text[token.stop:clock.start]):
            used.add(idx)
            return clock
        break
    for idx in reversed(range(len(times))):
        clock = times[idx]
        if idx in used or clock.stop > token.start:
            continue
        if _JOIN_GAP_RE.match(text[clock.stop:token.start]):
            used.add(idx)
            return clock
        break
    return None


def extract_spans(text: str, reference: datetime) -> list[CandidateSpan]:
    """
    Find date/time expressions in ``text``.

    :param text: One line of syllabus text.
    :param reference: Anchor for implied fields (year, and the day of time-only spans).
    :return: Candidate spans ordered by position in the text.
    """
    dates = _find_dates(text)
    taken = [(token.start, token.stop) for token in dates]
    for token in dates:
        if token.until is not None:
            taken.append((token.until.start, token.until.stop))
    times = _find_times(text, taken)

    spans: list[CandidateSpan] = []
    used: set[int] = set()

    for token in dates:
        clock = _adjacent_time(text, token, times, used)
        start = _date_component(token, reference, clock)

        end: t.Optional[ParsedComponent] = None
        if token.until is not None:
            end_year = None
            if token.until.year is None:
                # "Dec 30 - Jan 2" ends in the following year
                wraps = (token.until.month, token.until.day) < (token.month, token.day)
                end_year = start.year + 1 if wraps else start.year
            end = _date_component(
                token.until, reference, clock.until if clock else None, year_hint=end_year
            )
            if start.is_certain("year") and token.until.year is None:
                end = replace(end, certain=end.certain | {"year"})
        elif clock is not None and clock.until is not None:
            end = _inherit_date(start, clock.until)

        begin = min(token.start, clock.start) if clock else token.start
        stop = max(token.stop, clock.stop) if clock else token.stop
        spans.append(CandidateSpan(begin, text[begin:stop], start, end))

    for idx, clock in enumerate(times):
        if idx in used:
            continue
        start = _time_only_component(clock, reference)
        end = _inherit_date(start, clock.until) if clock.until is not None else None
        spans.append(CandidateSpan(clock.start, text[clock.start:clock.stop], start, end))

    spans.sort(key=lambda span: span.index)
    return spans
