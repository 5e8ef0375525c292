"""
Lexical line filtering and title extraction for pasted syllabus text.

The filter is a cheap precision guard that runs before date extraction, and
the title extractor turns "<date/time noise> Title" lines into clean titles.
"""
from __future__ import annotations

import re


# Words that often indicate "this is an event" when a number is nearby
HINT_WORDS = (
    "assignment",
    "project",
    "paper",
    "hw",
    "reading",
    "presentation",
    "lab",
    "report",
)

_MONTH_PREFIX = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)"

_SLASH_DATE_RE = re.compile(r"\b\d{1,2}/\d{1,2}\b")
_MONTH_DAY_RE = re.compile(_MONTH_PREFIX + r"\w*\s+\d{1,2}", re.IGNORECASE)
_DEADLINE_RE = re.compile(r"\b(?:due|deadline)\b", re.IGNORECASE)
_EXAM_RE = re.compile(r"\b(?:exam|quiz|midterm|final)\b", re.IGNORECASE)
_ANY_NUMBER_RE = re.compile(r"\b\d+\b")

# en dash, em dash or hyphen with whitespace on both sides
_SPACED_DASH_RE = re.compile(r"\s[–—-]\s")

# Leading tokens stripped by extract_title, applied in this order
_LEADING_TOKEN_RES = (
    re.compile(r"^\s*\b(?:mon|tue|tues|wed|thu|thur|thurs|fri|sat|sun)\b\.?,?\s+", re.IGNORECASE),
    re.compile(r"^" + _MONTH_PREFIX + r"[a-z]*\s+\d{1,2}\s*", re.IGNORECASE),
    re.compile(r"^\d{1,2}/\d{1,2}\s*"),
    re.compile(r"^\d{1,2}(?::\d{2})?\s?(?:am|pm)?\s*[–-]\s*\d{1,2}(?::\d{2})?\s?(?:am|pm)?\s*", re.IGNORECASE),
    re.compile(r"^\d{1,2}(?::\d{2})?\s?(?:am|pm)\s*", re.IGNORECASE),
)


def is_deadline_line(line: str) -> bool:
    """True when the line announces a due moment ("due" / "deadline")."""
    return bool(_DEADLINE_RE.search(line))


def is_event_line(line: str) -> bool:
    """
    Keep only lines that look like they contain a real date or a strong event cue.

    :param line: A single trimmed syllabus line.
    :return: True if the line should go through date extraction.
    """
    lowered = line.lower()
    if _SLASH_DATE_RE.search(lowered) or _MONTH_DAY_RE.search(lowered):
        return True
    if is_deadline_line(lowered) or _EXAM_RE.search(lowered):
        return True
    # "the final project" alone is prose; "Project 2" is an event
    has_hint = any(word in lowered for word in HINT_WORDS)
    return has_hint and bool(_ANY_NUMBER_RE.search(lowered))


def extract_title(line: str) -> str:
    """
    Derive a human title from a syllabus line without eating "10:00"-style colons.

    A spaced dash always wins: everything after the first one is the title,
    even when the dash is part of the title itself ("Essay - Part 2").
    Otherwise leading weekday/date/time tokens are stripped from the start.

    :param line: The original syllabus line.
    :return: A non-empty title (the trimmed line if nothing is left).
    """
    pieces = _SPACED_DASH_RE.split(line)
    if len(pieces) > 1:
        return " - ".join(pieces[1:]).strip()

    remainder = line
    for pattern in _LEADING_TOKEN_RES:
        remainder = pattern.sub("", remainder, count=1)

    return remainder.strip() or line.strip()
