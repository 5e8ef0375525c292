from __future__ import annotations

import typing as t

from fastmcp import FastMCP

from .pdf_utils import load_syllabus_text
from .resolver import parse_syllabus_text as _resolve_text
from .settings import DEFAULT_DEADLINE_TIME, DEFAULT_DURATION_MINUTES


mcp = FastMCP("SyllabusServer")


def _parse_syllabus_text(
        text: str,
        fallback_year: t.Optional[int] = None,
        default_duration_minutes: float = DEFAULT_DURATION_MINUTES,
        default_time: str = DEFAULT_DEADLINE_TIME,
) -> list[dict[str, t.Any]]:
    events = _resolve_text(
        text,
        fallback_year=fallback_year,
        default_duration_minutes=default_duration_minutes,
        default_time=default_time,
    )
    return [event.to_dict() for event in events]


def _parse_syllabus_file(
        path_or_url: str,
        fallback_year: t.Optional[int] = None,
        default_duration_minutes: float = DEFAULT_DURATION_MINUTES,
        default_time: str = DEFAULT_DEADLINE_TIME,
) -> list[dict[str, t.Any]]:
    text = load_syllabus_text(path_or_url)
    return _parse_syllabus_text(text, fallback_year, default_duration_minutes, default_time)


# -----------------------------
# MCP Tool Implementation
# -----------------------------

@mcp.tool()
def parse_syllabus_text(
        text: str,
        fallback_year: t.Optional[int] = None,
        default_duration_minutes: float = DEFAULT_DURATION_MINUTES,
        default_time: str = DEFAULT_DEADLINE_TIME,
) -> list[dict[str, t.Any]]:
    """Turn pasted syllabus text into calendar events.

    Lines without a month and day are skipped. Dates without a year get
    ``fallback_year`` (current year when omitted).

    :param text: Syllabus text, one event per line.
    :param fallback_year: Year for dates that do not spell one out.
    :param default_duration_minutes: Length of timed events without an end.
    :param default_time: "HH:MM" due time for deadlines that name no time ("" disables).
    :return: Events with title, ISO start/end, allDay and sourceLine.
    """
    return _parse_syllabus_text(text, fallback_year, default_duration_minutes, default_time)


@mcp.tool()
def parse_syllabus_file(
        path_or_url: str,
        fallback_year: t.Optional[int] = None,
        default_duration_minutes: float = DEFAULT_DURATION_MINUTES,
        default_time: str = DEFAULT_DEADLINE_TIME,
) -> list[dict[str, t.Any]]:
    """Read a syllabus from a .txt/.pdf file or URL and turn it into calendar events.

    :param path_or_url: Local path or http(s) URL of the syllabus.
    :return: Events with title, ISO start/end, allDay and sourceLine.
    """
    return _parse_syllabus_file(path_or_url, fallback_year, default_duration_minutes, default_time)


if __name__ == "__main__":
    # Run as an MCP server over stdio
    mcp.run()
