# -*- coding: utf-8 -*-
from fastmcp import FastMCP

from services.shared.models import IcsEvent
from syllabus_server.settings import DEFAULT_CALENDAR_NAME

from .ics import make_ics

mcp = FastMCP("CalendarServer")


def _export_calendar(
        events: list[IcsEvent],
        calendar_name: str = DEFAULT_CALENDAR_NAME
) -> str:
    return make_ics([event.to_entry() for event in events], calendar_name or DEFAULT_CALENDAR_NAME)


@mcp.tool()
def export_calendar(
        events: list[IcsEvent],
        calendar_name: str = DEFAULT_CALENDAR_NAME
) -> str:
    """Builds an iCalendar (.ics) document from events.

    :param events: Events as returned by parse_syllabus_text (title, start, end, allDay, sourceLine).
    :param calendar_name: Display name of the calendar.
    :return: The .ics file contents.
    """
    return _export_calendar(events, calendar_name)


if __name__ == "__main__":
    mcp.run()
