"""
FastAPI service for syllabus-to-calendar operations.

This service exposes the syllabus event resolver and the iCalendar export as
REST API endpoints. Both are fast, pure operations with no external calls.
"""
from __future__ import annotations

import typing as t
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Response
from rich.console import Console
from rich.markup import escape

from calendar_server.ics import make_ics, sanitize_filename
from services.shared.models import IcsEvent, IcsRequest, ParsedEventOut, ParseTextRequest
from syllabus_server.resolver import parse_syllabus_text
from syllabus_server.settings import DEFAULT_CALENDAR_NAME, SERVICE_HOST, SERVICE_PORT


error_console = Console(stderr=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """No resources to set up; the resolver is pure computation."""
    print("📅 Syllabus Calendar Service starting")
    yield
    print("📅 Syllabus Calendar Service shutting down")


app = FastAPI(
    title="Syllabus Calendar Service",
    description="REST API turning pasted syllabus text into calendar events and .ics files",
    version="1.0.0",
    lifespan=lifespan,
)


async def _read_json(request: Request) -> t.Any:
    try:
        return await request.json()
    except ValueError:
        return None


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "service": "syllabus-calendar-service"}


@app.post("/parse", response_model=list[ParsedEventOut], response_model_exclude_none=True)
async def parse_text(request: Request) -> list[ParsedEventOut]:
    """
    Parse pasted syllabus text into events.

    Always answers 200 with a JSON array so clients can treat the result
    uniformly; malformed bodies and unparseable text yield [].
    """
    raw = await _read_json(request)
    payload = ParseTextRequest.model_validate(raw if isinstance(raw, dict) else {})

    events = parse_syllabus_text(
        payload.text,
        fallback_year=payload.fallbackYear,
        default_duration_minutes=payload.defaultDurationMinutes,
        default_time=payload.defaultTime,
    )
    return [ParsedEventOut(**event.to_dict()) for event in events]


@app.post("/ics")
async def build_ics(request: Request, calendar: t.Optional[str] = None) -> Response:
    """
    Build an .ics download from events.

    Accepts either a bare JSON array of events or
    {"events": [...], "calendarName": "..."}; ?calendar= overrides the name.
    """
    raw = await _read_json(request)
    if isinstance(raw, list):
        items, body_name = raw, None
    elif isinstance(raw, dict) and isinstance(raw.get("events"), list):
        items, body_name = raw["events"], raw.get("calendarName")
    else:
        items, body_name = [], None

    if not items:
        raise HTTPException(status_code=400, detail="No events provided")

    # An explicit ?calendar= wins even when empty
    calendar_name = calendar if calendar is not None else (body_name or DEFAULT_CALENDAR_NAME)

    try:
        body = IcsRequest(events=[IcsEvent.model_validate(item) for item in items],
                          calendarName=calendar_name)
        ics_text = make_ics([event.to_entry() for event in body.events], body.calendarName)
    except Exception as e:
        error_console.print(f"[red]Error:[/red] ICS build failed: {escape(str(e))}")
        raise HTTPException(status_code=500, detail="Failed to build ICS")

    return Response(
        content=ics_text,
        media_type="text/calendar; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{sanitize_filename(calendar_name)}.ics"',
            "Cache-Control": "no-store",
        },
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=SERVICE_HOST, port=SERVICE_PORT)
