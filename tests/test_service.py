"""Tests for the syllabus calendar REST service."""
import pytest
from httpx import ASGITransport, AsyncClient

from services.syllabus_service.app import app


SYLLABUS = "\n".join([
    "Sep 19 3–4pm — Quiz 1",
    "10/02 11:59pm HW 1 due",
    "random sentence with no date",
    "Oct 6 Midterm",
])

EVENTS = [
    {"title": "Quiz 1", "start": "2025-09-19T15:00:00", "end": "2025-09-19T16:00:00"},
    {"title": "Midterm", "start": "2025-10-06T00:00:00", "allDay": True, "sourceLine": "Oct 6 Midterm"},
]


def client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_health() -> None:
    async with client() as http:
        response = await http.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "syllabus-calendar-service"}


@pytest.mark.asyncio
async def test_parse_returns_events() -> None:
    async with client() as http:
        response = await http.post("/parse", json={"text": SYLLABUS, "fallbackYear": 2025})

    assert response.status_code == 200
    events = response.json()
    assert [event["title"] for event in events] == ["Quiz 1", "HW 1 due", "Midterm"]
    assert events[0]["end"] == "2025-09-19T16:00:00"
    # Deadlines and all-day events carry no end at all
    assert "end" not in events[1]
    assert events[2]["allDay"] is True


@pytest.mark.asyncio
async def test_parse_applies_options() -> None:
    payload = {
        "text": "Oct 6 2pm Lab 3\nHW2 due 10/9",
        "fallbackYear": "2024",
        "defaultDurationMinutes": 30,
        "defaultTime": "17:00",
    }
    async with client() as http:
        events = (await http.post("/parse", json=payload)).json()

    assert events[0]["start"] == "2024-10-06T14:00:00"
    assert events[0]["end"] == "2024-10-06T14:30:00"
    assert events[1]["start"] == "2024-10-09T17:00:00"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        b"not json",
        b"[1, 2, 3]",
        b'{"text": 42}',
        b'{"text": ""}',
        b"{}",
    ],
)
async def test_parse_never_fails(body: bytes) -> None:
    async with client() as http:
        response = await http.post("/parse", content=body, headers={"content-type": "application/json"})

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_ics_from_event_list() -> None:
    async with client() as http:
        response = await http.post("/ics", json=EVENTS)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/calendar")
    assert response.headers["content-disposition"] == 'attachment; filename="Syllabus.ics"'
    assert response.headers["cache-control"] == "no-store"
    assert "SUMMARY:Quiz 1" in response.text
    assert "DTSTART;VALUE=DATE:20251006" in response.text
    assert "DESCRIPTION:From syllabus: Oct 6 Midterm" in response.text


@pytest.mark.asyncio
async def test_ics_calendar_name_from_body_and_query() -> None:
    async with client() as http:
        from_body = await http.post("/ics", json={"events": EVENTS, "calendarName": "CS 101"})
        from_query = await http.post(
            "/ics", params={"calendar": "Fall/Term"}, json={"events": EVENTS, "calendarName": "CS 101"}
        )

    assert "X-WR-CALNAME:CS 101" in from_body.text
    assert from_body.headers["content-disposition"] == 'attachment; filename="CS 101.ics"'
    assert "X-WR-CALNAME:Fall/Term" in from_query.text
    assert from_query.headers["content-disposition"] == 'attachment; filename="Fall_Term.ics"'


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [[], {"events": []}, {"calendarName": "x"}, "Oct 6"])
async def test_ics_without_events_is_rejected(payload) -> None:
    async with client() as http:
        response = await http.post("/ics", json=payload)

    assert response.status_code == 400
    assert response.json() == {"detail": "No events provided"}


@pytest.mark.asyncio
async def test_ics_with_unusable_event_fails() -> None:
    async with client() as http:
        response = await http.post("/ics", json=[{"title": "Quiz", "start": "someday"}])

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to build ICS"}


@pytest.mark.asyncio
async def test_ics_empty_calendar_query_wins() -> None:
    async with client() as http:
        response = await http.post(
            "/ics", params={"calendar": ""}, json={"events": EVENTS, "calendarName": "CS 101"}
        )

    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="calendar.ics"'
    assert "X-WR-CALNAME:CS 101" not in response.text
