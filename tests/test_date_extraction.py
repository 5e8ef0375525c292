"""Conformance tests for the date/time extraction capability.

The resolver relies on the certainty flags, so these tests pin down which
fields count as written in the text and which are implied.
"""
from datetime import datetime

import pytest

from syllabus_server.date_extraction import ParsedComponent, extract_spans


REFERENCE = datetime(2025, 8, 1)


def only_span(text: str):
    spans = extract_spans(text, REFERENCE)
    assert len(spans) == 1, spans
    return spans[0]


def test_month_name_with_time_range() -> None:
    """'Sep 19 3–4pm' is one span: pm is borrowed by the range start."""
    span = only_span("Sep 19 3–4pm — Quiz 1")

    assert span.start.to_datetime() == datetime(2025, 9, 19, 15, 0)
    assert span.end is not None
    assert span.end.to_datetime() == datetime(2025, 9, 19, 16, 0)
    assert span.start.is_certain("month") and span.start.is_certain("day")
    assert span.start.is_certain("hour")
    assert not span.start.is_certain("year")
    assert not span.start.is_certain("minute")


def test_range_with_trailing_meridiem_and_weekday() -> None:
    """'Mon Oct 6 1:30-3:00 pm' resolves both ends to the afternoon."""
    span = only_span("Mon Oct 6 1:30-3:00 pm Midterm")

    assert span.start.to_datetime() == datetime(2025, 10, 6, 13, 30)
    assert span.end.to_datetime() == datetime(2025, 10, 6, 15, 0)
    assert span.start.is_certain("minute")


def test_range_crossing_noon() -> None:
    """'11-1pm' starts in the morning."""
    span = only_span("Oct 6 11-1pm Lab")

    assert span.start.to_datetime() == datetime(2025, 10, 6, 11, 0)
    assert span.end.to_datetime() == datetime(2025, 10, 6, 13, 0)


def test_slash_date_with_time() -> None:
    """US-order slash dates merge with an adjacent clock time."""
    span = only_span("10/02 11:59pm HW 1 due")

    assert span.start.to_datetime() == datetime(2025, 10, 2, 23, 59)
    assert span.end is None
    assert span.start.is_certain("hour") and span.start.is_certain("minute")


def test_24_hour_time() -> None:
    """The appended default deadline time is read as a 24h clock."""
    span = only_span("HW2 due 10/9 23:59")

    assert span.start.to_datetime() == datetime(2025, 10, 9, 23, 59)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Oct 3 at noon Demo", datetime(2025, 10, 3, 12, 0)),
        ("Oct 3 at 5 p.m. Demo", datetime(2025, 10, 3, 17, 0)),
        ("11:59pm on 10/02 Essay", datetime(2025, 10, 2, 23, 59)),
        ("October 3rd, 9am Seminar", datetime(2025, 10, 3, 9, 0)),
    ],
)
def test_time_joins_adjacent_date(text: str, expected: datetime) -> None:
    """Times separated from the date only by connector words belong to it."""
    assert only_span(text).start.to_datetime() == expected


def test_explicit_year_is_certain() -> None:
    """A written year is kept and flagged certain."""
    span = only_span("Oct 6, 2026 Midterm")

    assert span.start.year == 2026
    assert span.start.is_certain("year")
    assert not span.start.is_certain("hour")


def test_two_digit_year() -> None:
    span = only_span("10/02/25 Paper")

    assert span.start.year == 2025
    assert span.start.is_certain("year")


def test_implied_year_is_forward_dated_but_uncertain() -> None:
    """Dates before the reference roll into the next year and stay uncertain."""
    span = only_span("Mar 3 Quiz 2")

    assert span.start.year == 2026
    assert not span.start.is_certain("year")


def test_day_first_dates() -> None:
    span = only_span("Essay due 3 November")

    assert (span.start.month, span.start.day) == (11, 3)


def test_month_first_beats_day_first() -> None:
    """'HW 1 Oct 3' is October 3rd, not October 1st."""
    span = only_span("HW 1 Oct 3")

    assert (span.start.month, span.start.day) == (10, 3)


def test_time_without_date_has_uncertain_day() -> None:
    """A bare clock time is a span, but month and day are not certain."""
    span = only_span("Quiz at 2pm")

    assert span.start.is_certain("hour")
    assert not span.start.is_certain("month")
    assert not span.start.is_certain("day")


@pytest.mark.parametrize(
    "text",
    [
        "random sentence with no date",
        "Chapters 3-4 reading",
        "HW 3 may be submitted late",
        "2/30 Quiz",
    ],
)
def test_nothing_is_found(text: str) -> None:
    """Plain numbers, 'may' as a verb and impossible dates yield no spans."""
    assert extract_spans(text, REFERENCE) == []


def test_date_ranges() -> None:
    """Both 'Oct 6 - Oct 8' and 'Oct 6-8' are ranges without a time of day."""
    for text in ("Oct 6 - Oct 8 Reading week", "Oct 6-8 Fall break"):
        span = only_span(text)
        assert span.start.to_datetime() == datetime(2025, 10, 6)
        assert span.end.to_datetime() == datetime(2025, 10, 8)
        assert not span.start.is_certain("hour")


def test_leap_day_is_reported_without_a_year() -> None:
    """Feb 29 is found; whether it exists depends on the year chosen later."""
    span = only_span("Feb 29 Quiz")

    with pytest.raises(ValueError):
        span.start.to_datetime()
    assert span.start.with_year(2028).to_datetime() == datetime(2028, 2, 29)


def test_spans_are_ordered_by_position() -> None:
    spans = extract_spans("Oct 6 Midterm, review on 10/1", REFERENCE)

    assert [(s.start.month, s.start.day) for s in spans] == [(10, 6), (10, 1)]
    assert spans[0].index < spans[1].index


def test_parsed_component_helpers() -> None:
    component = ParsedComponent(2025, 10, 6, 9, 30, frozenset({"month", "day"}))

    assert component.is_certain("day")
    assert not component.is_certain("hour")
    assert component.with_year(2030).to_datetime() == datetime(2030, 10, 6, 9, 30)


def test_date_range_wrapping_into_next_year() -> None:
    """A range end before its start belongs to the following year."""
    span = only_span("Dec 30 - Jan 2 Winter break")
    assert span.start.to_datetime() == datetime(2025, 12, 30)
    assert span.end.to_datetime() == datetime(2026, 1, 2)

    span = only_span("Dec 30, 2025 - Jan 2 Winter break")
    assert span.end.to_datetime() == datetime(2026, 1, 2)
    assert span.end.is_certain("year")
