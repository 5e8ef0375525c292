"""Tests for the lexical line filter and the title extractor."""
import pytest

from syllabus_server.line_filter import extract_title, is_deadline_line, is_event_line


@pytest.mark.parametrize(
    "line",
    [
        "Sep 19 3–4pm — Quiz 1",
        "10/02 11:59pm HW 1 due",
        "Mon Oct 6 1:30-3:00 pm Midterm",
        "Reading response due",
        "Project deadline announced in class",
        "Final exam in the gym",
        "Project 2 kickoff",
        "Lab 3 report",
        "September 30 guest lecture",
    ],
)
def test_event_lines_are_retained(line: str) -> None:
    """Lines with a date, a deadline word, an exam word or a numbered hint pass."""
    assert is_event_line(line)


@pytest.mark.parametrize(
    "line",
    [
        "random sentence with no date",
        "Work on your project with your team",
        "Lab report formatting guidelines",
        "Office hours are posted online",
        "Attendance is decided weekly",
    ],
)
def test_prose_lines_are_dropped(line: str) -> None:
    """Ordinary prose, including hint words without any number, is filtered out."""
    assert not is_event_line(line)


def test_deadline_words_need_word_boundaries() -> None:
    """'due' and 'deadline' only count as whole words."""
    assert is_deadline_line("HW 1 DUE Friday")
    assert is_deadline_line("Deadline: proposal")
    assert not is_deadline_line("Residue analysis lab")


@pytest.mark.parametrize(
    "line, title",
    [
        ("Sep 19 3–4pm — Quiz 1", "Quiz 1"),
        ("10/02 11:59pm HW 1 due", "HW 1 due"),
        ("Mon Oct 6 1:30-3:00 pm Midterm", "Midterm"),
        ("Tue., Sep 9 Lab 1", "Lab 1"),
        ("11:59pm HW 3 due", "HW 3 due"),
        ("9:00–10:20am Lab", "Lab"),
        ("10/14 Project proposal", "Project proposal"),
    ],
)
def test_leading_date_and_time_tokens_are_stripped(line: str, title: str) -> None:
    """Weekday, date and time tokens at the start of the line never end up in the title."""
    assert extract_title(line) == title


def test_spaced_dash_takes_precedence() -> None:
    """Everything after the first spaced dash is the title, re-joined with ' - '."""
    assert extract_title("Oct 6 - Essay - Part 2") == "Essay - Part 2"
    assert extract_title("Oct 6 – Essay — Part 2") == "Essay - Part 2"
    # Even when the dash belongs to the title itself
    assert extract_title("Essay - Part 2 due Oct 3") == "Part 2 due Oct 3"


def test_unspaced_dashes_do_not_split() -> None:
    """Dashes inside ranges such as '3–4pm' are not separators."""
    assert extract_title("Sep 19 3–4pm Quiz 1") == "Quiz 1"


def test_colons_inside_titles_survive() -> None:
    """No blind colon split: times in the middle of a title are kept."""
    line = "Lecture at 10:00 about Ch. 3: Fourier"
    assert extract_title(line) == line


def test_title_falls_back_to_the_line() -> None:
    """A line made only of date tokens keeps its trimmed text as title."""
    assert extract_title("Oct 6") == "Oct 6"
    assert extract_title("10/9 11:59pm") == "10/9 11:59pm"
