# -*- coding: utf-8 -*-
import json
import os
from pathlib import Path
import typing as t

import click
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from calendar_server.ics import entries_from_events, make_ics
from syllabus_cli.utils import console, error_console, expand_syllabus_paths, read_source
from syllabus_server.models import ResolvedEvent
from syllabus_server.resolver import coerce_fallback_year, dedupe_events, parse_syllabus_text
from syllabus_server.settings import DEFAULT_CALENDAR_NAME, DEFAULT_DEADLINE_TIME, DEFAULT_DURATION_MINUTES


def format_datetime_human(value, all_day: bool = False) -> str:
    """Format a datetime as 'Fri 09/19 15:00' (date only for all-day events)."""
    return value.strftime("%a %m/%d") if all_day else value.strftime("%a %m/%d %H:%M")


def truncate_title(title: str, max_length: int = 45) -> str:
    """Truncate title to max_length characters, adding ellipsis if needed."""
    if len(title) <= max_length:
        return title
    return title[:max_length-3] + "..."


def event_kind(event: ResolvedEvent) -> str:
    if event.all_day:
        return "all-day"
    if event.end is None:
        return "deadline"
    return "timed"


_KIND_ICONS = {"all-day": "🗓", "deadline": "⏰", "timed": "📅"}


def create_events_table(events: list[ResolvedEvent], show_source: bool = False) -> Table:
    """Create a summary table of resolved events."""
    table = Table(title="📅 Resolved Events", show_header=True, header_style="bold magenta")
    table.add_column("", style="cyan", width=3)  # Just emoji
    table.add_column("Title", style="white")
    table.add_column("Date/Time", style="yellow")
    if show_source:
        table.add_column("Source line", style="dim")

    for event in events:
        kind = event_kind(event)
        when = format_datetime_human(event.start, event.all_day)
        if event.end is not None:
            when = f"{when} → {format_datetime_human(event.end)}"
        row = [_KIND_ICONS[kind], truncate_title(event.title), when]
        if show_source:
            row.append(event.source_line)
        table.add_row(*row)

    return table


def create_stats_panel(events: list[ResolvedEvent], sources: int) -> Panel:
    counts = {"timed": 0, "deadline": 0, "all-day": 0}
    for event in events:
        counts[event_kind(event)] += 1

    stats_text = Text()
    stats_text.append("Syllabi read: ", style="white")
    stats_text.append(f"{sources}", style="bold green")
    for label, key in (("Timed events", "timed"), ("Deadlines", "deadline"), ("All-day events", "all-day")):
        stats_text.append(f"\n{label}: ", style="white")
        stats_text.append(f"{counts[key]}", style="bold green")

    return Panel(stats_text, title="📊 Statistics", border_style="green")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("sources", nargs=-1, type=click.Path(allow_dash=True))
@click.option("--year", "-y", type=int, default=None, help="Year for dates without one (default: current year).")
@click.option("--duration", type=float, default=DEFAULT_DURATION_MINUTES, show_default=True,
              help="Minutes given to timed events without an end.")
@click.option("--default-time", default=DEFAULT_DEADLINE_TIME, show_default=True,
              help="HH:MM due time for deadlines that name no time; '' disables it.")
@click.option("--calendar-name", "-n", default=DEFAULT_CALENDAR_NAME, show_default=True,
              help="Display name written into the .ics file.")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None,
              help="Write an .ics file to this path.")
@click.option("--json", "as_json", is_flag=True, help="Print events as JSON instead of a table.")
@click.option("--verbose", "-v", is_flag=True, help="Show the source line of every event.")
def main(
        sources: tuple[str, ...],
        year: t.Optional[int],
        duration: float,
        default_time: str,
        calendar_name: str,
        output: t.Optional[str],
        as_json: bool,
        verbose: bool,
) -> None:
    """Turn syllabus text into calendar events and an optional .ics file.

    SOURCES: .txt/.pdf syllabus files, directories of them, or '-' for stdin.
    """
    if not sources:
        error_console.print("[red]Error:[/red] Provide one or more syllabus files (or '-' for stdin).")
        raise SystemExit(1)

    paths = expand_syllabus_paths(sources)
    fallback_year = coerce_fallback_year(year)

    collected: list[ResolvedEvent] = []
    for source in paths:
        try:
            text = read_source(source)
        except (OSError, UnicodeDecodeError) as e:
            error_console.print(f"[red]Error:[/red] Could not read '{source}': {e}")
            raise SystemExit(1)

        events = parse_syllabus_text(
            text,
            fallback_year=fallback_year,
            default_duration_minutes=duration,
            default_time=default_time,
        )
        if verbose and not as_json:
            name = "stdin" if source == "-" else os.path.basename(source)
            console.print(f"   ✓ {name}: {len(events)} event(s)")
        collected.extend(events)

    events = dedupe_events(collected)

    if as_json:
        click.echo(json.dumps([event.to_dict() for event in events], indent=2, ensure_ascii=False))
    elif events:
        console.print(create_stats_panel(events, len(paths)))
        console.print(create_events_table(events, show_source=verbose))
    else:
        console.print("[yellow]No dated events found.[/yellow]")

    if output:
        ics_text = make_ics(entries_from_events(events), calendar_name)
        Path(output).write_bytes(ics_text.encode("utf-8"))
        if not as_json:
            console.print(f"\n[bold green]✅ Wrote {len(events)} event(s) to {output}[/bold green]")


if __name__ == "__main__":
    main()
