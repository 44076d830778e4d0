from __future__ import annotations

from typing import Any, Iterable

import typer

from models.readings import MatchResult, MatchStatus, ReadingSeries, format_value
from services.tagger import PhotoOutcome, TaggingSummary

_STATUS_COLORS = {
    MatchStatus.matched: typer.colors.GREEN,
    MatchStatus.no_target_timestamp: typer.colors.YELLOW,
    MatchStatus.no_reading_within_threshold: typer.colors.YELLOW,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def format_match_line(label: str, result: MatchResult) -> str:
    reading = result.nearest_reading
    temperature = format_value(reading.temperature if reading else None)
    humidity = format_value(reading.humidity if reading else None)
    pressure = format_value(reading.pressure if reading else None)
    line = (
        f"{label} | {result.status.value} | "
        f"Temp={temperature} °C, Hum={humidity} %, Press={pressure} hPa"
    )
    if result.nearest_reading is not None:
        line += f" | delta={format_value(round(result.delta_minutes, 1))} min"
    return line


def render_match(label: str, result: MatchResult) -> None:
    typer.secho(format_match_line(label, result), fg=_STATUS_COLORS[result.status])


def render_outcome(outcome: PhotoOutcome) -> None:
    render_match(outcome.path.name, outcome.result)
    if outcome.written:
        typer.echo("  tags written")
    elif outcome.write_error is not None:
        typer.secho(f"  write skipped: {outcome.write_error}", fg=typer.colors.RED)


def render_series(series: ReadingSeries) -> None:
    echo_heading("Measurement Log")
    first = series.first
    last = series.last
    echo_key_values(
        [
            ("readings", len(series)),
            ("first", first.timestamp.isoformat(sep=" ") if first else "--"),
            ("last", last.timestamp.isoformat(sep=" ") if last else "--"),
        ]
    )


def render_summary(summary: TaggingSummary, write_metadata: bool) -> None:
    typer.echo()
    echo_heading("Summary")
    pairs = [
        ("photos", summary.total),
        ("matched", summary.matched),
        ("no_target_timestamp", summary.no_target_timestamp),
        ("no_reading_within_threshold", summary.no_reading_within_threshold),
    ]
    if write_metadata:
        pairs.extend([("written", summary.written), ("write_failed", summary.write_failed)])
    else:
        pairs.append(("mode", "preview (use --write to tag photos)"))
    echo_key_values(pairs)
