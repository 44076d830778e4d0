from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from cli.config import load_config
from cli.render import render_outcome, render_match, render_series, render_summary
from logging_config import configure_logging
from models.readings import ReadingSeries
from services.discovery import discover_photos
from services.exiftool import ExifTool, parse_capture_timestamp
from services.log_parser import MeasurementLogError, load_log
from services.matcher import find_match
from services.tagger import PhotoTagger
from settings import get_settings

app = typer.Typer(
    help="Tag photos with the temperature, humidity and pressure recorded closest to their capture time.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _load_series(log_path: Path) -> ReadingSeries:
    try:
        return load_log(log_path)
    except MeasurementLogError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _parse_target(value: str) -> datetime:
    try:
        return parse_capture_timestamp(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError as exc:
        raise typer.BadParameter(
            f"{value!r} is not a YYYY:MM:DD HH:MM:SS or ISO timestamp."
        ) from exc


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to WEATHERTAG_LOG_LEVEL env or WARNING).",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging(log_level)


@app.command("tag")
def tag_command(
    directory: Path = typer.Argument(
        Path("."),
        exists=True,
        file_okay=False,
        dir_okay=True,
        help="Directory containing the photos.",
    ),
    log_path: Optional[Path] = typer.Option(
        None,
        "--log",
        "-l",
        dir_okay=False,
        help="Weather history CSV (defaults to weatherhistory.csv inside DIRECTORY).",
    ),
    threshold: Optional[float] = typer.Option(
        None,
        "--threshold",
        "-t",
        min=0,
        help="Maximum minutes between capture time and reading (default 30).",
    ),
    write: Optional[bool] = typer.Option(
        None,
        "--write/--preview",
        help="Write matched values into the photos instead of only previewing.",
    ),
    exiftool_path: Optional[str] = typer.Option(
        None,
        "--exiftool",
        help="ExifTool executable (defaults to WEATHERTAG_EXIFTOOL env or exiftool).",
    ),
) -> None:
    """Match photos in DIRECTORY against the weather log."""
    config = load_config(
        directory=directory,
        log_path=log_path,
        threshold_minutes=threshold,
        write_metadata=write,
        exiftool_path=exiftool_path,
    )

    exiftool = ExifTool(executable=config.exiftool_path, timeout=config.exiftool_timeout)
    version = exiftool.version()
    if version is None:
        typer.secho(
            "ExifTool not found! WeatherTag needs ExifTool in order to work properly.",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)
    typer.echo(f"ExifTool version {version}")

    series = _load_series(config.log_path)

    photos = discover_photos(config.directory)
    if not photos:
        typer.echo("No supported image files found.")
        return

    typer.echo(
        f"Matching {len(photos)} photo(s) against {len(series)} reading(s) "
        f"(threshold={config.threshold_minutes:g} min)..."
    )
    tagger = PhotoTagger(
        reader=exiftool,
        writer=exiftool,
        threshold_minutes=config.threshold_minutes,
        write_metadata=config.write_metadata,
    )
    summary = tagger.tag_photos(photos, series, on_outcome=render_outcome)
    render_summary(summary, write_metadata=config.write_metadata)


@app.command("readings")
def readings_command(
    log_path: Path = typer.Argument(..., dir_okay=False, help="Weather history CSV."),
) -> None:
    """Parse a weather log and describe the readings it yields."""
    series = _load_series(log_path)
    render_series(series)


@app.command("match")
def match_command(
    log_path: Path = typer.Argument(..., dir_okay=False, help="Weather history CSV."),
    timestamp: str = typer.Argument(..., help="Capture time as YYYY:MM:DD HH:MM:SS."),
    threshold: Optional[float] = typer.Option(
        None,
        "--threshold",
        "-t",
        min=0,
        help="Maximum minutes between the timestamp and a reading (default 30).",
    ),
) -> None:
    """Match a single timestamp against a weather log."""
    target = _parse_target(timestamp)
    series = _load_series(log_path)
    threshold_minutes = threshold if threshold is not None else get_settings().threshold_minutes
    render_match(target.isoformat(sep=" "), find_match(target, series, threshold_minutes))
