"""Tolerant parsing of the weather history log."""

from __future__ import annotations

import csv
import logging
import re
from datetime import datetime
from itertools import product
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

from models.readings import Reading, ReadingSeries

logger = logging.getLogger(__name__)

MIN_FIELD_COUNT = 5

TEMPERATURE_RANGE = (-100.0, 150.0)
HUMIDITY_RANGE = (0.0, 100.0)
PRESSURE_RANGE = (800.0, 1100.0)

_DATE_FORMATS = (
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%m/%d/%y",
    "%Y-%m-%d",
    "%Y/%m/%d",
)
_TIME_FORMATS = (
    "%I:%M %p",
    "%I:%M:%S %p",
    "%I:%M%p",
    "%H:%M",
    "%H:%M:%S",
)
_TIMESTAMP_FORMATS = tuple(
    f"{date_format} {time_format}"
    for date_format, time_format in product(_DATE_FORMATS, _TIME_FORMATS)
)

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


class MeasurementLogError(Exception):
    """Raised when the measurement log itself cannot be opened or read."""


def parse_timestamp(date_field: str, time_field: str) -> Optional[datetime]:
    """Combine a date and a time column into a naive datetime.

    Returns ``None`` when no supported format matches.
    """
    date_part = date_field.strip()
    time_part = " ".join(time_field.split())
    if not date_part or not time_part:
        return None

    candidate = f"{date_part} {time_part}"
    for timestamp_format in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(candidate, timestamp_format)
        except ValueError:
            continue
    return None


def parse_measurement(raw: Optional[str], minimum: float, maximum: float) -> Optional[float]:
    """Extract a number from a decorated field such as ``"1,012.02 hPa"``.

    Everything except digits, ``.`` and ``-`` is discarded before parsing.
    Unparseable and out-of-range values come back as ``None``.
    """
    if raw is None:
        return None

    cleaned = _NON_NUMERIC.sub("", raw)
    if not cleaned:
        return None

    try:
        value = float(cleaned)
    except ValueError:
        return None

    if value < minimum or value > maximum:
        return None
    return value


def parse_log(rows: Iterable[Sequence[str]]) -> ReadingSeries:
    """Build a sorted ReadingSeries from raw delimited rows.

    Malformed rows are dropped. A first row whose timestamp does not parse is
    treated as a header.
    """
    readings: List[Reading] = []

    for row_number, row in enumerate(rows, start=1):
        if len(row) < MIN_FIELD_COUNT:
            logger.debug(
                "Skipping row",
                extra={"row_number": row_number, "reason": "too few fields"},
            )
            continue

        timestamp = parse_timestamp(row[0], row[1])
        if timestamp is None:
            if row_number == 1:
                logger.info("Skipping header row", extra={"row_number": row_number})
            else:
                logger.debug(
                    "Skipping row",
                    extra={"row_number": row_number, "reason": "invalid timestamp"},
                )
            continue

        readings.append(
            Reading(
                timestamp=timestamp,
                temperature=parse_measurement(row[2], *TEMPERATURE_RANGE),
                humidity=parse_measurement(row[3], *HUMIDITY_RANGE),
                pressure=parse_measurement(row[4], *PRESSURE_RANGE),
            )
        )

    return ReadingSeries.from_readings(readings)


def read_rows(lines: Iterable[str]) -> Iterator[List[str]]:
    """Yield csv rows, dropping any row the csv module refuses to parse."""
    reader = csv.reader(lines)
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as exc:
            logger.debug(
                "Skipping row",
                extra={"row_number": reader.line_num, "reason": str(exc)},
            )
            continue
        yield row


def load_log(path: Path) -> ReadingSeries:
    """Read and parse a comma-delimited log file.

    Undecodable bytes are replaced rather than rejected.
    """
    try:
        with path.open("r", encoding="utf-8-sig", errors="replace", newline="") as handle:
            series = parse_log(read_rows(handle))
    except FileNotFoundError as exc:
        raise MeasurementLogError(f"{path} not found.") from exc
    except OSError as exc:
        raise MeasurementLogError(f"Unable to read {path}: {exc}") from exc

    logger.info(
        "Loaded measurement log",
        extra={"log_path": str(path), "reading_count": len(series)},
    )
    return series
