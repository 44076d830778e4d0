"""Batch orchestration: match every photo and optionally write its tags."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Optional

from models.readings import MatchResult, MatchStatus, ReadingSeries
from services.exiftool import MetadataError, MetadataWriter, TimestampReader
from services.matcher import find_match

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhotoOutcome:
    """What happened to a single photo during a run."""

    path: Path
    captured_at: Optional[datetime]
    result: MatchResult
    written: bool = False
    write_error: Optional[str] = None


@dataclass
class TaggingSummary:
    total: int = 0
    matched: int = 0
    no_target_timestamp: int = 0
    no_reading_within_threshold: int = 0
    written: int = 0
    write_failed: int = 0

    def record(self, outcome: PhotoOutcome) -> None:
        self.total += 1
        status = outcome.result.status
        if status is MatchStatus.matched:
            self.matched += 1
        elif status is MatchStatus.no_target_timestamp:
            self.no_target_timestamp += 1
        else:
            self.no_reading_within_threshold += 1

        if outcome.written:
            self.written += 1
        if outcome.write_error is not None:
            self.write_failed += 1


class PhotoTagger:
    """Matches photos against a reading series and tags the matched ones."""

    def __init__(
        self,
        reader: TimestampReader,
        writer: MetadataWriter,
        threshold_minutes: float = 30.0,
        write_metadata: bool = False,
    ) -> None:
        self.reader = reader
        self.writer = writer
        self.threshold_minutes = threshold_minutes
        self.write_metadata = write_metadata

    def tag_photo(self, path: Path, series: ReadingSeries) -> PhotoOutcome:
        captured_at = self._read_timestamp(path)
        result = find_match(captured_at, series, self.threshold_minutes)
        logger.debug(
            "Matched photo",
            extra={
                "photo": path.name,
                "status": result.status.value,
                "delta_minutes": result.delta_minutes,
            },
        )

        if not (self.write_metadata and result.matched and result.nearest_reading is not None):
            return PhotoOutcome(path=path, captured_at=captured_at, result=result)

        try:
            self.writer.write_reading(path, result.nearest_reading)
        except MetadataError as exc:
            logger.warning(
                "Skipping metadata write",
                extra={"photo": path.name, "reason": str(exc)},
            )
            return PhotoOutcome(
                path=path,
                captured_at=captured_at,
                result=result,
                write_error=str(exc),
            )
        return PhotoOutcome(path=path, captured_at=captured_at, result=result, written=True)

    def tag_photos(
        self,
        paths: Iterable[Path],
        series: ReadingSeries,
        on_outcome: Optional[Callable[[PhotoOutcome], None]] = None,
    ) -> TaggingSummary:
        """Process photos one after another and tally their outcomes."""
        summary = TaggingSummary()
        for path in paths:
            outcome = self.tag_photo(path, series)
            summary.record(outcome)
            if on_outcome is not None:
                on_outcome(outcome)
        return summary

    def _read_timestamp(self, path: Path) -> Optional[datetime]:
        try:
            return self.reader.read_timestamp(path)
        except MetadataError as exc:
            logger.warning(
                "No capture timestamp",
                extra={"photo": path.name, "reason": str(exc)},
            )
            return None
