from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from settings import get_settings


@dataclass(frozen=True)
class RunConfig:
    directory: Path
    log_path: Path
    threshold_minutes: float = 30.0
    write_metadata: bool = False
    exiftool_path: str = "exiftool"
    exiftool_timeout: float = 30.0


def load_config(
    directory: Path,
    log_path: Optional[Path] = None,
    threshold_minutes: Optional[float] = None,
    write_metadata: Optional[bool] = None,
    exiftool_path: Optional[str] = None,
) -> RunConfig:
    """Merge explicit command-line options over environment settings."""
    settings = get_settings()
    if threshold_minutes is None:
        threshold_minutes = settings.threshold_minutes
    if write_metadata is None:
        write_metadata = settings.write_metadata
    return RunConfig(
        directory=directory,
        log_path=log_path or directory / settings.log_file_name,
        threshold_minutes=threshold_minutes,
        write_metadata=write_metadata,
        exiftool_path=exiftool_path or settings.exiftool_path,
        exiftool_timeout=settings.exiftool_timeout,
    )
