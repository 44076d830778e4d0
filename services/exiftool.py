"""ExifTool-backed access to photo capture times and weather tags."""

from __future__ import annotations

import logging
import subprocess
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from models.readings import Reading, format_value

logger = logging.getLogger(__name__)

CAPTURE_TIMESTAMP_FORMAT = "%Y:%m:%d %H:%M:%S"


class MetadataError(Exception):
    """Raised when photo metadata cannot be read or written."""


class TimestampReader(Protocol):
    def read_timestamp(self, path: Path) -> datetime:
        ...


class MetadataWriter(Protocol):
    def write_reading(self, path: Path, reading: Reading) -> None:
        ...


class ExifToolRecord(BaseModel):
    """One entry of ``exiftool -json`` output."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    source_file: str = Field(..., alias="SourceFile")
    create_date: Optional[str] = Field(default=None, alias="CreateDate")


_RECORDS_ADAPTER = TypeAdapter(List[ExifToolRecord])


def parse_capture_timestamp(raw: str) -> datetime:
    """Parse the fixed ``YYYY:MM:DD HH:MM:SS`` form emitted by ExifTool."""
    return datetime.strptime(raw.strip(), CAPTURE_TIMESTAMP_FORMAT)


def _file_argument(path: Path) -> str:
    # ExifTool would read a leading dash as an option.
    name = str(path)
    return f"./{name}" if name.startswith("-") else name


class ExifTool:
    """Runs the ``exiftool`` executable as a subprocess."""

    def __init__(self, executable: str = "exiftool", timeout: float = 30.0) -> None:
        self.executable = executable
        self.timeout = timeout

    def version(self) -> Optional[str]:
        """Return the installed ExifTool version, or ``None`` if unavailable."""
        try:
            output = self._run(["-ver"])
        except MetadataError as exc:
            logger.debug("ExifTool unavailable: %s", exc, extra={"exiftool": self.executable})
            return None
        version = output.strip()
        return version or None

    def read_timestamp(self, path: Path) -> datetime:
        output = self._run(
            [
                "-CreateDate",
                "-mwg",
                "-json",
                "-d",
                CAPTURE_TIMESTAMP_FORMAT,
                _file_argument(path),
            ]
        )
        try:
            records = _RECORDS_ADAPTER.validate_json(output)
        except ValidationError as exc:
            raise MetadataError(f"Unexpected ExifTool output for {path.name}.") from exc

        if not records or not records[0].create_date:
            raise MetadataError(f"{path.name} has no capture date.")

        raw = records[0].create_date
        try:
            return parse_capture_timestamp(raw)
        except ValueError as exc:
            raise MetadataError(f"Invalid capture date {raw!r} in {path.name}.") from exc

    def write_reading(self, path: Path, reading: Reading) -> None:
        fields = reading.present_fields()
        if not fields:
            return

        arguments = [f"-{tag}={format_value(value)}" for tag, value in fields.items()]
        arguments.extend(["-overwrite_original", _file_argument(path)])
        self._run(arguments)
        logger.info("Wrote weather tags", extra={"photo": path.name})

    def _run(self, arguments: Sequence[str]) -> str:
        command = [self.executable, *arguments]
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.timeout,
                check=True,
            )
        except FileNotFoundError as exc:
            raise MetadataError(f"ExifTool executable {self.executable!r} not found.") from exc
        except subprocess.TimeoutExpired as exc:
            raise MetadataError(f"ExifTool timed out after {self.timeout}s.") from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
            raise MetadataError(f"ExifTool failed: {detail}") from exc
        except OSError as exc:
            raise MetadataError(f"Unable to run ExifTool: {exc}") from exc
        return completed.stdout
