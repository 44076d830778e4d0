"""Domain models shared across services."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, Iterator, Optional, Tuple


def format_value(value: Optional[float], placeholder: str = "--") -> str:
    """Render a measurement without trailing zeros (``24``, ``1012.02``)."""
    if value is None:
        return placeholder
    # repr is the shortest round-tripping form; Decimal expands any exponent.
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


@dataclass(frozen=True, slots=True)
class Reading:
    """A single weather sample parsed from the measurement log.

    Missing or out-of-range measurements are stored as ``None``.
    """

    timestamp: datetime
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    pressure: Optional[float] = None

    def present_fields(self) -> Dict[str, float]:
        """Return the measurements that exist, keyed by metadata tag name."""

        fields = {
            "AmbientTemperature": self.temperature,
            "Humidity": self.humidity,
            "Pressure": self.pressure,
        }
        return {name: value for name, value in fields.items() if value is not None}


@dataclass(frozen=True)
class ReadingSeries:
    """Readings ordered ascending by timestamp.

    The sort is stable, so readings that share a timestamp keep the order in
    which they were supplied.
    """

    readings: Tuple[Reading, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        ordered = tuple(sorted(self.readings, key=lambda reading: reading.timestamp))
        object.__setattr__(self, "readings", ordered)

    @classmethod
    def from_readings(cls, readings: Iterable[Reading]) -> "ReadingSeries":
        return cls(tuple(readings))

    def __len__(self) -> int:
        return len(self.readings)

    def __iter__(self) -> Iterator[Reading]:
        return iter(self.readings)

    def __getitem__(self, index: int) -> Reading:
        return self.readings[index]

    @property
    def first(self) -> Optional[Reading]:
        return self.readings[0] if self.readings else None

    @property
    def last(self) -> Optional[Reading]:
        return self.readings[-1] if self.readings else None


class MatchStatus(str, Enum):
    """Outcome of matching one capture time against the series."""

    matched = "Matched"
    no_target_timestamp = "NoTargetTimestamp"
    no_reading_within_threshold = "NoReadingWithinThreshold"


@dataclass(frozen=True, slots=True)
class MatchResult:
    status: MatchStatus
    nearest_reading: Optional[Reading] = None
    delta_minutes: float = math.inf

    @property
    def matched(self) -> bool:
        return self.status is MatchStatus.matched
