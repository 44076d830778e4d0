"""Nearest-timestamp matching of capture times against the reading series."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

from models.readings import MatchResult, MatchStatus, Reading, ReadingSeries


def find_match(
    target: Optional[datetime],
    series: ReadingSeries,
    threshold_minutes: float,
) -> MatchResult:
    """Return the reading closest in time to ``target``.

    The series is scanned front to back and the best candidate only changes on
    a strictly smaller delta, so when two readings are equally close the
    earlier one wins.
    """
    if target is None:
        return MatchResult(status=MatchStatus.no_target_timestamp)

    nearest: Optional[Reading] = None
    delta_minutes = math.inf

    for reading in series:
        diff = abs((target - reading.timestamp).total_seconds()) / 60.0
        if diff < delta_minutes:
            delta_minutes = diff
            nearest = reading

    if nearest is not None and delta_minutes <= threshold_minutes:
        status = MatchStatus.matched
    else:
        status = MatchStatus.no_reading_within_threshold

    return MatchResult(status=status, nearest_reading=nearest, delta_minutes=delta_minutes)
