"""Unit tests for nearest-timestamp matching."""

from __future__ import annotations

import math
from datetime import datetime

import pytest

from models.readings import MatchStatus, Reading, ReadingSeries
from services.matcher import find_match


def _reading(hour: int, minute: int, temperature: float | None = None) -> Reading:
    """Helper to build readings on a fixed day."""

    return Reading(
        timestamp=datetime(2025, 11, 17, hour, minute),
        temperature=temperature,
        humidity=88.0,
        pressure=1012.02,
    )


@pytest.fixture()
def single_reading_series() -> ReadingSeries:
    return ReadingSeries.from_readings([_reading(4, 44, temperature=24.0)])


def test_match_within_threshold(single_reading_series: ReadingSeries) -> None:
    result = find_match(datetime(2025, 11, 17, 4, 50), single_reading_series, 30)

    assert result.status is MatchStatus.matched
    assert result.matched is True
    assert result.delta_minutes == pytest.approx(6.0)
    assert result.nearest_reading is not None
    assert result.nearest_reading.temperature == 24.0
    assert result.nearest_reading.humidity == 88.0
    assert result.nearest_reading.pressure == 1012.02


def test_nearest_reading_outside_threshold(single_reading_series: ReadingSeries) -> None:
    result = find_match(datetime(2025, 11, 17, 6, 0), single_reading_series, 30)

    assert result.status is MatchStatus.no_reading_within_threshold
    assert result.delta_minutes == pytest.approx(76.0)
    assert result.nearest_reading == single_reading_series[0]


def test_delta_equal_to_threshold_matches(single_reading_series: ReadingSeries) -> None:
    result = find_match(datetime(2025, 11, 17, 5, 14), single_reading_series, 30)

    assert result.status is MatchStatus.matched
    assert result.delta_minutes == pytest.approx(30.0)


def test_zero_threshold_requires_exact_match(single_reading_series: ReadingSeries) -> None:
    exact = find_match(datetime(2025, 11, 17, 4, 44), single_reading_series, 0)
    near = find_match(datetime(2025, 11, 17, 4, 44, 30), single_reading_series, 0)

    assert exact.status is MatchStatus.matched
    assert exact.delta_minutes == 0
    assert near.status is MatchStatus.no_reading_within_threshold


def test_target_before_readings_uses_absolute_delta(single_reading_series: ReadingSeries) -> None:
    result = find_match(datetime(2025, 11, 17, 4, 30), single_reading_series, 30)

    assert result.status is MatchStatus.matched
    assert result.delta_minutes == pytest.approx(14.0)


def test_returns_global_minimum() -> None:
    series = ReadingSeries.from_readings(
        [
            _reading(6, 0, temperature=3.0),
            _reading(4, 0, temperature=1.0),
            _reading(5, 10, temperature=2.0),
            _reading(7, 0, temperature=4.0),
        ]
    )

    result = find_match(datetime(2025, 11, 17, 5, 30), series, 60)

    assert result.nearest_reading is not None
    assert result.nearest_reading.temperature == 2.0
    assert result.delta_minutes == pytest.approx(20.0)


def test_equidistant_readings_prefer_the_earlier_one() -> None:
    series = ReadingSeries.from_readings(
        [_reading(5, 0, temperature=2.0), _reading(4, 0, temperature=1.0)]
    )

    result = find_match(datetime(2025, 11, 17, 4, 30), series, 30)

    assert result.status is MatchStatus.matched
    assert result.nearest_reading is not None
    assert result.nearest_reading.temperature == 1.0


def test_duplicate_timestamps_prefer_first_supplied() -> None:
    series = ReadingSeries.from_readings(
        [_reading(4, 0, temperature=1.0), _reading(4, 0, temperature=9.0)]
    )

    result = find_match(datetime(2025, 11, 17, 4, 5), series, 30)

    assert result.nearest_reading is not None
    assert result.nearest_reading.temperature == 1.0


@pytest.mark.parametrize("threshold", [0, 30, 10_000])
def test_empty_series_never_matches(threshold: float) -> None:
    result = find_match(datetime(2025, 11, 17, 4, 50), ReadingSeries(), threshold)

    assert result.status is MatchStatus.no_reading_within_threshold
    assert result.nearest_reading is None
    assert math.isinf(result.delta_minutes)


@pytest.mark.parametrize("threshold", [0, 30, 10_000])
def test_missing_target_is_not_conflated_with_threshold_miss(
    single_reading_series: ReadingSeries, threshold: float
) -> None:
    result = find_match(None, single_reading_series, threshold)

    assert result.status is MatchStatus.no_target_timestamp
    assert result.nearest_reading is None
    assert math.isinf(result.delta_minutes)


def test_missing_target_does_not_scan_series() -> None:
    class ExplodingSeries(ReadingSeries):
        def __iter__(self):  # pragma: no cover - must not be called
            raise AssertionError("series should not be scanned without a target")

    result = find_match(None, ExplodingSeries(), 30)

    assert result.status is MatchStatus.no_target_timestamp


def test_series_is_sorted_on_construction() -> None:
    series = ReadingSeries.from_readings([_reading(7, 0), _reading(4, 0), _reading(5, 0)])

    assert [reading.timestamp.hour for reading in series] == [4, 5, 7]
    assert series.first is not None and series.first.timestamp.hour == 4
    assert series.last is not None and series.last.timestamp.hour == 7


def test_reading_is_immutable() -> None:
    reading = _reading(4, 44, temperature=24.0)

    with pytest.raises(AttributeError):
        reading.temperature = 25.0  # type: ignore[misc]


def test_present_fields_skip_absent_values() -> None:
    reading = Reading(timestamp=datetime(2025, 11, 17, 4, 44), temperature=None, humidity=88.0, pressure=1012.02)

    assert reading.present_fields() == {"Humidity": 88.0, "Pressure": 1012.02}
