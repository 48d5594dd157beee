"""
Tests for deltas and trend direction.
"""

from datetime import UTC, datetime

import pytest

from markerboard.domain.models import (
    HealthStatus,
    MarkerDefinition,
    MarkerGoalBand,
    Measurement,
    TrendDirection,
)
from markerboard.services.history import build_marker_history
from markerboard.services.trends import compute_trend, trend_for, within_goal_band


def _reading(reading_id: str, value: float, month: int) -> Measurement:
    return Measurement(
        id=reading_id, marker_id="ldl", value=value, date=datetime(2024, month, 1, tzinfo=UTC)
    )


LDL = MarkerDefinition(
    id="ldl", name="LDL", min_ref=70, max_ref=100, display_min=0, display_max=200
)


def test_fewer_than_two_readings_has_no_trend() -> None:
    assert compute_trend([], 70, 100) is None
    assert compute_trend([_reading("1", 90, 1)], 70, 100) is None


def test_moving_toward_range_is_improving_even_if_still_high() -> None:
    history = build_marker_history(LDL, [_reading("1", 120, 1), _reading("2", 110, 2)])
    assert history is not None

    trend = trend_for(history)

    assert trend is not None
    assert trend.delta == pytest.approx(-10)
    assert trend.direction == TrendDirection.IMPROVING
    assert history.status == HealthStatus.HIGH
    assert trend.latest_distance == pytest.approx(10)
    assert trend.previous_distance == pytest.approx(20)


def test_moving_away_is_worsening() -> None:
    trend = compute_trend([_reading("2", 60, 2), _reading("1", 65, 1)], 70, 100)

    assert trend is not None
    assert trend.direction == TrendDirection.WORSENING
    assert trend.delta == pytest.approx(-5)


def test_change_inside_range_is_neutral() -> None:
    trend = compute_trend([_reading("2", 95, 2), _reading("1", 75, 1)], 70, 100)

    assert trend is not None
    assert trend.direction == TrendDirection.NEUTRAL
    assert trend.delta == pytest.approx(20)


def test_only_the_two_latest_readings_count() -> None:
    readings = [_reading("3", 90, 3), _reading("2", 90, 2), _reading("1", 300, 1)]
    trend = compute_trend(readings, 70, 100)

    assert trend is not None
    assert trend.delta == 0
    assert trend.previous.id == "2"


def test_goal_band_is_checked_against_the_latest_reading() -> None:
    marker = LDL.model_copy(update={"goal": MarkerGoalBand(target_min=70, target_max=85)})

    inside = build_marker_history(marker, [_reading("1", 120, 1), _reading("2", 80, 2)])
    outside = build_marker_history(marker, [_reading("1", 80, 1), _reading("2", 95, 2)])

    assert inside is not None and outside is not None
    assert within_goal_band(inside) is True
    # In the reference range but outside the tighter goal band
    assert outside.status == HealthStatus.NORMAL
    assert within_goal_band(outside) is False


def test_no_goal_band_is_none() -> None:
    history = build_marker_history(LDL, [_reading("1", 80, 1)])

    assert history is not None
    assert within_goal_band(history) is None
