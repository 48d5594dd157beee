"""
Delta and trend between a marker's two most recent readings.

Direction is judged by distance to the reference range, not by the sign of
the delta: 200 -> 180 against a 70-100 range is improving even though the
status stays ``high``. A marker with a goal band is also checked against it.
"""

from collections.abc import Sequence

from markerboard.domain.models import MarkerHistory, Measurement, Trend, TrendDirection
from markerboard.domain.ranges import distance_to_range, is_within_range


def compute_trend(
    measurements: Sequence[Measurement], min_ref: float, max_ref: float
) -> Trend | None:
    """
    Compare the latest reading with the one before it.

    ``measurements`` must already be latest-first (as ``MarkerHistory``
    provides them); the list is not re-sorted here. Returns ``None`` when
    fewer than two readings exist.
    """
    if len(measurements) < 2:
        return None

    latest, previous = measurements[0], measurements[1]
    latest_distance = distance_to_range(latest.value, min_ref, max_ref)
    previous_distance = distance_to_range(previous.value, min_ref, max_ref)

    if latest_distance < previous_distance:
        direction = TrendDirection.IMPROVING
    elif latest_distance > previous_distance:
        direction = TrendDirection.WORSENING
    else:
        direction = TrendDirection.NEUTRAL

    return Trend(
        delta=latest.value - previous.value,
        latest=latest,
        previous=previous,
        direction=direction,
        latest_distance=latest_distance,
        previous_distance=previous_distance,
    )


def trend_for(history: MarkerHistory) -> Trend | None:
    return compute_trend(history.measurements, history.min_ref, history.max_ref)


def within_goal_band(history: MarkerHistory) -> bool | None:
    """Whether the latest reading sits inside the marker's goal band.

    ``None`` when the marker has no goal band.
    """
    band = history.goal
    if band is None:
        return None
    return is_within_range(history.latest_measurement.value, band.target_min, band.target_max)
