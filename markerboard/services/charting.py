"""
Axis domains and sparkline points for marker charts.

Only the numbers are computed here; drawing belongs to the UI.
"""

import math
from collections.abc import Sequence
from datetime import timedelta

from markerboard.domain.models import ChartDomain, MarkerHistory, Measurement, SparklinePoint
from markerboard.domain.ranges import clamp, classify_status
from markerboard.services.history import chronological

# Share of the data spread added above and below the plotted values
Y_PADDING_RATIO = 0.35
MIN_SPREAD = 1e-6


def history_chart_domain(
    measurements: Sequence[Measurement], min_ref: float, max_ref: float
) -> ChartDomain:
    """
    Y-domain covering the reference band and every reading, with padding.

    The lower bound never dips below zero unless the data or the range is
    negative. A single reading gets one day of x padding on each side.
    Requires at least one measurement.
    """
    if not measurements:
        raise ValueError("history_chart_domain requires at least one measurement")

    ordered = chronological(measurements)
    values = [m.value for m in ordered if math.isfinite(m.value)]

    active_min = min([min_ref, *values])
    active_max = max([max_ref, *values])

    spread = active_max - active_min
    if spread <= MIN_SPREAD:
        spread = (abs(active_max) or 1) * 0.2

    padding = spread * Y_PADDING_RATIO
    y_min = active_min - padding
    y_max = active_max + padding

    if y_min < 0 <= active_min:
        y_min = 0.0
    if y_min >= y_max:
        y_max = y_min + 1

    x_min, x_max = ordered[0].date, ordered[-1].date
    if x_min == x_max:
        x_min -= timedelta(days=1)
        x_max += timedelta(days=1)

    return ChartDomain(y_min=y_min, y_max=y_max, x_min=x_min, x_max=x_max)


def sparkline_points(history: MarkerHistory, limit: int = 6) -> list[SparklinePoint]:
    """The last ``limit`` readings in chronological order, clamped to the display scale."""
    recent = history.measurements[:limit]
    points = []
    for reading in reversed(recent):
        points.append(
            SparklinePoint(
                measurement_id=reading.id,
                date=reading.date,
                value=reading.value,
                clamped_value=clamp(reading.value, history.display_min, history.display_max),
                status=classify_status(reading.value, history.min_ref, history.max_ref),
                has_note=bool((reading.note or "").strip()),
            )
        )
    return points
